from .protocol import fields


class Row:
    """ A :class:`Row` is one change event, with its values bound to the
        column names and types in effect when the event was read. Those
        columns are a snapshot: a schema change arriving later on the same
        :class:`cdc.Connection` does not affect rows already returned.

        Values are always strings; see :func:`cdc.protocol.message.stringify`
        for how JSON values are rendered. Rows are immutable.
    """

    __slots__ = ('_keys', '_types', '_values')

    def __init__(self, keys, types, values):

        keys = tuple(keys)
        types = tuple(types)
        values = tuple(values)

        if len(keys) == 0:
            raise ValueError('a Row requires at least one column')

        if len(keys) != len(types) or len(keys) != len(values):
            raise ValueError('column names, types, and values must have equal length')

        object.__setattr__(self, '_keys', keys)
        object.__setattr__(self, '_types', types)
        object.__setattr__(self, '_values', values)


    def __setattr__(self, name, value):
        raise AttributeError('Row instances are immutable')


    def __delattr__(self, name):
        raise AttributeError('Row instances are immutable')


    def __len__(self):
        return len(self._values)


    def __getitem__(self, key):
        return self.value(key)


    def __iter__(self):
        return iter(self._values)


    def __eq__(self, other):
        if not isinstance(other, Row):
            return NotImplemented

        return (self._keys, self._types, self._values) == \
               (other._keys, other._types, other._values)


    def __hash__(self):
        return hash((self._keys, self._types, self._values))


    def __repr__(self):
        pairs = ', '.join('%s=%r' % pair for pair in zip(self._keys, self._values))
        return 'Row(' + pairs + ')'


    def field_count(self):
        return len(self._values)


    def value(self, key):
        """ Return the value of a column identified either by its integer
            position or by its name. Names are matched exactly; a name that
            is not one of this row's columns raises KeyError, and an index
            out of range raises IndexError.
        """

        if isinstance(key, int):
            return self._values[key]

        try:
            index = self._keys.index(key)
        except ValueError:
            raise KeyError('no such column: ' + repr(key))

        return self._values[index]


    def key(self, index):
        """ Return the name of the column at *index*.
        """

        return self._keys[index]


    def type(self, index):
        """ Return the declared type of the column at *index*.
        """

        return self._types[index]


    def keys(self):
        return self._keys


    def types(self):
        return self._types


    def values(self):
        return self._values


    def as_dict(self):
        return dict(zip(self._keys, self._values))


    def gtid(self):
        """ Return the stream position of this row, in the same
            domain-server_id-sequence form accepted by
            :func:`cdc.Connection.request`, so that a consumer can resume
            from the last row it processed.
        """

        parts = (self.value(fields.DOMAIN),
                 self.value(fields.SERVER_ID),
                 self.value(fields.SEQUENCE))

        return '-'.join(parts)


# end of class Row


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
