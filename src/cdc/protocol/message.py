""" Class representations of the two kinds of line carried by a CDC stream.
    Every line is parsed as JSON and then classified, by structure alone,
    into either a :class:`SchemaMessage` or a :class:`DataMessage`; nothing
    downstream inspects the raw JSON tree.
"""

from .. import json
from . import fields


class ProtocolError(Exception):
    """ The server sent something this client cannot interpret.
    """


class ServerError(ProtocolError):
    """ The server explicitly rejected a request.
    """


class MissingValueError(ProtocolError):
    """ A data line lacks a value for one of the current columns.
    """

    def __init__(self, name):
        ProtocolError.__init__(self, 'No value for key found: ' + name)
        self.name = name



class Schema:
    """ An immutable snapshot of the column layout announced by a schema
        line: the raw *text* of that line, and the ordered column *names*
        with their parallel declared *types*. Instances are never modified;
        a new schema line produces a new :class:`Schema`.
    """

    __slots__ = ('text', 'names', 'types')

    # Type assigned to a column whose declared type is not a plain string,
    # such as an Avro union for a nullable generated column.

    string_type = 'char(50)'
    undefined_type = 'undefined'

    def __init__(self, text, names, types):

        names = tuple(names)
        types = tuple(types)

        if len(names) != len(types):
            raise ValueError('column names and types must have equal length')

        object.__setattr__(self, 'text', text)
        object.__setattr__(self, 'names', names)
        object.__setattr__(self, 'types', types)


    def __setattr__(self, name, value):
        raise AttributeError('Schema instances are immutable')


    def __len__(self):
        return len(self.names)


    def __eq__(self, other):
        if not isinstance(other, Schema):
            return NotImplemented
        return self.names == other.names and self.types == other.types


    def __hash__(self):
        return hash((self.names, self.types))


    def __repr__(self):
        pairs = ', '.join('%s:%s' % pair for pair in zip(self.names, self.types))
        return 'Schema(' + pairs + ')'


    def mapping(self):
        """ Return a dictionary of column name to column type.
        """

        return dict(zip(self.names, self.types))


    @classmethod
    def from_fields(cls, text, entries):
        """ Build a :class:`Schema` from the *entries* of a "fields" array.
            Each entry prefers its "real_type" over the generated "type";
            an entry lacking a name gets an empty one. Any malformed entry
            rejects the whole array, so a caller never sees half a schema.
        """

        names = list()
        types = list()

        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ProtocolError('Invalid schema field at index %d: %r' % (index, entry))

            name = entry.get('name', '')
            if not isinstance(name, str):
                raise ProtocolError('Invalid schema field name at index %d: %r' % (index, name))

            if 'real_type' in entry:
                declared = entry['real_type']
            elif 'type' in entry:
                declared = entry['type']
            else:
                declared = cls.undefined_type

            if not isinstance(declared, str):
                declared = cls.string_type

            names.append(name)
            types.append(declared)

        return cls(text, names, types)


# end of class Schema



class SchemaMessage:

    def __init__(self, schema):
        self.schema = schema


    def __repr__(self):
        return 'SchemaMessage(' + repr(self.schema) + ')'



class DataMessage:
    """ A single change event: the parsed JSON object, keyed by column name.
    """

    def __init__(self, values):
        self.values = values


    def __repr__(self):
        return 'DataMessage(' + repr(self.values) + ')'


    def project(self, names):
        """ Return the stringified value of each column in *names*, in
            order. A missing column raises :class:`MissingValueError`;
            missing values are never defaulted.
        """

        projected = list()

        for name in names:
            try:
                value = self.values[name]
            except KeyError:
                raise MissingValueError(name)

            projected.append(stringify(value))

        return tuple(projected)


# end of class DataMessage



def is_schema(parsed):
    """ A schema is an object with a non-empty "fields" array whose first
        element carries a "name".
    """

    if not isinstance(parsed, dict):
        return False

    entries = parsed.get('fields')

    if isinstance(entries, list) and entries:
        first = entries[0]
        return isinstance(first, dict) and 'name' in first

    return False



def classify(line):
    """ Parse one line of the stream, provided as bytes without its
        terminator, and return the matching :class:`SchemaMessage` or
        :class:`DataMessage`.
    """

    try:
        parsed = json.loads(bytes(line))
    except json.DecodeError as e:
        raise ProtocolError('Failed to parse JSON: ' + str(e))

    if is_schema(parsed):
        text = bytes(line).decode('utf-8', errors='replace')
        schema = Schema.from_fields(text, parsed['fields'])
        return SchemaMessage(schema)

    if not isinstance(parsed, dict):
        raise ProtocolError('Expected a JSON object, received: ' + type(parsed).__name__)

    return DataMessage(parsed)



def stringify(value):
    """ Render a JSON scalar the way it is presented in a row. Strings pass
        through verbatim; true and false become the words "true" and "false";
        numbers are rendered in decimal; null, and anything that is not a
        scalar, becomes an empty string.
    """

    # bool is checked before int: True is an instance of int.

    if isinstance(value, str):
        return value
    if value is True:
        return 'true'
    if value is False:
        return 'false'
    if isinstance(value, (int, float)):
        return str(value)

    return ''


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
