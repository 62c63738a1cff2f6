""" The :class:`Connection` is the client side of one CDC session: a single
    TCP connection to a data-router, subscribed to a single table.
"""

import logging

from . import config
from . import transport
from .protocol import fields
from .protocol import wire
from .protocol.message import ProtocolError, SchemaMessage, ServerError, classify
from .row import Row

logger = logging.getLogger(__name__)


class Connection:
    """ A :class:`Connection` walks the protocol handshake and then reads
        change events, one :class:`cdc.Row` at a time::

            connection = cdc.Connection('127.0.0.1', 4001, 'user', 'secret')

            if connection.connect() and connection.request('db.table'):
                for row in connection:
                    print(row.gtid(), row.as_dict())

            print(connection.error)
            connection.close()

        None of the public methods raise on network, protocol, or data
        errors. A failing method returns False (or None, for :func:`read`)
        and leaves a human-readable description in :attr:`error`.

        A failed :func:`connect` or :func:`request` drops the connection;
        the caller must :func:`connect` again. So does a :func:`read` that
        fails because the socket itself failed or the server hung up. A read
        that times out, or that received a line it could not use, leaves the
        connection in place, so that a quiet table can simply be read again.

        The *timeout*, in seconds, bounds every individual wait for the
        socket to become readable or writable. If it is not specified the
        process default from :mod:`cdc.config` applies.

        :ivar error: The description of the most recent failure, or an
            empty string if the most recent operation succeeded.
        :ivar state: One of the session states in :mod:`cdc.protocol.fields`.
    """

    def __init__(self, address, port, user, password, timeout=None):

        self.address = address
        self.port = port
        self.user = user
        self.password = password
        self.timeout = config.timeout(timeout)

        self.error = ''
        self.state = fields.UNCONNECTED

        self._socket = None
        self._schema = None

        # Bytes of a line that has not been terminated yet. This survives a
        # timed out read, so that a later read resumes mid-line instead of
        # parsing a fragment.

        self._buffer = bytearray()


    def __del__(self):
        if getattr(self, '_socket', None) is not None:
            self.close()


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    def __iter__(self):
        """ Yield rows until :func:`read` fails. Check :attr:`error` after
            the loop ends to find out why.
        """

        while True:
            row = self.read()
            if row is None:
                return
            yield row


    def __repr__(self):
        return 'Connection(%s:%s, %s)' % (self.address, self.port, self.state)


    @property
    def connected(self):
        return self._socket is not None


    @property
    def schema(self):
        """ The raw text of the most recent schema line, or an empty string
            if no schema has been received.
        """

        if self._schema is None:
            return ''

        return self._schema.text


    def fields(self):
        """ Return a dictionary mapping each current column name to its
            declared type.
        """

        if self._schema is None:
            return dict()

        return self._schema.mapping()


    def connect(self):
        """ Open the TCP connection, authenticate, and register for JSON
            data. Any existing session is closed first. Returns True if the
            connection is ready for :func:`request`.
        """

        self.close()
        self.error = ''
        self._schema = None
        self._buffer.clear()

        socket = transport.Socket(self.timeout)

        try:
            socket.open(self.address, self.port)
        except (config.ConfigurationError, transport.TransportError) as e:
            self.error = str(e)
            return False

        self._socket = socket

        try:
            self._handshake(wire.auth_token(self.user, self.password), 'authentication')
            self.state = fields.AUTHENTICATED

            self._handshake(wire.register_message(fields.JSON), 'registration')
            self.state = fields.REGISTERED

        except (transport.TransportError, ProtocolError) as e:
            self.error = str(e)
            self._release()
            return False

        logger.info("Connected to %s:%s as %s", self.address, self.port, self.user)
        return True


    def request(self, table, gtid=''):
        """ Ask for the change stream of *table*, in database.table form.
            If *gtid* is given, in the domain-server_id-sequence form
            returned by :func:`cdc.Row.gtid`, the stream resumes from that
            position. This only sends the request; the response arrives
            as the first line(s) consumed by :func:`read`.
        """

        self.error = ''

        if self.state not in (fields.REGISTERED, fields.STREAMING):
            self.error = 'Cannot request data: not connected'
            return False

        try:
            self._socket.write_all(wire.request_message(table, gtid))
        except transport.TransportError as e:
            self.error = 'Failed to write request: ' + str(e)
            self._release()
            return False

        logger.debug("Requested %s from position %r", table, gtid)
        self.state = fields.STREAMING
        return True


    def read(self):
        """ Return the next :class:`cdc.Row` from the stream, or None if
            the read failed. Schema lines are consumed here and are never
            returned; however many of them arrive in a row, the call only
            returns once a data line is read or something goes wrong.
        """

        self.error = ''

        if self.state != fields.STREAMING:
            self.error = 'Cannot read data: no data has been requested'
            return None

        try:
            while True:
                message = classify(self._read_line())

                if isinstance(message, SchemaMessage):
                    self._schema = message.schema
                    logger.debug("Schema changed: %r", self._schema)
                    continue

                return self._build_row(message)

        except transport.TransportTimeout as e:
            self.error = str(e)
        except transport.TransportError as e:
            self.error = 'Failed to read row: ' + str(e)
            self._release()
        except ProtocolError as e:
            self.error = str(e)

        return None


    def close(self):
        """ Send the close message, if possible, and drop the connection.
            Calling this on a closed connection does nothing. Errors are
            logged, never reported.
        """

        socket = self._socket

        if socket is None:
            return

        try:
            socket.write_all(fields.CLOSE_MESSAGE)
        except transport.TransportError as e:
            logger.warning("Error sending close message: %s", e)

        self._release()
        logger.info("Disconnected from %s:%s", self.address, self.port)


    def _release(self):

        socket = self._socket
        self._socket = None
        self.state = fields.UNCONNECTED
        self._buffer.clear()

        if socket is not None:
            try:
                socket.close()
            except OSError as e:
                logger.warning("Error closing socket: %s", e)


    def _handshake(self, message, step):
        """ Send one handshake *message* and require the OK acknowledgement,
            which must be exactly one line reading ``OK``.
        """

        logger.debug("Sending %s message", step)

        try:
            self._socket.write_all(message)
        except transport.TransportError as e:
            raise type(e)('Failed to write ' + step + ' message: ' + str(e)) from e

        try:
            response = self._read_response()
        except transport.TransportError as e:
            raise type(e)('Failed to read ' + step + ' response: ' + str(e)) from e

        if not wire.is_ok(response):
            text = response.decode('utf-8', errors='replace').rstrip('\n')
            raise ServerError(step.capitalize() + ' failed: ' + text)


    def _read_response(self):
        """ Read a handshake response up to and including its terminator.
            The response may arrive split across several segments; it is
            read a byte at a time so that nothing after the terminator is
            consumed. A response longer than one chunk is cut short and
            will not compare equal to the acknowledgement.
        """

        response = bytearray()

        while len(response) < transport.tcp.CHUNK_SIZE:
            byte = self._socket.read_some(1)

            if not byte:
                continue

            response += byte

            if byte == fields.TERMINATOR:
                break

        return bytes(response)


    def _read_line(self):
        """ Read one line, without its terminator, a byte at a time. A line
            beginning with the server's ERR marker is an error as soon as
            the marker is seen; the rest of that line is not waited for.
        """

        buffer = self._buffer

        while True:
            byte = self._socket.read_some(1)

            if not byte:
                continue

            if byte == fields.TERMINATOR:
                line = bytes(buffer)
                buffer.clear()
                return line

            buffer += byte

            if wire.is_error(buffer):
                text = buffer.decode('utf-8', errors='replace')
                buffer.clear()
                raise ServerError('Server responded with an error: ' + text)


    def _build_row(self, message):

        schema = self._schema

        if schema is None or len(schema) == 0:
            raise ProtocolError('Received data before any schema')

        values = message.project(schema.names)
        return Row(schema.names, schema.types, values)


# end of class Connection


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
