"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

from .. import config

OK_RESPONSE = b"OK\n"
ERROR_PREFIX = b"ERR"
TERMINATOR = b"\n"

CLOSE_MESSAGE = b"CLOSE"
REGISTER_PREFIX = "REGISTER UUID=" + config.client_id + "-" + config.version + ", TYPE="
REQUEST_PREFIX = "REQUEST-DATA "

# Only JSON is implemented; the server also knows AVRO.
JSON = "JSON"
FORMATS = (JSON,)

# Columns that together form the position of a row in the change stream.
DOMAIN = "domain"
SERVER_ID = "server_id"
SEQUENCE = "sequence"

# Session states, in handshake order.
UNCONNECTED = "UNCONNECTED"
AUTHENTICATED = "AUTHENTICATED"
REGISTERED = "REGISTERED"
STREAMING = "STREAMING"
