""" Python client for the CDC (change data capture) streaming protocol of a
    data-router service. A :class:`Connection` authenticates, registers for
    JSON data, requests the change stream of one table, and then returns
    each change event as an immutable :class:`Row`.
"""

# Utility components.

from . import config
from . import json
version = __version__ = config.version

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .connection import Connection
from .row import Row

from .config import ConfigurationError
from .protocol.message import MissingValueError, ProtocolError, Schema, ServerError
from .transport import TransportConnectionError, TransportError, TransportTimeout

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
