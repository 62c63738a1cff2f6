"""Transport layer: a timeout-bounded TCP socket."""

from .base import (
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)
from .tcp import Socket
