"""Timeout-bounded TCP transport.

The socket is kept in non-blocking mode; every read and write is preceded by
a readiness wait on a :class:`zmq.Poller`, which is what enforces the timeout.
Callers see a blocking interface that gives up after ``timeout`` seconds.
"""

from __future__ import annotations

import logging
import socket as pysocket
from typing import Optional

import zmq

from .. import config
from .base import TransportConnectionError, TransportError, TransportTimeout

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024

_EVENT_NAMES = (
    (zmq.POLLIN, "POLLIN"),
    (zmq.POLLPRI, "POLLPRI"),
    (zmq.POLLOUT, "POLLOUT"),
    (zmq.POLLERR, "POLLERR"),
)


def event_names(events: int) -> str:
    """Describe a poll event mask, e.g. ``'POLLIN POLLERR'``."""
    return " ".join(name for flag, name in _EVENT_NAMES if events & flag)


def _describe(exc: OSError) -> str:
    return exc.strerror or str(exc)


class Socket:
    """A single TCP connection with timeout-bounded reads and writes.

    Usage::

        sock = Socket(timeout=10)
        sock.open("127.0.0.1", 4001)
        sock.write_all(b"CLOSE")
        sock.close()
    """

    def __init__(self, timeout: float):
        self.timeout = timeout
        self.sock: Optional[pysocket.socket] = None
        self.poller = zmq.Poller()

    @property
    def is_open(self) -> bool:
        return self.sock is not None

    @property
    def timeout_ms(self) -> int:
        return int(self.timeout * 1000)

    def open(self, address: str, port: int) -> None:
        """Connect to *address*:*port* and switch the socket to non-blocking.

        Raises:
            ConfigurationError: If *address* is not a numeric IPv4 address.
            TransportError: If the socket cannot be created or configured.
            TransportConnectionError: If the connection attempt fails.
        """
        address = config.address(address)
        port = config.port(port)

        try:
            sock = pysocket.socket(pysocket.AF_INET, pysocket.SOCK_STREAM, pysocket.IPPROTO_TCP)
        except OSError as e:
            raise TransportError("Failed to create socket: " + _describe(e)) from e

        try:
            sock.settimeout(self.timeout)
            sock.connect((address, port))
        except OSError as e:
            sock.close()
            raise TransportConnectionError("Failed to connect: " + _describe(e)) from e

        try:
            sock.setblocking(False)
        except OSError as e:
            sock.close()
            raise TransportError("Failed to set socket non-blocking: " + _describe(e)) from e

        self.sock = sock
        logger.debug("Socket connected to %s:%d", address, port)

    def close(self) -> None:
        sock = self.sock
        if sock is None:
            return

        self.sock = None
        try:
            self.poller.unregister(sock)
        except KeyError:
            pass
        sock.close()

    def _wait(self, events: int) -> bool:
        sock = self.sock
        if sock is None or sock.fileno() == -1:
            raise TransportConnectionError("Error when waiting event; invalid descriptor")

        # Registering an already registered socket replaces its event mask.
        self.poller.register(sock, events)

        while True:
            try:
                ready = self.poller.poll(self.timeout_ms)
            except zmq.error.InterruptedSystemCall:
                continue
            except zmq.ZMQError as e:
                raise TransportError("Failed to wait for event: " + str(e)) from e
            break

        # For native sockets the poller reports the descriptor number rather
        # than the registered object. Only this socket is ever registered,
        # so every entry belongs to it.
        revents = 0
        for _descriptor, flags in ready:
            revents |= flags

        # The poller folds hang-up and invalid descriptor conditions into
        # POLLERR for native sockets.
        if revents & zmq.POLLERR:
            raise TransportConnectionError("Error when waiting event; " + event_names(revents))

        return bool(revents & events)

    def wait_readable(self) -> bool:
        """Wait up to ``timeout`` seconds for data. False on timeout."""
        return self._wait(zmq.POLLIN)

    def wait_writable(self) -> bool:
        """Wait up to ``timeout`` seconds for buffer space. False on timeout."""
        return self._wait(zmq.POLLOUT)

    def read_some(self, size: int = CHUNK_SIZE) -> bytes:
        """Return what a single ``recv(size)`` yields once the socket is
        readable. This is not a read-exactly primitive: the result may be
        shorter than *size*, and is empty when the read would have blocked.

        Raises:
            TransportTimeout: If no data arrives within the timeout.
            TransportConnectionError: If the server closed the connection.
            TransportError: For any other socket error.
        """
        if not self.wait_readable():
            raise TransportTimeout()

        while True:
            try:
                data = self.sock.recv(size)
            except InterruptedError:
                continue
            except BlockingIOError:
                return b""
            except OSError as e:
                raise TransportError("Failed to read data: " + _describe(e)) from e
            break

        if not data:
            raise TransportConnectionError("Connection closed by server")

        return data

    def write_all(self, data: bytes) -> int:
        """Send all of *data*, waiting for writability between partial sends.

        Returns:
            Number of bytes written, always ``len(data)``.

        Raises:
            TransportTimeout: If the socket stays unwritable past the timeout.
            TransportError: For any other socket error.
        """
        view = memoryview(data)
        sent = 0

        while sent < len(view):
            if not self.wait_writable():
                raise TransportTimeout()

            try:
                sent += self.sock.send(view[sent:])
            except (InterruptedError, BlockingIOError):
                continue
            except OSError as e:
                raise TransportError("Failed to write data: " + _describe(e)) from e

        return sent
