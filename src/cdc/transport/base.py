"""Transport exceptions.

These live outside :mod:`cdc.protocol` so the protocol remains independent
of how bytes are moved.
"""

from __future__ import annotations


class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A socket did not become ready within the configured timeout."""

    def __init__(self, message: str = "Request timed out"):
        super().__init__(message)


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""
