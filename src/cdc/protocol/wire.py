from __future__ import annotations

import hashlib

from . import fields


def hexlify(data: bytes) -> str:
    """Lowercase hex, two characters per byte, no separators."""
    return data.hex()


def auth_token(user: str, password: str) -> bytes:
    """
    Build the authentication message sent as the first protocol step.

    Layout:
        hex(user + ":") hex(sha1(password))

    There is no salt and no per-session nonce; the token for a given
    user/password pair never changes.
    """

    prefix = hexlify((user + ":").encode("utf-8"))
    digest = hexlify(hashlib.sha1(password.encode("utf-8")).digest())
    return (prefix + digest).encode("ascii")


def register_message(format: str = fields.JSON) -> bytes:

    if format not in fields.FORMATS:
        raise ValueError("unsupported data format: " + repr(format))

    return (fields.REGISTER_PREFIX + format).encode("ascii")


def request_message(table: str, gtid: str = "") -> bytes:
    """
    ``REQUEST-DATA <table>``, with ``' ' + gtid`` appended only when a
    position was supplied.
    """

    message = fields.REQUEST_PREFIX + table

    if gtid:
        message += " " + gtid

    return message.encode("utf-8")


def is_ok(response: bytes) -> bool:
    """The whole response line, terminator included, must be ``OK\\n``."""
    return bytes(response) == fields.OK_RESPONSE


def is_error(line) -> bool:
    """True once a partial line starts with the server's ERR marker. Fewer
    than three bytes is never an error yet."""
    prefix = fields.ERROR_PREFIX
    return len(line) >= len(prefix) and line[:len(prefix)] == prefix
