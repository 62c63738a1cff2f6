from . import fields
from . import message
from . import wire


"""
CDC Protocol Layer
==================

Everything needed to speak the data-router CDC protocol, independent of how
the bytes are moved.

Handshake, in order, each step acknowledged by exactly ``OK\\n``:

    client -> server    hex(user + ":") hex(sha1(password))
    client -> server    REGISTER UUID=<client id>-<version>, TYPE=JSON
    client -> server    REQUEST-DATA <table>[ <domain-server_id-sequence>]

After the request the server sends newline-terminated JSON lines:

    schema line     {"fields": [{"name": ..., "real_type"|"type": ...}, ...]}
    data line       {"<column>": <value>, ...}

A schema line applies to every data line after it, until the next schema
line. A line starting with ``ERR`` is a server-reported error. The client
ends the session by sending ``CLOSE``.

Modules
-------

fields.py
    Framing constants and session state names.

wire.py
    Builds the outgoing messages and recognizes acknowledgements.

message.py
    Classifies incoming lines into schema and data messages.
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
