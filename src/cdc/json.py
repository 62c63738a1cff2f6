''' One interface over whichever JSON library is the fastest one installed.
    Every line of a CDC stream is decoded through :func:`loads`, which makes
    this choice the dominant cost of reading a busy table.

    :func:`loads` accepts bytes or str. :func:`dumps` always returns bytes.
    :class:`DecodeError` is what :func:`loads` raises for malformed input,
    and :data:`library` names the implementation that was picked: msgspec
    when available (it is a declared dependency), otherwise orjson,
    otherwise the standard library.
'''

msgspec = None
orjson = None
json = None

# Stop at the first library that imports; the slower ones are never loaded.

try:
    import msgspec
except ImportError:
    try:
        import orjson
    except ImportError:
        import json


def json_dumps(*args, **kwargs):
    return json.dumps(*args, **kwargs).encode()


if msgspec is not None:
    library = 'msgspec'
    dumps = msgspec.json.Encoder().encode
    loads = msgspec.json.Decoder().decode
    DecodeError = msgspec.DecodeError

elif orjson is not None:
    library = 'orjson'
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = orjson.JSONDecodeError

else:
    library = 'json'
    dumps = json_dumps
    loads = json.loads

    # Bytes that are not UTF-8 fail with UnicodeDecodeError, not with
    # JSONDecodeError. ValueError covers both.

    DecodeError = ValueError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
