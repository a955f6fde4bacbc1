''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`.
'''

# The business about conditionally importing the libraries is intended to
# avoid importing less efficient libraries if they are not available.

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


# The msgspec 'encode' operation returns bytes, as does orjson.dumps. To
# maintain alignment all 'dumps' methods need to do so as well, and all of
# them produce compact output with the key order preserved.

def json_dumps(thing):
    return json.dumps(thing, separators=(',', ':'), allow_nan=False).encode()

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    errors = (TypeError, ValueError, OverflowError, msgspec.DecodeError)
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
    errors = (TypeError, ValueError, OverflowError, orjson.JSONDecodeError)
else:
    dumps = json_dumps
    loads = json.loads
    errors = (TypeError, ValueError, OverflowError)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
