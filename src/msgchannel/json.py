''' Wrapper module for the equivalent of :func:`json.loads` and
    :func:`json.dumps`, backed by orjson.
'''

import orjson


# orjson.dumps returns bytes rather than str; everything downstream of this
# module expects bytes on the way out, and accepts bytes or str on the way in.

def dumps(value):
    return orjson.dumps(value, option=orjson.OPT_NON_STR_KEYS)


loads = orjson.loads

JSONDecodeError = orjson.JSONDecodeError
JSONEncodeError = orjson.JSONEncodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
