"""Protocol constants.

Keep these in one place to avoid stringly-typed envelope handling.
"""

# Envelope keys, as they appear on the wire.

ID = "id"
NAME = "name"
DATA = "data"
ERROR = "error"
OPTIONS = "options"

# Keys of the error block on a rejection.

KIND = "kind"
MESSAGE = "message"
DEBUG = "debug"

# Fetch option keys.

TIMEOUT = "timeout"

# Error kinds with a fixed meaning.

KIND_ERROR = "Error"
KIND_TIMEOUT = "TimeOut"
KIND_CLOSED = "Closed"
KIND_ENVELOPE = "EnvelopeError"

# Reasons reported for envelopes that are dropped during dispatch.

UNMATCHED_RESPONSE = "unmatched response"
NO_LISTENER = "no listener"

# On-the-wire protocol version, used by framed transports.

PROTOCOL_VERSION = "a"
