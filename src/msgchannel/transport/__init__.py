"""Transport layer implementations.

The ZeroMQ transport is imported on demand, via
:mod:`msgchannel.transport.zmq`, so the in-memory pipe can be used without
creating a ZeroMQ context.
"""

from .base import (
    Transport,
    TransportError,
    TransportClosed,
    attach,
)

from . import codec
from . import memory
from .memory import Port, pipe
