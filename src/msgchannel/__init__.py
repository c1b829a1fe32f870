""" Python implementation of a bidirectional messaging channel: named
    fire-and-forget notifications and correlated request/response fetches
    between two endpoints, over whatever duplex transport connects them.
"""

# Utility components.

from . import json
from . import config
from . import errors

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .channel import Channel, Event, Registration
from .config import ChannelOptions
from .errors import ChannelError, RemoteError, FetchTimeout, ChannelClosed, EnvelopeError
from .protocol import Envelope, ErrorInfo
from .transport import attach, pipe

__version__ = "0.1.0"

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
