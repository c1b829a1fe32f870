""" Exceptions raised by the messaging channel. Every exception carries a
    *kind*, the short string that identifies the error on the wire, and a
    *message*. A :class:`RemoteError` is the local representation of an
    error raised on the other side of the channel.
"""

from .protocol import fields


class ChannelError(Exception):
    """ Base class for all channel errors. The *kind* defaults to the class
        name, which is also what gets sent to a peer if one of these is
        raised inside a listener callback.
    """

    kind = None

    def __init__(self, message='', kind=None):

        Exception.__init__(self, message)
        self.message = message

        if kind is not None:
            self.kind = kind
        elif self.kind is None:
            self.kind = type(self).__name__


# end of class ChannelError



class RemoteError(ChannelError):
    """ The peer rejected a fetch request. The *kind* and *message* are
        whatever the peer put on the wire; *debug*, if present, is the
        formatted traceback from the remote listener.
    """

    def __init__(self, message='', kind=None, debug=None):

        if kind is None:
            kind = fields.KIND_ERROR

        ChannelError.__init__(self, message, kind)
        self.debug = debug


    def __repr__(self):
        return "%s(kind=%r, message=%r)" % (type(self).__name__, self.kind, self.message)


# end of class RemoteError



class FetchTimeout(ChannelError):
    """ No response arrived for a fetch request before its timeout expired.
    """

    kind = fields.KIND_TIMEOUT


class ChannelClosed(ChannelError):
    """ The channel was closed; pending fetch requests are rejected with
        this error, and new requests cannot be issued.
    """

    kind = fields.KIND_CLOSED


class EnvelopeError(ChannelError, ValueError):
    """ An envelope is structurally invalid and cannot be processed.
    """

    kind = fields.KIND_ENVELOPE


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
