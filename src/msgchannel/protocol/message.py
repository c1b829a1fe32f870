""" Envelope representation for the messaging channel. An :class:`Envelope`
    is the unit exchanged with the transport; it is converted to and from
    the plain dictionary shape that transports move around.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .. import errors
from . import fields


@dataclass(frozen=True)
class ErrorInfo:
    """ The error block attached to a rejection envelope.
    """

    kind: str
    message: str
    debug: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        error = {fields.KIND: self.kind, fields.MESSAGE: self.message}
        if self.debug is not None:
            error[fields.DEBUG] = self.debug
        return error

    @classmethod
    def from_dict(cls, error: Mapping[str, Any]) -> "ErrorInfo":

        if not isinstance(error, Mapping):
            raise errors.EnvelopeError("error block must be a mapping, not %s" % (type(error).__name__))

        kind = error.get(fields.KIND, fields.KIND_ERROR)
        message = error.get(fields.MESSAGE, '')
        debug = error.get(fields.DEBUG)

        if kind is None:
            kind = fields.KIND_ERROR
        if message is None:
            message = ''

        if not isinstance(kind, str) or not isinstance(message, str):
            raise errors.EnvelopeError("error kind and message must be strings")

        if debug is not None and not isinstance(debug, str):
            raise errors.EnvelopeError("error debug field must be a string")

        return cls(kind, message, debug)

    @classmethod
    def from_exception(cls, exception: BaseException, debug: Optional[str] = None) -> "ErrorInfo":
        """ Describe a local exception for transmission to the peer. Channel
            errors carry their own *kind*; anything else is identified by
            its class name.
        """

        if isinstance(exception, errors.ChannelError):
            kind = exception.kind
            message = exception.message
        else:
            kind = type(exception).__name__
            message = str(exception)

        return cls(str(kind), str(message), debug)


def is_id(value: Any) -> bool:
    """ Return True if *value* is usable as a correlation id: a non-negative
        integer. Booleans are integers in Python, but not ids.
    """

    if isinstance(value, bool):
        return False
    return isinstance(value, int) and value >= 0


@dataclass(frozen=True)
class Envelope:
    """ One message between two channel endpoints.

        A notification has no *id*; a request has both an *id* and a *name*;
        a response or rejection has an *id* and no *name*. Rejections carry
        an *error* and no *data*. Outbound requests carry their fetch
        *options*.
    """

    id: Optional[int] = None
    name: Optional[str] = None
    data: Any = None
    error: Optional[ErrorInfo] = None
    options: Optional[Dict[str, Any]] = field(default=None)

    def is_response(self) -> bool:
        """ True for responses and rejections: a numeric id with no name.
        """
        return is_id(self.id) and self.name is None

    def is_rejection(self) -> bool:
        return self.is_response() and self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """ Return the wire shape of this envelope. The *error* and *options*
            keys are omitted when not set.
        """

        envelope = {
            fields.ID: self.id,
            fields.NAME: self.name,
            fields.DATA: self.data,
        }

        if self.error is not None:
            envelope[fields.ERROR] = self.error.to_dict()

        if self.options is not None:
            envelope[fields.OPTIONS] = dict(self.options)

        return envelope

    @classmethod
    def from_dict(cls, envelope: Mapping[str, Any]) -> "Envelope":
        """ Parse the wire shape. Missing keys default to None; anything that
            cannot be an envelope raises :class:`errors.EnvelopeError`.
        """

        if isinstance(envelope, Envelope):
            return envelope

        if not isinstance(envelope, Mapping):
            raise errors.EnvelopeError("envelope must be a mapping, not %s" % (type(envelope).__name__))

        id = envelope.get(fields.ID)
        name = envelope.get(fields.NAME)
        data = envelope.get(fields.DATA)
        error = envelope.get(fields.ERROR)
        options = envelope.get(fields.OPTIONS)

        if id is not None and not is_id(id):
            raise errors.EnvelopeError("envelope id must be a non-negative integer or None: %r" % (id,))

        if name is not None and not isinstance(name, str):
            raise errors.EnvelopeError("envelope name must be a string or None: %r" % (name,))

        if error is not None:
            error = ErrorInfo.from_dict(error)

        if options is not None:
            if not isinstance(options, Mapping):
                raise errors.EnvelopeError("envelope options must be a mapping: %r" % (options,))
            options = dict(options)

        return cls(id, name, data, error, options)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
