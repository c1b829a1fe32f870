"""Convenience constructors for channel envelopes."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from . import fields
from .message import Envelope, ErrorInfo


def notification(name: str, data: Any = None) -> Envelope:
    return Envelope(id=None, name=name, data=data, options={})


def request(id: int, name: str, data: Any = None, timeout: Optional[float] = None) -> Envelope:
    options = {}
    if timeout is not None:
        options[fields.TIMEOUT] = timeout
    return Envelope(id=id, name=name, data=data, options=options)


def response(id: Optional[int], data: Any = None) -> Envelope:
    """Answer the request identified by *id* with *data*."""
    return Envelope(id=id, name=None, data=data)


def rejection(id: Optional[int], error: ErrorInfo) -> Envelope:
    """Reject the request identified by *id*."""
    return Envelope(id=id, name=None, data=None, error=error)


def options_timeout(options: Optional[Mapping[str, Any]]) -> Optional[float]:
    """Return the timeout carried in a set of fetch *options*, if any."""
    if not options:
        return None
    return options.get(fields.TIMEOUT)
