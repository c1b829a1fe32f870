"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`msgchannel.protocol` so the protocol remains
transport-agnostic. A transport moves envelope dictionaries between two
channel endpoints, and delivers each inbound envelope to a single handler,
one at a time, in the order the peer sent them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportClosed(TransportError):
    """The transport is not open; nothing can be sent."""


Handler = Callable[[Dict[str, Any]], None]


class Transport(ABC):
    """Minimal contract for an envelope transport."""

    def __init__(self) -> None:
        self._handler: Optional[Handler] = None

    @abstractmethod
    def open(self) -> None:
        """Establish the underlying connection and start delivery."""

    @abstractmethod
    def close(self) -> None:
        """Stop delivery and tear down the underlying connection."""

    @abstractmethod
    def send(self, envelope: Dict[str, Any]) -> None:
        """Send one envelope dictionary to the peer."""

    def on_receive(self, handler: Handler) -> None:
        """Register the function that receives each inbound envelope."""
        if not callable(handler):
            raise TypeError("receive handler must be callable")
        self._handler = handler

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc_info):
        self.close()


def attach(channel, transport: Transport) -> None:
    """Wire *channel* and *transport* together in both directions."""

    transport.on_receive(channel.inbound_handler())
    channel.register_outbound(transport.send)
