"""In-process duplex transport.

:func:`pipe` returns two connected :class:`Port` instances, the way a
message channel between two threads or workers hands out two ports. Every
envelope is encoded on the way in and decoded on the way out, so the two
ends never share references to the same payload objects.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Dict, Optional, Tuple

from . import codec
from .base import Transport, TransportClosed, TransportError

logger = logging.getLogger(__name__)

_STOP = object()


class Port(Transport):
    """One end of an in-process pipe.

    Inbound envelopes are delivered on a dedicated background thread, one
    at a time, in the order they were sent. Envelopes sent before this port
    is opened are held until it is.
    """

    def __init__(self, name: str = "port") -> None:
        super().__init__()
        self.name = name
        self.peer: Optional[Port] = None
        self._inbox: "queue.SimpleQueue" = queue.SimpleQueue()
        self._thread: Optional[threading.Thread] = None
        self._previous: Optional[threading.Thread] = None
        self._open = False
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Port(name={self.name!r}, open={self._open})"

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        # A port closed from its own delivery thread leaves that thread
        # running until it reaches the stop marker; only one consumer may
        # ever read the inbox, so wait for it to finish first.

        while True:
            with self._lock:
                if self._open:
                    return

                previous = self._previous
                if previous is None or not previous.is_alive():
                    self._previous = None
                    self._open = True
                    self._thread = threading.Thread(target=self.run, name=f"msgchannel.{self.name}", daemon=True)
                    self._thread.start()
                    return

                if previous is threading.current_thread():
                    raise TransportError(f"{self.name} cannot be reopened from its own delivery thread")

            previous.join()

    def close(self) -> None:
        with self._lock:
            if not self._open:
                return
            self._open = False
            thread = self._thread
            self._thread = None
            self._previous = thread

        self._inbox.put(_STOP)

        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def send(self, envelope: Dict[str, Any]) -> None:
        if not self._open:
            raise TransportClosed(f"{self.name} is not open")

        peer = self.peer
        if peer is None:
            raise TransportClosed(f"{self.name} is not connected to a peer")

        peer._inbox.put(codec.encode(envelope))

    def run(self) -> None:
        while True:
            frame = self._inbox.get()
            if frame is _STOP:
                break
            self._deliver(frame)

    def _deliver(self, frame: bytes) -> None:
        try:
            envelope = codec.decode(frame)
        except ValueError:
            logger.warning("%s: dropping undecodable frame", self.name, exc_info=True)
            return

        handler = self._handler
        if handler is None:
            logger.warning("%s: no receive handler registered, dropping envelope", self.name)
            return

        try:
            handler(envelope)
        except Exception:
            logger.exception("%s: receive handler raised", self.name)


def pipe(start: bool = True) -> Tuple[Port, Port]:
    """Return two connected ports; both are opened unless *start* is False."""

    port1 = Port("port1")
    port2 = Port("port2")
    port1.peer = port2
    port2.peer = port1

    if start:
        port1.open()
        port2.open()

    return port1, port2
