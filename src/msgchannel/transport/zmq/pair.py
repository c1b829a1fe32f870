"""ZeroMQ PAIR transport.

A PAIR socket connects exactly two endpoints, which is the shape of a
messaging channel. One side binds, the other connects; after that the two
are symmetric.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Any, Dict, Optional

import zmq

from ..base import Transport, TransportClosed
from .framing import from_frames, to_frames

logger = logging.getLogger(__name__)

zmq_context = zmq.Context()
_signal_ids = itertools.count()


class PairTransport(Transport):
    """Exchange envelopes with a peer via a ZeroMQ PAIR socket.

    The socket is owned by a background thread, which both sends queued
    outbound envelopes and delivers inbound ones to the receive handler.
    ZeroMQ sockets are not thread-safe; callers in other threads hand
    envelopes over through an outbox queue and wake the background thread
    through an inproc signal socket.
    """

    poll_interval = 1.0
    linger = 0

    def __init__(self, address: str, *, bind: bool = False,
                 context: Optional[zmq.Context] = None) -> None:
        super().__init__()
        self.address = address
        self.bind = bind
        self.context = context if context is not None else zmq_context

        self.socket: Optional[zmq.Socket] = None
        self._signal_rx: Optional[zmq.Socket] = None
        self._signal_tx: Optional[zmq.Socket] = None
        self._signal_lock = threading.Lock()
        self._outbox: "queue.SimpleQueue" = queue.SimpleQueue()

        self._thread: Optional[threading.Thread] = None
        self._shutdown = False
        self._open = False

    def __repr__(self) -> str:
        mode = "bind" if self.bind else "connect"
        return f"PairTransport({mode} {self.address!r}, open={self._open})"

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        if self._open:
            return

        self.socket = self.context.socket(zmq.PAIR)
        self.socket.setsockopt(zmq.LINGER, self.linger)

        if self.bind:
            self.socket.bind(self.address)
        else:
            self.socket.connect(self.address)

        internal = f"inproc://msgchannel.PairTransport:signal:{next(_signal_ids)}"
        self._signal_rx = self.context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = self.context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)

        self._shutdown = False
        self._open = True
        self._thread = threading.Thread(target=self.run, name=f"msgchannel.zmq:{self.address}", daemon=True)
        self._thread.start()

    def close(self) -> None:
        if not self._open:
            return

        self._open = False
        self._shutdown = True
        self._signal()

        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

        with self._signal_lock:
            self._signal_tx.close()
            self._signal_tx = None

    def send(self, envelope: Dict[str, Any]) -> None:
        if not self._open:
            raise TransportClosed(f"transport for {self.address} is not open")

        self._outbox.put(to_frames(envelope))
        self._signal()

    def _signal(self) -> None:
        # The lock around the signal socket is necessary when several threads
        # send at once; otherwise their signals can get mixed together.

        # A full signal queue already guarantees a wakeup, so there is no
        # need to block; the delivery thread sends from this same path.

        with self._signal_lock:
            if self._signal_tx is not None:
                try:
                    self._signal_tx.send(b"", flags=zmq.NOBLOCK)
                except zmq.Again:
                    pass

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        try:
            while not self._shutdown:
                for active, _flag in poller.poll(self.poll_interval * 1000):
                    if active == self._signal_rx:
                        self._handle_outgoing()
                    elif active == self.socket:
                        self._handle_incoming(self.socket.recv_multipart())
        finally:
            self.socket.close()
            self._signal_rx.close()
            self.socket = None
            self._signal_rx = None

    def _handle_outgoing(self) -> None:
        # Clear every pending signal and send everything queued so far.

        while True:
            try:
                self._signal_rx.recv(flags=zmq.NOBLOCK)
            except zmq.Again:
                break

        while True:
            try:
                frames = self._outbox.get(block=False)
            except queue.Empty:
                break
            self.socket.send_multipart(frames)

    def _handle_incoming(self, parts) -> None:
        try:
            envelope = from_frames(parts)
        except ValueError:
            logger.warning("dropping malformed message on %s", self.address, exc_info=True)
            return

        if envelope is None:
            logger.debug("dropping message with mismatched protocol version on %s: %r", self.address, parts[0])
            return

        handler = self._handler
        if handler is None:
            logger.warning("no receive handler registered for %s, dropping envelope", self.address)
            return

        try:
            handler(envelope)
        except Exception:
            logger.exception("receive handler for %s raised", self.address)
