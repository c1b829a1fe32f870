"""ZeroMQ transport implementation."""

from .pair import PairTransport, zmq_context
