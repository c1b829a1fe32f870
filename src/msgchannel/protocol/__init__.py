"""
msgchannel Protocol Layer
=========================

This package defines the envelope exchanged between two channel endpoints.
It provides the envelope data structures and construction utilities used by
:mod:`msgchannel.channel`.

The protocol layer MUST NOT depend on any transport implementation
(e.g. the in-memory pipe, ZeroMQ, etc).

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Channel (channel.py)
    Listener registration, correlation and dispatch
    - on()
    - send()
    - fetch()
    - inbound_handler()

    │
    ▼
Envelope Factory (factory.py)
    Construction of notification, request, response and
    rejection envelopes

    │
    ▼
Envelope Model (message.py)
    Immutable envelope structures
    - Envelope
    - ErrorInfo
    Defines semantic meaning only

    │
    ▼
Field Vocabulary (fields.py)
    Canonical names for envelope keys and error kinds

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Codec Layer
    Maps envelope dictionaries <-> bytes

Transport Layer
    Moves envelopes between the two endpoints
    - in-memory pipe
    - ZeroMQ PAIR sockets

---------------------------------------------------------------------
"""

from . import fields
from . import message
from . import factory

from .fields import PROTOCOL_VERSION
from .message import Envelope, ErrorInfo


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
