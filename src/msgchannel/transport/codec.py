"""Transport codec for channel envelopes."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .. import json
from ..protocol.message import Envelope


def encode(envelope: Mapping[str, Any]) -> bytes:
    """Return the JSON encoding of an envelope (or its dictionary form)."""

    if isinstance(envelope, Envelope):
        envelope = envelope.to_dict()

    return json.dumps(envelope)


def decode(frame: bytes) -> Dict[str, Any]:
    """Decode one JSON envelope. Structural checks are left to the channel."""

    envelope = json.loads(frame)

    if not isinstance(envelope, dict):
        raise ValueError(f"envelope must decode to an object, not {type(envelope).__name__}")

    return envelope
