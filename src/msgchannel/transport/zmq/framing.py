"""ZMQ multipart framing for channel envelopes.

    version, envelope_json
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ...protocol import PROTOCOL_VERSION
from .. import codec


_VERSION_BYTES = PROTOCOL_VERSION.encode()


def to_frames(envelope: Mapping[str, Any]) -> Tuple[bytes, bytes]:
    """Encode an envelope as ZMQ multipart frames."""

    return (_VERSION_BYTES, codec.encode(envelope))


def from_frames(parts: Sequence[bytes]) -> Optional[Dict[str, Any]]:
    """Decode ZMQ multipart frames into an envelope dictionary.

    Returns None if the frames were produced by a different protocol version.
    """

    if len(parts) != 2:
        raise ValueError(f"expected 2 message parts, got {len(parts)}")

    their_version = parts[0]
    if their_version != _VERSION_BYTES:
        return None

    return codec.decode(parts[1])
