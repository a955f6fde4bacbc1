"""ZMQ multipart framing for Orion commands.

Outbound (DEALER -> peer)
    target, payload_json

The target is the routing path of the endpoint (``/namespace@shard/collection``);
the payload is the encoded command text. Both parts of a multipart message
are delivered together or not at all, so a command remains one frame.

Inbound (peer -> DEALER)
    (optional parts...), payload

Only the last part is surfaced; leading parts (an empty delimiter, a
routing target) carry no message content.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from ..base import as_text


def to_frames(target: str, frame: str) -> Tuple[bytes, bytes]:
    """Encode an outbound message to ZMQ multipart frames."""

    return ((target or "").encode(), frame.encode())


def from_frames(parts: Sequence[bytes]) -> str:
    """Decode inbound multipart frames to the message text."""

    if not parts:
        raise ValueError("empty message")

    return as_text(parts[-1])
