"""ZMQ multipart framing for protocol messages.

Request/Response (DEALER<->ROUTER)
    (optional routing prefix...), version, tag, fields_json

The tag is the single-byte message signature; the fields are the JSON
encoding of the message's field list.
"""

from __future__ import annotations

from typing import Sequence, Tuple, Type

from ...protocol import PROTOCOL_VERSION
from ...protocol.fields import SIGNATURES, TAGS
from ...protocol.message import Message, Response
from ..codec import decode_fields, encode_fields


_VERSION_BYTES = PROTOCOL_VERSION.encode()


def to_frames(msg: Message, prefix: Tuple[bytes, ...] = ()) -> Tuple[bytes, ...]:
    """Encode a protocol Message to ZMQ multipart frames."""

    tag = bytes((TAGS[msg.signature],))
    parts = (
        _VERSION_BYTES,
        tag,
        encode_fields(msg.fields),
    )
    return tuple(prefix) + parts


def from_frames(parts: Sequence[bytes], kind: Type[Message] = Response) -> Tuple[Tuple[bytes, ...], Message]:
    """Decode multipart frames into a ``(prefix, message)`` pair.

    ROUTER sockets prepend an identity frame, which is returned as the
    prefix so that a reply can be routed back to the same peer. Frames that
    cannot be decoded raise :class:`ValueError`.
    """

    if not parts:
        raise ValueError("empty message")

    # We expect either:
    #   [version, tag, fields]
    # or
    #   [ident, version, tag, fields]
    if len(parts) == 3:
        prefix: Tuple[bytes, ...] = ()
        start = 0
    elif len(parts) == 4:
        prefix = (parts[0],)
        start = 1
    else:
        raise ValueError(f"expected 3 or 4 frames, got {len(parts)}")

    their_version = parts[start]
    if their_version != _VERSION_BYTES:
        raise ValueError(
            f"message is protocol version {their_version!r}, recipient expects {_VERSION_BYTES!r}"
        )

    tag = parts[start + 1]
    if len(tag) != 1 or tag[0] not in SIGNATURES:
        raise ValueError(f"unknown message tag: {tag!r}")

    signature = SIGNATURES[tag[0]]
    fields = decode_fields(parts[start + 2])
    return prefix, kind(signature, *fields)
