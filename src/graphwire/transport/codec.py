"""Transport codec for protocol message fields."""

from __future__ import annotations

from typing import Any, Tuple

import msgspec

_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder()


def encode_fields(fields: Tuple[Any, ...]) -> bytes:
    """Return the JSON encoding of a message's field list."""

    return _encoder.encode(list(fields))


def decode_fields(data: bytes) -> Tuple[Any, ...]:
    if data in (b"", None):
        return ()

    try:
        decoded = _decoder.decode(data)
    except msgspec.DecodeError as exc:
        raise ValueError(f"malformed message fields: {exc}") from exc

    if not isinstance(decoded, list):
        raise ValueError(f"message fields must be a list, not {type(decoded).__name__}")

    return tuple(decoded)
