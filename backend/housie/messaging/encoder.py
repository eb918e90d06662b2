"""
MessagePack wire codec for room traffic.

Outbound room snapshots are plain JSON-mode dicts, so encoding is a straight
packb. Inbound frames are size-capped before and during unpacking.
"""

from typing import Any

import msgpack


class DecodeError(Exception):
    """Raised when an inbound frame is not a valid MessagePack map."""


# Client frames are small commands; anything bigger is rejected outright.
MAX_FRAME_LEN = 16 * 1024
MAX_STR_LEN = 4 * 1024
MAX_BIN_LEN = 4 * 1024
MAX_ARRAY_LEN = 128
MAX_MAP_LEN = 32
MAX_EXT_LEN = 0


def encode(data: dict[str, Any]) -> bytes:
    return msgpack.packb(data)


def decode(data: bytes) -> dict[str, Any]:
    """
    Decode one inbound frame.

    Raises DecodeError for oversized, malformed or non-map payloads.
    """
    if len(data) > MAX_FRAME_LEN:
        raise DecodeError(f"frame too large: {len(data)} bytes (max {MAX_FRAME_LEN})")
    try:
        result = msgpack.unpackb(
            data,
            raw=False,
            max_str_len=MAX_STR_LEN,
            max_bin_len=MAX_BIN_LEN,
            max_array_len=MAX_ARRAY_LEN,
            max_map_len=MAX_MAP_LEN,
            max_ext_len=MAX_EXT_LEN,
        )
    except (msgpack.UnpackException, ValueError) as e:
        raise DecodeError(f"malformed frame: {e}") from e

    if not isinstance(result, dict):
        raise DecodeError(f"expected map, got {type(result).__name__}")
    return result
