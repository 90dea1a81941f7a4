"""Content codecs for the JSON and binary read/write wrappers.

JSON goes through the standard library ``json`` module, binary values
through MessagePack. Both raise CodecError subclasses with the original
exception chained.
"""

import json
from typing import Any

import msgpack

from filedb.core.errors import BinaryCodecError, JsonCodecError


def encode_json(value: Any) -> bytes:
    """Serialize a value to UTF-8 encoded JSON."""
    try:
        return json.dumps(value).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise JsonCodecError(f"Failed to encode JSON: {e}") from e


def decode_json(data: bytes) -> Any:
    """Deserialize UTF-8 encoded JSON."""
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise JsonCodecError(f"Failed to decode JSON: {e}") from e


def encode_binary(value: Any) -> bytes:
    """Serialize a value to MessagePack."""
    try:
        return msgpack.packb(value, use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as e:
        raise BinaryCodecError(f"Failed to encode binary value: {e}") from e


def decode_binary(data: bytes) -> Any:
    """Deserialize MessagePack data."""
    try:
        return msgpack.unpackb(data, raw=False)
    except (ValueError, TypeError, msgpack.UnpackException) as e:
        raise BinaryCodecError(f"Failed to decode binary value: {e}") from e
