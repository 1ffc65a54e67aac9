import base64
import binascii
import json
from typing import Any


class CodecError(ValueError):
    """Raised when bytes cannot be decoded into the expected shape."""


def canonical_json(obj: Any) -> bytes:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def to_binary(value: Any) -> bytes:
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    return canonical_json(value)


def from_binary(data: bytes) -> Any:
    try:
        return json.loads(bytes(data).decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CodecError(f"Invalid type: not valid utf-8 ({e.reason})") from e
    except json.JSONDecodeError as e:
        raise CodecError(f"Error parsing into type: {e.msg} at position {e.pos}") from e
    except (ValueError, RecursionError) as e:
        # oversized integer literals and nesting deeper than the parser allows
        raise CodecError(f"Error parsing into type: {e}") from e


def encode_b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_b64(text: str) -> bytes:
    if not isinstance(text, str):
        raise CodecError(f"Invalid type: expected base64 string, got {type(text).__name__}")
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CodecError(f"Invalid base64: {e}") from e


def to_length_prefixed(namespace: bytes) -> bytes:
    # storage namespaces are prefixed by their length as 2 big-endian bytes
    if len(namespace) > 0xFFFF:
        raise ValueError("only supports namespaces up to length 0xFFFF")
    return len(namespace).to_bytes(2, "big") + namespace
