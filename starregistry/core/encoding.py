# starregistry/core/encoding.py
import binascii
import json
import math
from typing import Any, Dict

from starregistry.core.canon import canonical_json
from starregistry.core.errors import DecodeError

# RFC 8785 writes every number as an IEEE double; larger integers would come back changed
MAX_SAFE_INTEGER = 2 ** 53 - 1


def check_representable(value: Any, path: str = "$") -> None:
    """Raise DecodeError for anything canonical JSON cannot carry unchanged."""
    if value is None or isinstance(value, (bool, str)):
        return
    if isinstance(value, int):
        if abs(value) > MAX_SAFE_INTEGER:
            raise DecodeError(f"{path}: integer {value} is outside the exactly representable range")
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise DecodeError(f"{path}: {value} is not a JSON number")
        return
    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            check_representable(item, f"{path}[{i}]")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise DecodeError(f"{path}: object key {key!r} is not a string")
            check_representable(item, f"{path}.{key}")
        return
    raise DecodeError(f"{path}: {type(value).__name__} is not a JSON value")


def encode_body(record: Dict[str, Any]) -> str:
    """Encode a body record as lowercase hex of its canonical JSON."""
    check_representable(record)
    return canonical_json(record).hex()


def decode_body(body: str) -> Dict[str, Any]:
    """Decode a hex body back into its record. Raises DecodeError on any malformed input."""
    if not isinstance(body, str):
        raise DecodeError(f"Body must be a hex string, got {type(body).__name__}")
    try:
        raw = binascii.unhexlify(body)
        record = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError) as e:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        raise DecodeError(f"Malformed block body: {e}") from e
    if not isinstance(record, dict):
        raise DecodeError(f"Block body must decode to an object, got {type(record).__name__}")
    return record
