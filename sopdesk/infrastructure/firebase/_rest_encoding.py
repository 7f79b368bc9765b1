"""Conversion between Python values and Firestore REST typed values.

Firestore's REST surface wraps every field in a one-key object naming its
type ({"stringValue": "x"}, {"integerValue": "3"}, ...). Timestamps are
written as UTC with microseconds and read back as aware datetimes;
nanosecond precision from the server is truncated.
"""

from __future__ import annotations

import base64
import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from enum import Enum
from typing import Any

_FRACTION = re.compile(r"\.(\d+)")


def to_firestore_value(value: Any) -> dict[str, Any]:
    """Wrap one Python value in its Firestore typed representation."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, Enum):
        return to_firestore_value(value.value)
    # bool is an int subclass; check it first.
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        as_utc = value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
        return {"timestampValue": as_utc.isoformat(timespec="microseconds").replace("+00:00", "Z")}
    if isinstance(value, bytes):
        return {"bytesValue": base64.b64encode(value).decode("ascii")}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": to_firestore_fields(value)}}
    if isinstance(value, (set, frozenset)):
        value = sorted(value)
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [to_firestore_value(item) for item in value]}}
    raise TypeError(f"Cannot store {type(value).__name__} in Firestore")


def to_firestore_fields(data: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    return {key: to_firestore_value(item) for key, item in data.items()}


def encode_document(data: Mapping[str, Any]) -> dict[str, Any]:
    """Request body for a document write."""
    return {"fields": to_firestore_fields(data)}


def parse_timestamp(raw: str) -> datetime:
    """Parse an RFC 3339 timestamp, keeping at most microsecond precision."""
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), raw, count=1)
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


def _array(payload: dict[str, Any]) -> list[Any]:
    return [from_firestore_value(item) for item in payload.get("values") or []]


def _map(payload: dict[str, Any]) -> dict[str, Any]:
    return decode_document(payload.get("fields"))


_DECODERS: dict[str, Callable[[Any], Any]] = {
    "nullValue": lambda _: None,
    "booleanValue": bool,
    "integerValue": int,
    "doubleValue": float,
    "stringValue": str,
    "timestampValue": parse_timestamp,
    "bytesValue": base64.b64decode,
    "arrayValue": _array,
    "mapValue": _map,
}


def from_firestore_value(typed: dict[str, Any]) -> Any:
    """Unwrap a Firestore typed value; unknown kinds (geo points, references) read as None."""
    for kind, payload in typed.items():
        decoder = _DECODERS.get(kind)
        if decoder is not None:
            return decoder(payload)
    return None


def decode_document(fields: dict[str, Any] | None) -> dict[str, Any]:
    """Plain dict from a document's `fields` object."""
    return {key: from_firestore_value(typed) for key, typed in (fields or {}).items()}
