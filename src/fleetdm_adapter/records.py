"""
Typed, immutable records decoded from FleetDM JSON objects

Every resource is a frozen dataclass whose fields are all optional. A key that
is missing or null decodes to None, so "the API returned nothing" is never
confused with "the API returned zero". A value of the wrong JSON type raises
RecordDecodeError instead of being coerced.
"""

import dataclasses
import json
import types
import typing
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar

from .errors import RecordDecodeError


T = TypeVar('T')

SNIPPET_LENGTH = 500

# Fleet serialises unset timestamps as 0001-01-01T00:00:00Z
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)

_HINTS_CACHE: Dict[type, Dict[str, Any]] = {}


def _snippet(value: Any) -> str:
    try:
        text = json.dumps(value, default=str)
    except (TypeError, ValueError):
        text = repr(value)
    return text[:SNIPPET_LENGTH]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an API timestamp, treating null, "" and the zero time as absent

    Args:
        value: JSON value from the response

    Returns:
        Timezone-aware datetime, or None when the value is null, empty or the zero time

    Raises:
        ValueError: If the value is not an ISO-8601 string
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected timestamp string, got {type(value).__name__}")

    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    if parsed == ZERO_TIME:
        return None
    return parsed


def _field_hints(cls: type) -> Dict[str, Any]:
    hints = _HINTS_CACHE.get(cls)
    if hints is None:
        hints = typing.get_type_hints(cls)
        _HINTS_CACHE[cls] = hints
    return hints


def _unwrap_optional(hint: Any) -> Any:
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _decode_value(hint: Any, value: Any, path: str) -> Any:
    hint = _unwrap_optional(hint)

    if value is None or hint is Any:
        return value

    if hint is datetime:
        try:
            return parse_timestamp(value)
        except ValueError as e:
            raise TypeError(f"{path}: invalid timestamp {value!r} ({e})")

    if hint is bool:
        if not isinstance(value, bool):
            raise TypeError(f"{path}: expected bool, got {type(value).__name__}")
        return value

    if hint is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{path}: expected int, got {type(value).__name__}")
        return value

    if hint is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{path}: expected number, got {type(value).__name__}")
        return float(value)

    if hint is str:
        if not isinstance(value, str):
            raise TypeError(f"{path}: expected string, got {type(value).__name__}")
        return value

    origin = typing.get_origin(hint)
    if origin in (list, tuple):
        if not isinstance(value, list):
            raise TypeError(f"{path}: expected array, got {type(value).__name__}")
        (item_hint, *_) = typing.get_args(hint) or (Any,)
        return tuple(_decode_value(item_hint, item, f"{path}[{index}]") for index, item in enumerate(value))

    if dataclasses.is_dataclass(hint):
        if not isinstance(value, dict):
            raise TypeError(f"{path}: expected object, got {type(value).__name__}")
        return _decode_fields(hint, value, path)

    return value


def _decode_fields(cls: Type[T], payload: Dict[str, Any], path: str) -> T:
    hints = _field_hints(cls)
    values = {}
    for record_field in dataclasses.fields(cls):
        if not record_field.init:
            continue
        key = record_field.metadata.get('json', record_field.name)
        values[record_field.name] = _decode_value(
            hints[record_field.name], payload.get(key), f"{path}.{key}"
        )
    return cls(**values)


def decode_record(cls: Type[T], payload: Any) -> T:
    """
    Decode one JSON object into a record dataclass

    Args:
        cls: Frozen dataclass describing the record shape
        payload: Decoded JSON object

    Returns:
        Instance of cls

    Raises:
        RecordDecodeError: If the payload is not an object or a field has the wrong type
    """
    if not isinstance(payload, dict):
        raise RecordDecodeError(
            f"Cannot decode {cls.__name__}: expected JSON object, got {type(payload).__name__}. "
            f"Response body: {_snippet(payload)}"
        )
    try:
        return _decode_fields(cls, payload, cls.__name__)
    except TypeError as e:
        raise RecordDecodeError(f"Cannot decode {cls.__name__}: {e}. Response body: {_snippet(payload)}")


def decode_envelope(payload: Any, key: str, cls: Type[T]) -> List[T]:
    """
    Extract and decode the resource array from a {key: [...], meta: {...}} envelope

    A missing or null resource key is treated as an empty page.

    Raises:
        RecordDecodeError: If the envelope or the resource array has the wrong shape
    """
    if not isinstance(payload, dict):
        raise RecordDecodeError(
            f"Expected JSON object envelope with '{key}', got {type(payload).__name__}. "
            f"Response body: {_snippet(payload)}"
        )

    items = payload.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise RecordDecodeError(
            f"Expected '{key}' to be an array, got {type(items).__name__}. Response body: {_snippet(payload)}"
        )
    return [decode_record(cls, item) for item in items]


def record_to_dict(value: Any) -> Any:
    """Convert records (and tuples of records) back into plain JSON-ready values"""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            record_field.metadata.get('json', record_field.name): record_to_dict(getattr(value, record_field.name))
            for record_field in dataclasses.fields(value)
        }
    if isinstance(value, (list, tuple)):
        return [record_to_dict(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat().replace('+00:00', 'Z')
    return value
