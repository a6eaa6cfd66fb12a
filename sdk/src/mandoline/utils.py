"""Key-casing conversion between the client's camelCase and the API's snake_case."""

from __future__ import annotations

import json
import re
from typing import Any

# Free-form user data lives under these keys; neither the key nor its contents are renamed.
SKIP_KEYS = frozenset({"properties"})

_UPPER = re.compile(r"[A-Z]")
_UNDERSCORE_LOWER = re.compile(r"_([a-z])")


def to_snake_key(key: str) -> str:
    """``metricId`` -> ``metric_id``."""
    return _UPPER.sub(lambda m: f"_{m.group(0).lower()}", key)


def to_camel_key(key: str) -> str:
    """``metric_id`` -> ``metricId``."""
    return _UNDERSCORE_LOWER.sub(lambda m: m.group(1).upper(), key)


def _convert(obj: Any, convert_key) -> Any:
    if isinstance(obj, dict):
        result = {}
        for key, value in obj.items():
            if key in SKIP_KEYS:
                result[key] = value
            else:
                result[convert_key(key)] = _convert(value, convert_key)
        return result
    if isinstance(obj, (list, tuple)):
        return [_convert(item, convert_key) for item in obj]
    return obj


def to_wire_case(obj: Any) -> Any:
    """Recursively convert mapping keys to snake_case for the API."""
    return _convert(obj, to_snake_key)


def to_local_case(obj: Any) -> Any:
    """Recursively convert mapping keys from the API to camelCase."""
    return _convert(obj, to_camel_key)


def safe_json_loads(text: str) -> Any:
    """Parse JSON, returning None instead of raising on malformed input."""
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None


def to_json_value(obj: Any) -> str:
    """Compact JSON used for values pre-serialized into a single query parameter."""
    return json.dumps(obj, separators=(",", ":"), allow_nan=False)
