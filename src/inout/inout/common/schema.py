"""Field readers for mapping store documents onto domain dataclasses.

Absent fields fall back to the given default; present fields of the wrong
type raise SchemaError instead of producing a half-populated object.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.exceptions import SchemaError

_MISSING = object()


def _raw(doc: Mapping[str, Any], key: str, default: Any) -> Any:
    value = doc.get(key, _MISSING)
    if value is _MISSING or value is None:
        if default is _MISSING:
            raise SchemaError(f"Missing required field '{key}'")
        return default
    return value


def read_str(doc: Mapping[str, Any], key: str, default: Any = _MISSING) -> Optional[str]:
    value = _raw(doc, key, default)
    if value is default:
        return value
    if not isinstance(value, str):
        raise SchemaError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def read_float(doc: Mapping[str, Any], key: str, default: Any = _MISSING) -> Optional[float]:
    value = _raw(doc, key, default)
    if value is default:
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"Field '{key}' must be a number, got {type(value).__name__}")
    return float(value)


def read_int(doc: Mapping[str, Any], key: str, default: Any = _MISSING) -> Optional[int]:
    value = _raw(doc, key, default)
    if value is default:
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaError(f"Field '{key}' must be an integer, got {type(value).__name__}")
    return value


def read_bool(doc: Mapping[str, Any], key: str, default: Any = _MISSING) -> bool:
    value = _raw(doc, key, default)
    if not isinstance(value, bool):
        raise SchemaError(f"Field '{key}' must be a boolean, got {type(value).__name__}")
    return value


def read_str_list(doc: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = _raw(doc, key, [])
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise SchemaError(f"Field '{key}' must be a list of strings")
    return tuple(value)
