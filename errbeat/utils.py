"""Utility functions for serializing event data."""

from collections.abc import Mapping, Sequence
from typing import Any, Dict, Optional, Set

from .constants import REDACT_DEFAULT_KEYS

REDACTED = "<redacted>"

_SENSITIVE_SUBSTRINGS = ("password", "secret", "token", "auth", "key", "cookie", "passwd")


def safe_str(value: Any, max_len: int = 1024) -> str:
    """str() that never raises and truncates long output."""
    try:
        s = str(value)
    except Exception:
        try:
            s = repr(value)
        except Exception:
            s = f"<unprintable {type(value).__name__}>"
    if len(s) > max_len:
        return s[:max_len] + f"...(truncated {len(s) - max_len} chars)"
    return s


def is_redacted_key(key: Any, redact_keys: Optional[Set[str]] = None) -> bool:
    """
    Decide whether the value stored under `key` must not leave the process.

    Matches exact names from REDACT_DEFAULT_KEYS (plus `redact_keys`), and any
    name containing a sensitive token such as "password" or "token".
    """
    k_low = str(key).lower()
    if k_low in REDACT_DEFAULT_KEYS or (redact_keys and k_low in redact_keys):
        return True
    return any(s in k_low for s in _SENSITIVE_SUBSTRINGS)


def redact_mapping(values: Mapping, redact_keys: Optional[Set[str]] = None) -> Dict[str, str]:
    """Return a copy of `values` with sensitive entries replaced."""
    return {
        str(k): REDACTED if is_redacted_key(k, redact_keys) else str(v)
        for k, v in values.items()
    }


def serialize(
    obj: Any,
    *,
    max_depth: int = 3,
    max_str_len: int = 1024,
    max_container_items: int = 50,
    _depth: int = 0,
) -> Any:
    """
    Convert `obj` into something json.dumps() accepts.

    Strings are truncated, containers are capped at `max_container_items`,
    nesting stops at `max_depth` and anything else is reduced to its type
    name plus a safe repr.
    """
    if _depth >= max_depth:
        return f"<max_depth:{max_depth} {type(obj).__name__}>"

    def _child(value: Any) -> Any:
        return serialize(
            value,
            max_depth=max_depth,
            max_str_len=max_str_len,
            max_container_items=max_container_items,
            _depth=_depth + 1,
        )

    if isinstance(obj, str):
        return safe_str(obj, max_str_len)
    if isinstance(obj, (type(None), bool, int, float)):
        return obj

    # bytes -> show length + preview
    if isinstance(obj, (bytes, bytearray, memoryview)):
        b = bytes(obj)
        return {"__type__": "bytes", "len": len(b), "preview": b[:32].hex()}

    if isinstance(obj, Mapping):
        out = {}
        for count, (k, v) in enumerate(obj.items()):
            if count >= max_container_items:
                out["__truncated__"] = f"{count}+ items"
                break
            out[safe_str(k, max_str_len)] = _child(v)
        return out

    if isinstance(obj, (Sequence, set, frozenset)):
        items = list(obj)
        out_list = []
        for i, item in enumerate(items):
            if i >= max_container_items:
                out_list.append(f"<truncated:{len(items) - i} more items>")
                break
            out_list.append(_child(item))
        return out_list

    # fallback: type + safe repr
    return {"__type__": type(obj).__name__, "repr": safe_str(obj, max_str_len)}
