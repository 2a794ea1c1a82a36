"""
Utility helpers for the receipt_records package.

Provides the read-with-default policy shared by every field accessor:
`get_path` walks the loosely shaped model answer and `or_default`
replaces missing or falsy values with the field's default.
"""
import math
from typing import Any, Mapping


def is_truthy(value: Any) -> bool:
    """Return whether `value` counts as present.

    - `None`, `False`, zero, NaN and the empty string are absent.
    - Containers (lists, mappings) are present even when empty.
    """
    if value is None:
        return False
    if isinstance(value, (list, tuple, Mapping)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def or_default(value: Any, default: Any) -> Any:
    """Return `value` when present, otherwise `default`."""
    return value if is_truthy(value) else default


def get_path(value: Any, *keys: str) -> Any:
    """Follow `keys` through nested mappings.

    Returns None as soon as a key is missing or an intermediate value
    is not a mapping.
    """
    current = value
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current
