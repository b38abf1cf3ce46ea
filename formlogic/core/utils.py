"""
Shared value-coercion helpers for the logic engine.

Answers and authored values arrive as strings, numbers or lists
depending on where they were produced. These helpers give every
comparison one canonical string or number form.
"""

import math
from typing import Any


def to_str(value: Any) -> str:
    """Coerce a scalar or list to its canonical string form.

    Integral floats drop the trailing ".0" so that 5 and 5.0 compare
    equal to the answer "5". Booleans become "true"/"false" and lists
    are joined with commas.

    Args:
        value: The value to coerce.

    Returns:
        The string form of the value.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_str(v) for v in value)
    return str(value)


def to_number(value: Any) -> float:
    """Coerce a value to a float, or NaN if it is not numeric.

    Blank strings are not numeric. A single-element list coerces to its
    element. NaN never satisfies a comparison, so callers can compare
    the result directly.

    Args:
        value: The value to coerce.

    Returns:
        The numeric value, or math.nan.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (list, tuple)):
        return to_number(value[0]) if len(value) == 1 else math.nan
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return math.nan
        try:
            return float(stripped)
        except ValueError:
            return math.nan
    return math.nan


def as_list(value: Any) -> list:
    """Wrap a scalar in a list; lists are returned as a shallow copy."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def is_empty_value(value: Any) -> bool:
    """Return True for absent or blank answers.

    Numbers are never empty, including zero.
    """
    if value is None:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return False
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) == 0
    return False
