from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_NUMERIC = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")
_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_TRUE_STRINGS = frozenset({"1", "true", "on", "yes"})


def deep_get(obj: Any, path: str, default: Any = None) -> Any:
    """Retrieve a nested value from an object using dot-separated path notation.

    Traverses nested dicts, lists, and tuples to retrieve a value at the
    specified path. Returns the default value if any part of the path
    cannot be resolved.

    Args:
        obj: The object to traverse (typically a dict or list).
        path: Dot-separated path to the desired value. Examples:
            - ``"user.email"`` for ``{"user": {"email": "a@b.io"}}``
            - ``"cart.items.0.id"`` for ``{"cart": {"items": [{"id": 1}]}}``
        default: Value to return if the path cannot be resolved.

    Returns:
        The value at the specified path, or ``default`` if not found.

    Examples:
        >>> deep_get({"a": {"b": 1}}, "a.b")
        1
        >>> deep_get({"items": [10, 20]}, "items.1")
        20
        >>> deep_get({}, "missing.path", default="N/A")
        'N/A'
    """
    parts = [p for p in path.split(".") if p]
    cur = obj
    for part in parts:
        if isinstance(cur, Mapping):
            if part in cur:
                cur = cur[part]
                continue
            return default
        if isinstance(cur, (list, tuple)):
            try:
                index = int(part)
            except ValueError:
                return default
            if -len(cur) <= index < len(cur):
                cur = cur[index]
                continue
            return default
        return default
    return cur


def is_numeric(value: Any) -> bool:
    """Return ``True`` for numbers and fully numeric strings.

    Booleans are not numeric. Strings may carry surrounding whitespace and
    an exponent (``" 1e3 "``), but ``"nan"``, ``"inf"`` and ``"1_000"`` are
    rejected.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and bool(_NUMERIC.match(value))


def to_float(value: Any) -> float:
    """Coerce a mixed value to ``float``.

    Coercion rules:
        - ``None``: ``0.0``
        - ``bool``: ``1.0`` or ``0.0``
        - ``int``/``float``: the value itself
        - ``str``: the leading numeric prefix (``"12abc"`` -> ``12.0``),
          ``0.0`` when there is none
        - Sequences and mappings: ``1.0`` if non-empty, else ``0.0``
        - Anything else: ``0.0``

    Examples:
        >>> to_float("10.0")
        10.0
        >>> to_float("abc")
        0.0
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return 0.0
        try:
            return float(match.group().strip())
        except (OverflowError, ValueError):
            return 0.0
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return 1.0 if len(value) else 0.0
    return 0.0


def to_str(value: Any) -> str:
    """Coerce a mixed value to ``str``.

    Coercion rules:
        - ``None``: ``""``
        - ``bool``: ``"1"`` for ``True``, ``""`` for ``False``
        - Integral floats drop the fraction (``10.0`` -> ``"10"``)
        - Sequences: items coerced recursively and joined by ``", "``
        - Mappings: their values, as for sequences
        - Anything else: ``str(value)``
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return ", ".join(to_str(v) for v in value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(to_str(v) for v in value)
    return str(value)


def is_empty(value: Any) -> bool:
    """Generic emptiness check used by the ``empty``/``not_empty`` operators.

    ``None``, ``False``, ``0``, ``0.0``, ``""``, ``"0"`` and empty containers
    are empty; everything else is not.

    Examples:
        >>> is_empty("0")
        True
        >>> is_empty(" ")
        False
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (bool, int, float)):
        return not value
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    return False


def to_list(value: Any) -> list[Any]:
    """Wrap a mixed value into a list.

    ``None`` becomes ``[]``, lists/tuples/sets become lists, mappings become
    the list of their values and scalars become a one-element list.
    """
    if value is None:
        return []
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def to_str_list(value: Any) -> list[str]:
    """``to_list()`` with every item coerced through ``to_str()``."""
    return [to_str(item) for item in to_list(value)]


def parse_bool(value: Any) -> bool:
    """Parse a boolean out of a mixed value.

    ``"1"``, ``"true"``, ``"on"`` and ``"yes"`` (case-insensitive, stripped)
    are ``True``. Every other string, ``None``, and any sequence or mapping
    is ``False``. Numbers follow their string form, so only ``1`` is ``True``.

    Examples:
        >>> parse_bool("Yes")
        True
        >>> parse_bool("off")
        False
        >>> parse_bool(2)
        False
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return False
    return to_str(value).strip().lower() in _TRUE_STRINGS


def loose_equal(a: Any, b: Any) -> bool:
    """Compare two mixed values with loose (type-juggling) equality.

    Rules, applied in order:
        - ``None`` equals ``None``, ``""``, empty containers and falsy scalars
        - If either side is a ``bool``, both sides compare by truthiness
        - Two numbers compare numerically
        - A number and a numeric string compare numerically; a number and a
          non-numeric string compare as strings
        - Two numeric strings compare numerically (``"1.0" == "1"``)
        - Sequences compare item-by-item with the same rules

    Examples:
        >>> loose_equal("1", 1)
        True
        >>> loose_equal("abc", 0)
        False
    """
    if a is None or b is None:
        other = b if a is None else a
        if other is None:
            return True
        if isinstance(other, str):
            return other == ""
        return is_empty(other)
    if isinstance(a, bool) or isinstance(b, bool):
        return (not is_empty(a)) == (not is_empty(b))
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if isinstance(a, (int, float)) and isinstance(b, str):
        return _number_equals_string(a, b)
    if isinstance(a, str) and isinstance(b, (int, float)):
        return _number_equals_string(b, a)
    if isinstance(a, str) and isinstance(b, str):
        if is_numeric(a) and is_numeric(b):
            return float(a) == float(b)
        return a == b
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(loose_equal(x, y) for x, y in zip(a, b))
    return a == b


def _number_equals_string(number: int | float, text: str) -> bool:
    if is_numeric(text):
        return float(number) == float(text)
    return to_str(number) == text
