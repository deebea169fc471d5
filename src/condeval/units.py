"""Helpers for ``number_unit`` and ``text_unit`` conditions.

A ``number_unit`` value such as ``{"number": 30, "unit": "day"}`` is split
by ``ConditionDefinition.unpack_user_value()``: the number is compared, and
the unit is exposed to the resolver as ``context["_unit"]`` (with the number
as ``context["_number"]``). Resolvers read them back with ``number_unit()``
and typically convert a timestamp into an age with ``age()``::

    def account_age(context, user_value):
        period = number_unit(context)
        return age(context.get("registered_at"), period["unit"], context["now"])
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from .dates import parse_datetime
from .values import to_float, to_str

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
MONTH = 30 * DAY
YEAR = 365 * DAY

PERIOD_UNITS: dict[str, int] = {
    "minute": MINUTE,
    "hour": HOUR,
    "day": DAY,
    "week": WEEK,
    "month": MONTH,
    "year": YEAR,
}


def number_unit(context: Mapping[str, Any], default_unit: str = "day", default_number: int = 1) -> dict[str, Any]:
    """Read the unit and number a ``number_unit`` user value was split into.

    Returns:
        ``{"unit": str, "number": int}``, with defaults for missing parts.
    """
    unit = context.get("_unit")
    number = context.get("_number")
    return {
        "unit": to_str(unit) if unit not in (None, "") else default_unit,
        "number": int(to_float(number)) if number is not None else default_number,
    }


def text_unit(context: Mapping[str, Any], default_unit: str = "") -> dict[str, str]:
    """Read the unit and text a ``text_unit`` user value was split into."""
    unit = context.get("_unit")
    return {
        "unit": to_str(unit) if unit not in (None, "") else default_unit,
        "text": to_str(context.get("_text")),
    }


def multiplier(unit: str) -> int:
    """Seconds in one ``unit``; plural forms are accepted and unknown units mean days."""
    return PERIOD_UNITS.get(unit.lower().rstrip("s"), DAY)


def to_seconds(unit: str, amount: int | float) -> int:
    return int(abs(amount)) * multiplier(unit)


def from_seconds(seconds: int | float, unit: str) -> int:
    return int(seconds // multiplier(unit))


def age(value: Any, unit: str, now: datetime) -> int:
    """Return how many whole ``unit`` periods have passed since ``value``.

    Args:
        value: A ``datetime`` or any textual date the date parser accepts.
        unit: A period unit (``minute``, ``hour``, ``day``, ``week``,
            ``month``, ``year``).
        now: The reference instant.

    Returns:
        The elapsed whole periods; ``0`` for empty, unparseable, or future
        values.
    """
    if isinstance(value, datetime) and (value.tzinfo is None) == (now.tzinfo is None):
        moment = value
    else:
        moment = parse_datetime(value, now.tzinfo)
        if moment is None:
            return 0
        moment = moment.replace(tzinfo=now.tzinfo)
    elapsed = (now - moment).total_seconds()
    if elapsed < 0:
        return 0
    return from_seconds(elapsed, unit)
