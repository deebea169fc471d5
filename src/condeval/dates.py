from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any

import structlog
from dateutil import parser, tz as dateutil_tz

from .values import to_str

logger = structlog.get_logger(__name__)

TIME_REFERENCE = datetime(1970, 1, 1)
"""Fixed date that time-of-day values are anchored to before comparison."""

_RELATIVE_DAYS = {"now": 0, "today": 0, "tomorrow": 1, "yesterday": -1}


def parse_datetime(value: Any, tz: tzinfo | None = None) -> datetime | None:
    """Parse a mixed value into a naive datetime in ``tz``.

    Accepts ``date``/``datetime`` objects, any textual format python-dateutil
    understands, and the keywords ``now``, ``today``, ``tomorrow`` and
    ``yesterday``. Timezone-aware values are converted to ``tz`` (the local
    zone when ``None``) and returned without tzinfo.

    Args:
        value: The value to parse.
        tz: Timezone the result is expressed in.

    Returns:
        The datetime, or ``None`` if ``value`` is empty or unparseable.
    """
    zone = tz or dateutil_tz.tzlocal()
    if isinstance(value, datetime):
        return _localize(value, zone)
    if isinstance(value, date):
        return datetime.combine(value, time.min)

    text = to_str(value).strip()
    if not text:
        return None
    offset = _RELATIVE_DAYS.get(text.lower())
    if offset is not None:
        return _localize(datetime.now(zone), zone) + timedelta(days=offset)

    # Bare numbers such as "5" are not dates, although the parser would read a day.
    if text.isdigit() and len(text) < 8:
        logger.debug("date_unparseable", value=text)
        return None

    try:
        parsed = parser.parse(text)
    except (ValueError, OverflowError):
        logger.debug("date_unparseable", value=text)
        return None
    return _localize(parsed, zone)


def parse_date(value: Any, tz: tzinfo | None = None) -> date | None:
    """Parse a mixed value into a calendar date (``parse_datetime()`` at midnight).

    Returns:
        The date, or ``None`` if ``value`` is empty or unparseable.
    """
    parsed = parse_datetime(value, tz)
    return parsed.date() if parsed is not None else None


def parse_time(value: Any, tz: tzinfo | None = None) -> datetime | None:
    """Parse a mixed value into a time of day on ``TIME_REFERENCE``.

    The result is a naive datetime truncated to whole seconds, so two
    values compare by time of day only.

    Returns:
        The anchored datetime, or ``None`` if ``value`` is empty or
        unparseable.
    """
    zone = tz or dateutil_tz.tzlocal()
    if isinstance(value, datetime):
        value = _localize(value, zone).time()
    if isinstance(value, time):
        return datetime.combine(TIME_REFERENCE.date(), value.replace(microsecond=0, tzinfo=None))

    text = to_str(value).strip()
    if not text:
        return None
    if text.lower() == "now":
        current = datetime.now(zone).time()
        return datetime.combine(TIME_REFERENCE.date(), current.replace(microsecond=0))

    try:
        parsed = parser.parse(text, default=TIME_REFERENCE)
    except (ValueError, OverflowError):
        logger.debug("time_unparseable", value=text)
        return None
    # Only the time of day counts, even when the text carries a date.
    current = _localize(parsed, zone).time().replace(microsecond=0)
    return datetime.combine(TIME_REFERENCE.date(), current)


def _localize(value: datetime, zone: tzinfo) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(zone).replace(tzinfo=None)
