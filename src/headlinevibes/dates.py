"""Date parsing and month-range helpers (all dates are UTC calendar days)."""

from __future__ import annotations

import calendar
import re
from datetime import UTC, date, datetime, timedelta

from dateutil import parser as dateparser
from dateutil.relativedelta import relativedelta

from headlinevibes.errors import InvalidInputError

_ISO_DAY_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$")
_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
_AGO_RE = re.compile(r"^(\d+)\s+(day|week|month)s?\s+ago$")
_LAST_WEEKDAY_RE = re.compile(r"^last\s+(\w+)$")

_WEEKDAYS = [name.lower() for name in calendar.day_name]

_PARSE_HINT = (
    'Could not understand the date input. Try "yesterday", "last Friday", '
    "or a specific date like 2025-02-11."
)


def normalize_date(value: date | datetime | str) -> str:
    """Return *value* as ``YYYY-MM-DD`` in UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        parsed = dateparser.isoparse(value)
    except (ValueError, TypeError) as exc:
        raise InvalidInputError(f"Invalid date: {value}") from exc
    return normalize_date(parsed)


def parse_date_nl(text: str, now: datetime | None = None) -> str:
    """Parse natural-language *text* ("yesterday", "last Friday", "2025-02-11").

    Relative expressions resolve against *now* (default: current UTC time).
    """
    if not text or not text.strip():
        raise InvalidInputError("A date is required.")
    text = text.strip()
    if _ISO_DAY_RE.match(text):
        return text

    now = now or datetime.now(UTC)
    today = now.date()
    lowered = text.lower()

    if lowered == "today":
        return today.isoformat()
    if lowered == "yesterday":
        return (today - timedelta(days=1)).isoformat()

    m = _AGO_RE.match(lowered)
    if m:
        amount, unit = int(m.group(1)), m.group(2)
        if unit == "day":
            return (today - timedelta(days=amount)).isoformat()
        if unit == "week":
            return (today - timedelta(weeks=amount)).isoformat()
        return (today - relativedelta(months=amount)).isoformat()

    m = _LAST_WEEKDAY_RE.match(lowered)
    if m and m.group(1) in _WEEKDAYS:
        target = _WEEKDAYS.index(m.group(1))
        back = (today.weekday() - target) % 7 or 7
        return (today - timedelta(days=back)).isoformat()

    try:
        default = datetime(today.year, today.month, today.day)
        parsed = dateparser.parse(text, default=default, fuzzy=False)
    except (ValueError, OverflowError) as exc:
        raise InvalidInputError(_PARSE_HINT) from exc
    return normalize_date(parsed)


def month_range(start_month: str, end_month: str) -> list[tuple[str, str]]:
    """Return ``(first_day, last_day)`` pairs for every month in the inclusive range.

    Both bounds are ``YYYY-MM``; a start after the end yields ``[]``.
    """
    for label, value in (("start_month", start_month), ("end_month", end_month)):
        if not value or not _MONTH_RE.match(value):
            raise InvalidInputError(f"Invalid {label} format: {value!r} (expected YYYY-MM)")

    cur = date(int(start_month[:4]), int(start_month[5:7]), 1)
    end = date(int(end_month[:4]), int(end_month[5:7]), 1)

    ranges: list[tuple[str, str]] = []
    while cur <= end:
        last_day = calendar.monthrange(cur.year, cur.month)[1]
        ranges.append((cur.isoformat(), cur.replace(day=last_day).isoformat()))
        cur += relativedelta(months=1)
    return ranges
