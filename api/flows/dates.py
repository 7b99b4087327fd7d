"""
Date helpers for passenger-flow records.

Two textual conventions are in play:
- storage: `month/day/year`, no zero padding (e.g. "1/15/2022")
- display: `day/month/year` (e.g. "15/1/2022")

POST bodies use the storage convention for their keys, GET paths and GET
output use the display convention.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(raw: str | None) -> int | None:
    """
    Parse the leading integer of `raw` ("12abc" -> 12), or None when there is none.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if match is None:
        return None
    return int(match.group(1))


def is_valid_date(year: int, month: int, day: int) -> bool:
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def to_storage(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def storage_to_display(text: str) -> str:
    month, day, year = text.split("/")
    return f"{day}/{month}/{year}"


def parse_storage(text: str) -> date | None:
    """
    Parse a `month/day/year` key. Each part must be digits only.
    """
    parts = text.split("/")
    if len(parts) != 3 or not all(part.isascii() and part.isdigit() for part in parts):
        return None
    month, day, year = (int(part) for part in parts)
    if not is_valid_date(year, month, day):
        return None
    return date(year, month, day)


def parse_display(text: str) -> date:
    day, month, year = (int(part) for part in text.split("/"))
    return date(year, month, day)


def last_of_run(start: date, count: int) -> date:
    """
    Last day of a run of `count` consecutive days from `start`, capped at `date.max`.
    """
    remaining = (date.max - start).days
    return start + timedelta(days=min(count - 1, remaining))


def days_of_month(year: int, month: int) -> list[date]:
    _, last_day = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, last_day + 1)]


def year_bounds(year: int) -> tuple[date, date]:
    """
    Half-open range [Jan 1 of `year`, Jan 1 of `year + 1`).
    """
    return date(year, 1, 1), date(year + 1, 1, 1)
