"""
Passenger-flow business logic.

Scope:
- date-range reads (paired arrival/departure records per day)
- daily / monthly net-flow aggregates
- bulk insert of new days with duplicate protection
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable

from fastapi import HTTPException, status
from pydantic import ValidationError

from core.errors import DATABASE_ERROR

from . import dates, repository
from .schemas import ARRIVAL, CATEGORIES, DEPARTURE, FlowEntryList

logger = logging.getLogger(__name__)

MIN_YEAR = 2021
MAX_YEAR = 2025

GROUPS = ("local", "mainland", "others", "all")

MISSING_DATA = "POST request - missing data."
STATUS_BAD_DATE = "Wrong date format or invalid date"
STATUS_BAD_RECORDS = "Wrong flow records - expect one Arrival and one Departure"
STATUS_EXISTS = "Records existed; cannot override"
STATUS_ADDED = "Added two records to the database"


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _database_error(exc: Exception) -> HTTPException:
    logger.exception("Database error", exc_info=exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=DATABASE_ERROR)


def _in_range(value: int | None, low: int, high: int) -> bool:
    return value is not None and low <= value <= high


def validate_range_request(year: str, month: str, day: str, num: str | None) -> tuple[date, int]:
    """
    Validate GET /data params in order; the first failure raises a 400.
    """
    year_num = dates.parse_int(year)
    month_num = dates.parse_int(month)
    day_num = dates.parse_int(day)

    if not _in_range(year_num, MIN_YEAR, MAX_YEAR):
        raise _bad_request(f"Wrong year input - must be a number between {MIN_YEAR} - {MAX_YEAR}.")
    if not _in_range(month_num, 1, 12):
        raise _bad_request("Wrong month input - must be a number between 1 - 12.")
    if not _in_range(day_num, 1, 31):
        raise _bad_request("Wrong date input - must be a number between 1 - 31.")
    if not dates.is_valid_date(year_num, month_num, day_num):
        raise _bad_request(f"{day_num}/{month_num}/{year_num} is not a valid calendar date!")

    count = dates.parse_int(num) if num else 1
    if count is None or count < 1:
        raise _bad_request("Wrong query string num - must be a number greater than zero")

    return date(year_num, month_num, day_num), count


def _to_output(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "Date": dates.storage_to_display(str(row["date"])),
        "Flow": str(row["flow"]),
        "Local": int(row["local"]),
        "Mainland": int(row["mainland"]),
        "Others": int(row["others"]),
    }


def pair_records(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Group rows by display date and keep only dates with exactly two records.

    Groups come out in lexicographic order of the display date; within a group
    Arrival precedes Departure.
    """
    grouped: dict[str, list[dict[str, Any]]] = {}
    for row in rows:
        record = _to_output(row)
        grouped.setdefault(record["Date"], []).append(record)

    result: list[dict[str, Any]] = []
    for display_date in sorted(grouped):
        records = grouped[display_date]
        if len(records) != 2:
            continue
        result.extend(sorted(records, key=lambda r: r["Flow"] != ARRIVAL))
    return result


async def read_range(year: str, month: str, day: str, num: str | None) -> list[dict[str, Any]]:
    start, count = validate_range_request(year, month, day, num)
    last = dates.last_of_run(start, count)

    try:
        rows = await repository.find_run(start, last)
    except Exception as exc:
        raise _database_error(exc) from exc

    return pair_records(rows)


def validate_group(group: str, path: str) -> str:
    normalized = (group or "").strip().lower()
    if normalized not in GROUPS:
        raise _bad_request(f"Wrong group in {path} - must be one of local, mainland, others or all.")
    return normalized


def validate_year(year: str, path: str) -> int:
    year_num = dates.parse_int(year)
    if not _in_range(year_num, MIN_YEAR, MAX_YEAR):
        raise _bad_request(f"Wrong year in {path} - must be a number between {MIN_YEAR} - {MAX_YEAR}.")
    return year_num


def validate_month(month: str, path: str) -> int:
    month_num = dates.parse_int(month)
    if not _in_range(month_num, 1, 12):
        raise _bad_request(f"Wrong month in {path} - must be a number between 1 - 12.")
    return month_num


def _signed_counts(row: dict[str, Any]) -> dict[str, int]:
    sign = -1 if str(row["flow"]) == DEPARTURE else 1
    return {
        "Local": sign * int(row["local"]),
        "Mainland": sign * int(row["mainland"]),
        "Others": sign * int(row["others"]),
    }


def accumulate(rows: list[dict[str, Any]], bucket_of: Callable[[dict[str, Any]], Any]) -> dict[Any, dict[str, int]]:
    """
    Sum signed counts per bucket: Arrival adds, Departure subtracts.
    """
    buckets: dict[Any, dict[str, int]] = {}
    for row in rows:
        totals = buckets.setdefault(bucket_of(row), {name: 0 for name in CATEGORIES})
        for name, value in _signed_counts(row).items():
            totals[name] += value
    return buckets


def shape_totals(totals: dict[str, int], group: str) -> dict[str, int]:
    if group == "all":
        return {
            "Local": totals["Local"],
            "Mainland": totals["Mainland"],
            "Others": totals["Others"],
            "Total": totals["Local"] + totals["Mainland"] + totals["Others"],
        }
    name = group.capitalize()
    return {name: totals[name]}


async def aggregate_month(group: str, year: str, month: str, *, path: str) -> list[dict[str, Any]]:
    """
    Net flow per day of a month, in calendar order.
    """
    group = validate_group(group, path)
    year_num = validate_year(year, path)
    month_num = validate_month(month, path)

    storage_dates = [dates.to_storage(d) for d in dates.days_of_month(year_num, month_num)]
    try:
        rows = await repository.find_by_dates(storage_dates)
    except Exception as exc:
        raise _database_error(exc) from exc

    buckets = accumulate(rows, lambda row: dates.storage_to_display(str(row["date"])))
    return [
        {"Date": display_date, **shape_totals(buckets[display_date], group)}
        for display_date in sorted(buckets, key=dates.parse_display)
    ]


async def aggregate_year(group: str, year: str, *, path: str) -> list[dict[str, Any]]:
    """
    Net flow per month of a year, ordered by (year, month).
    """
    group = validate_group(group, path)
    year_num = validate_year(year, path)

    start, end = dates.year_bounds(year_num)
    try:
        rows = await repository.find_in_range(start, end)
    except Exception as exc:
        raise _database_error(exc) from exc

    buckets = accumulate(rows, lambda row: (row["flow_date"].year, row["flow_date"].month))
    return [
        {"Month": f"{month_num}/{bucket_year}", **shape_totals(buckets[(bucket_year, month_num)], group)}
        for bucket_year, month_num in sorted(buckets)
    ]


def _validate_entries(entries: Any) -> list[dict[str, Any]] | None:
    try:
        parsed = FlowEntryList.validate_python(entries)
    except ValidationError:
        return None
    if len(parsed) != 2 or {e.Flow for e in parsed} != {ARRIVAL, DEPARTURE}:
        return None
    return [e.model_dump() for e in parsed]


async def _insert_one(date_text: str, entries: Any) -> str:
    flow_date = dates.parse_storage(date_text)
    if flow_date is None:
        return STATUS_BAD_DATE

    records = _validate_entries(entries)
    if records is None:
        return STATUS_BAD_RECORDS

    # Check-then-insert is not atomic across concurrent requests.
    if await repository.date_exists(date_text):
        return STATUS_EXISTS

    await repository.insert_day(date_text, flow_date, records)
    return STATUS_ADDED


async def bulk_insert(body: Any) -> dict[str, str]:
    """
    Insert each posted day independently and report a status per key.

    A store failure stops processing; days already inserted stay inserted.
    """
    if not isinstance(body, dict) or not body:
        raise _bad_request(MISSING_DATA)

    statuses: dict[str, str] = {}
    try:
        for date_text, entries in body.items():
            statuses[date_text] = await _insert_one(date_text, entries)
    except Exception as exc:
        raise _database_error(exc) from exc
    return statuses
