"""
Passenger-flow persistence (raw SQL).

Schema comes from the dbmate migration:
- daylog(id bigserial, date text, flow_date date, flow text, local, mainland, others)

`date` is the `month/day/year` text exactly as it was posted. `flow_date` is
the same day as a real date and is only used for range scans.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from core import db

logger = logging.getLogger(__name__)


async def find_by_dates(dates: list[str]) -> list[dict[str, Any]]:
    """
    Fetch every record whose text date is in `dates`.

    Ordered by (date text, flow) with byte-wise collation, so "10/1/2022"
    sorts before "2/1/2022".
    """
    if not dates:
        return []
    return await db.fetch_all(
        """
        SELECT date, flow, local, mainland, others
        FROM daylog
        WHERE date = ANY($1::text[])
        ORDER BY date COLLATE "C", flow COLLATE "C"
        """,
        dates,
    )


async def find_run(first: date, last: date) -> list[dict[str, Any]]:
    """
    Fetch records for the days `first..last` (inclusive) whose text date is the
    unpadded `month/day/year` form of that day, the same rows an exact-text
    lookup of every day in the run would return.

    Ordered like `find_by_dates`.
    """
    return await db.fetch_all(
        """
        SELECT date, flow, local, mainland, others
        FROM daylog
        WHERE flow_date BETWEEN $1 AND $2
          AND date = to_char(flow_date, 'FMMM/FMDD/YYYY')
        ORDER BY date COLLATE "C", flow COLLATE "C"
        """,
        first,
        last,
    )


async def find_in_range(start: date, end: date) -> list[dict[str, Any]]:
    """
    Fetch records with `start <= flow_date < end`.
    """
    return await db.fetch_all(
        """
        SELECT date, flow_date, flow, local, mainland, others
        FROM daylog
        WHERE flow_date >= $1
          AND flow_date < $2
        ORDER BY flow_date, flow
        """,
        start,
        end,
    )


async def date_exists(date_text: str) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM daylog
        WHERE date = $1
        LIMIT 1
        """,
        date_text,
    )
    return row is not None


async def insert_day(date_text: str, flow_date: date, entries: list[dict[str, Any]]) -> int:
    """
    Insert one day's records in a single transaction.

    `entries` are dicts with Flow/Local/Mainland/Others keys. Returns the number
    of rows written.
    """
    if not entries:
        raise RuntimeError("insert_day called with empty entries list.")

    records = [
        (date_text, flow_date, e["Flow"], e["Local"], e["Mainland"], e["Others"])
        for e in entries
    ]

    pool = db.pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            await conn.executemany(
                """
                INSERT INTO daylog (date, flow_date, flow, local, mainland, others)
                VALUES ($1, $2, $3, $4, $5, $6)
                """,
                records,
            )

    logger.info("Inserted %d records for %s", len(records), date_text)
    return len(records)
