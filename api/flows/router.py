"""
Passenger-flow API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

from . import service

router = APIRouter(prefix="/HKPassenger/v1")


@router.get("/data/{year}/{month}/{day}")
async def get_daily_records(
    year: str,
    month: str,
    day: str,
    num: str | None = Query(default=None),
) -> list[dict]:
    """
    Paired Arrival/Departure records for `num` consecutive days from the given date.
    """
    return await service.read_range(year, month, day, num)


@router.get("/aggregate/{group}/{year}/{month}")
async def get_daily_aggregate(group: str, year: str, month: str, request: Request) -> list[dict]:
    return await service.aggregate_month(group, year, month, path=request.url.path)


@router.get("/aggregate/{group}/{year}")
async def get_monthly_aggregate(group: str, year: str, request: Request) -> list[dict]:
    return await service.aggregate_year(group, year, path=request.url.path)


@router.post("/data/")
@router.post("/data", include_in_schema=False)
async def post_records(request: Request) -> dict:
    """
    Bulk insert days keyed by `month/day/year`; returns a status per key.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    statuses = await service.bulk_insert(body)
    return {"status": statuses}
