from datetime import date

import pytest
from fastapi.testclient import TestClient

from core import db
from flows import repository
from flows.dates import to_storage
from main import app


class FakeFlowStore:
    """In-memory stand-in for the daylog table.

    Mirrors the repository functions used by the service layer, including the
    byte-wise (date, flow) ordering of find_by_dates and find_run.
    """

    def __init__(self):
        self.rows = []
        self.insert_calls = 0

    def add(self, date_text, flow, local, mainland, others):
        month, day, year = (int(part) for part in date_text.split("/"))
        self.rows.append(
            {
                "date": date_text,
                "flow_date": date(year, month, day),
                "flow": flow,
                "local": local,
                "mainland": mainland,
                "others": others,
            }
        )

    def add_day(self, date_text, arrival, departure):
        self.add(date_text, "Arrival", *arrival)
        self.add(date_text, "Departure", *departure)

    async def find_by_dates(self, dates):
        wanted = set(dates)
        rows = [dict(r) for r in self.rows if r["date"] in wanted]
        return sorted(rows, key=lambda r: (r["date"], r["flow"]))

    async def find_run(self, first, last):
        rows = [
            dict(r)
            for r in self.rows
            if first <= r["flow_date"] <= last and r["date"] == to_storage(r["flow_date"])
        ]
        return sorted(rows, key=lambda r: (r["date"], r["flow"]))

    async def find_in_range(self, start, end):
        rows = [dict(r) for r in self.rows if start <= r["flow_date"] < end]
        return sorted(rows, key=lambda r: (r["flow_date"], r["flow"]))

    async def date_exists(self, date_text):
        return any(r["date"] == date_text for r in self.rows)

    async def insert_day(self, date_text, flow_date, entries):
        self.insert_calls += 1
        for e in entries:
            self.rows.append(
                {
                    "date": date_text,
                    "flow_date": flow_date,
                    "flow": e["Flow"],
                    "local": e["Local"],
                    "mainland": e["Mainland"],
                    "others": e["Others"],
                }
            )
        return len(entries)


@pytest.fixture(name="store")
def store_fixture(monkeypatch):
    """Replace the repository with an empty in-memory store."""
    store = FakeFlowStore()
    monkeypatch.setattr(repository, "find_by_dates", store.find_by_dates)
    monkeypatch.setattr(repository, "find_run", store.find_run)
    monkeypatch.setattr(repository, "find_in_range", store.find_in_range)
    monkeypatch.setattr(repository, "date_exists", store.date_exists)
    monkeypatch.setattr(repository, "insert_day", store.insert_day)
    return store


@pytest.fixture(name="client")
def client_fixture(store, monkeypatch):
    """Test client with the Postgres pool lifecycle stubbed out."""

    async def _noop():
        return None

    monkeypatch.setattr(db, "init_pool", _noop)
    monkeypatch.setattr(db, "close_pool", _noop)

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
