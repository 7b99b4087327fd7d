"""Date conventions: storage is month/day/year, display is day/month/year."""
from datetime import date

import pytest

from flows import dates


def test_parse_int_takes_leading_integer():
    assert dates.parse_int("2022") == 2022
    assert dates.parse_int("12abc") == 12
    assert dates.parse_int("-3") == -3
    assert dates.parse_int("abc") is None
    assert dates.parse_int(None) is None


def test_storage_and_display_are_unpadded():
    assert dates.to_storage(date(2022, 1, 5)) == "1/5/2022"
    assert dates.storage_to_display("1/5/2022") == "5/1/2022"
    assert dates.parse_display("5/1/2022") == date(2022, 1, 5)


@pytest.mark.parametrize("text", ["2022/13/40", "2/30/2022", "1/15", "1/15/2022/1", "a/1/2022", "-1/1/2022", ""])
def test_parse_storage_rejects_bad_keys(text):
    assert dates.parse_storage(text) is None


def test_parse_storage_reads_month_first():
    assert dates.parse_storage("1/15/2022") == date(2022, 1, 15)
    assert dates.parse_storage("01/05/2022") == date(2022, 1, 5)


def test_last_of_run_rolls_over():
    assert dates.last_of_run(date(2024, 2, 28), 3) == date(2024, 3, 1)
    assert dates.last_of_run(date(2022, 12, 31), 1) == date(2022, 12, 31)


def test_last_of_run_stops_at_max_date():
    assert dates.last_of_run(date(2025, 12, 31), 3_000_000) == date.max
    assert dates.last_of_run(date.max, 2) == date.max


def test_days_of_month_and_year_bounds():
    assert len(dates.days_of_month(2023, 2)) == 28
    assert len(dates.days_of_month(2024, 2)) == 29
    assert dates.year_bounds(2022) == (date(2022, 1, 1), date(2023, 1, 1))
