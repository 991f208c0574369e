"""Tests for dailyfocus/dates.py: date keys."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest
from dailyfocus.dates import date_key, parse_key, previous_key, shift_key


def test_same_day_same_key():
    tz = ZoneInfo("UTC")
    assert date_key(datetime(2026, 2, 11, 0, 0, tzinfo=tz)) == "2026-02-11"
    assert date_key(datetime(2026, 2, 11, 23, 59, 59, tzinfo=tz)) == "2026-02-11"


def test_key_uses_local_zone():
    utc_evening = datetime(2026, 2, 11, 23, 30, tzinfo=timezone.utc)
    assert date_key(utc_evening) == "2026-02-11"
    assert date_key(utc_evening, ZoneInfo("Asia/Jakarta")) == "2026-02-12"
    assert date_key(utc_evening, ZoneInfo("America/New_York")) == "2026-02-11"


def test_key_from_date():
    assert date_key(date(2026, 3, 1)) == "2026-03-01"


def test_shift_key_crosses_month_and_year():
    assert previous_key("2026-03-01") == "2026-02-28"
    assert previous_key("2024-03-01") == "2024-02-29"
    assert shift_key("2025-12-31", 1) == "2026-01-01"


def test_parse_key_rejects_garbage():
    assert parse_key("2026-02-11") == date(2026, 2, 11)
    with pytest.raises(ValueError):
        parse_key("20260211")
    with pytest.raises(ValueError):
        parse_key("not-a-date")
