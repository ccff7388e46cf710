"""Tests for local-midnight resolution across DST changes."""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from weightview.domains.weight.connectors.mock_data import get_mock_readings
from weightview.domains.weight.domain_logic.local_day import start_of_local_day

BERLIN = ZoneInfo("Europe/Berlin")
# Clocks spring forward at 02:00 on 2026-03-29 and fall back at 03:00 on 2026-10-25
SPRING_FORWARD_NOON = datetime(2026, 3, 29, 12, 0, tzinfo=BERLIN)
FALL_BACK_NOON = datetime(2026, 10, 25, 12, 0, tzinfo=BERLIN)


@pytest.fixture
def berlin_system_zone(monkeypatch):
    """Run with the process-local zone set to Europe/Berlin."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    monkeypatch.setenv("TZ", "Europe/Berlin")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestZoneAwareClock:
    def test_spring_forward_midnight_keeps_winter_offset(self):
        start = start_of_local_day(SPRING_FORWARD_NOON)
        assert start == datetime(2026, 3, 29, 0, 0, tzinfo=timezone(timedelta(hours=1)))
        assert start.utcoffset() == timedelta(hours=1)

    def test_fall_back_midnight_keeps_summer_offset(self):
        start = start_of_local_day(FALL_BACK_NOON)
        assert start.utcoffset() == timedelta(hours=2)

    def test_week_ahead_lands_on_local_midnight(self):
        end = start_of_local_day(SPRING_FORWARD_NOON, days_ahead=7)
        assert (end.month, end.day, end.hour) == (4, 5, 0)
        assert end.utcoffset() == timedelta(hours=2)

    def test_plain_day(self):
        now = datetime(2026, 3, 10, 15, 30, 45, 123456, tzinfo=BERLIN)
        assert start_of_local_day(now) == datetime(2026, 3, 10, tzinfo=BERLIN)


class TestSystemLocalClock:
    def test_fixed_offset_resolved_with_system_rules(self, berlin_system_zone):
        # What the default clock yields: a fixed +02:00 offset after spring-forward
        now = datetime(2026, 3, 29, 12, 0).astimezone()
        assert now.utcoffset() == timedelta(hours=2)

        start = start_of_local_day(now)

        assert start.utcoffset() == timedelta(hours=1)
        assert start == datetime(2026, 3, 28, 23, 0, tzinfo=timezone.utc)

    def test_foreign_fixed_offset_kept(self, berlin_system_zone):
        now = datetime(2026, 3, 29, 12, 0, tzinfo=timezone.utc)
        assert start_of_local_day(now) == datetime(2026, 3, 29, tzinfo=timezone.utc)


def test_naive_moment_rejected():
    with pytest.raises(ValueError):
        start_of_local_day(datetime(2026, 3, 29, 12, 0))


def test_mock_readings_stay_on_dst_day():
    true_midnight = start_of_local_day(SPRING_FORWARD_NOON)
    for reading in get_mock_readings(SPRING_FORWARD_NOON):
        assert true_midnight <= reading.time <= SPRING_FORWARD_NOON
        assert reading.time.date() == SPRING_FORWARD_NOON.date()
