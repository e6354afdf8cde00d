import logging
from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

import pytest

from schedule.business_hours import BusinessHoursGate

NY = ZoneInfo("America/New_York")

# 2026-10-19 is a Monday, 2026-10-18 a Sunday.


@pytest.mark.parametrize("day", [19, 20, 21, 22, 23, 24])
def test_gate_open_inside_window_monday_to_saturday(day):
    gate = BusinessHoursGate()
    assert gate.is_open(datetime(2026, 10, day, 9, 0, tzinfo=NY))
    assert gate.is_open(datetime(2026, 10, day, 12, 30, tzinfo=NY))
    assert gate.is_open(datetime(2026, 10, day, 14, 59, 59, tzinfo=NY))


@pytest.mark.parametrize("hh,mm", [(0, 0), (8, 59), (15, 0), (15, 1), (23, 59)])
def test_gate_closed_outside_window(hh, mm):
    gate = BusinessHoursGate()
    assert not gate.is_open(datetime(2026, 10, 20, hh, mm, tzinfo=NY))


def test_gate_closed_all_day_sunday():
    gate = BusinessHoursGate()
    assert not gate.is_open(datetime(2026, 10, 18, 10, 0, tzinfo=NY))
    assert not gate.is_open(datetime(2026, 10, 18, 14, 0, tzinfo=NY))


def test_gate_evaluates_in_reference_timezone():
    gate = BusinessHoursGate()
    # 14:00 UTC on a Monday in October is 10:00 in New York.
    assert gate.is_open(datetime(2026, 10, 19, 14, 0, tzinfo=timezone.utc))
    # 20:00 UTC is 16:00 in New York.
    assert not gate.is_open(datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc))


def test_gate_treats_naive_instant_as_utc():
    gate = BusinessHoursGate()
    assert gate.is_open(datetime(2026, 10, 19, 14, 0))


def test_gate_sunday_in_utc_but_monday_locally_is_not_sunday():
    gate = BusinessHoursGate(tz_name="Pacific/Auckland")
    # Sunday 22:00 UTC is Monday 11:00 in Auckland.
    assert gate.is_open(datetime(2026, 10, 18, 22, 0, tzinfo=timezone.utc))


def test_gate_fails_closed_on_unknown_timezone(caplog):
    caplog.set_level(logging.ERROR, logger="notifier.business_hours")
    gate = BusinessHoursGate(tz_name="Mars/Olympus_Mons")
    assert not gate.is_open(datetime(2026, 10, 19, 14, 0, tzinfo=timezone.utc))
    tz_logs = [r for r in caplog.records if r.getMessage() == "business_hours_timezone_error"]
    assert len(tz_logs) == 1
    assert tz_logs[0].levelno == logging.ERROR


def test_gate_custom_window_and_closed_days():
    gate = BusinessHoursGate(tz_name="UTC", start=time(8), end=time(18), closed_weekdays={5, 6})
    assert gate.is_open(datetime(2026, 10, 19, 17, 0, tzinfo=timezone.utc))
    assert not gate.is_open(datetime(2026, 10, 24, 10, 0, tzinfo=timezone.utc))


def test_gate_rejects_inverted_window():
    with pytest.raises(ValueError):
        BusinessHoursGate(start=time(15), end=time(9))
