import datetime

import pytest

from kartoffel.clock import (
    DAY_ADDRESS,
    HOURS_ADDRESS,
    MINUTES_ADDRESS,
    MONTH_ADDRESS,
    YEAR_ADDRESS,
    Clock,
    Frequency,
    civil_day,
    civil_month,
    civil_year,
    days_from_civil,
)


def make_clock():
    return Clock(bytearray(256))


def test_epoch_is_2019_01_01():
    assert days_from_civil(2019, 1, 1) == 0


@pytest.mark.parametrize(
    "date",
    [
        datetime.date(2019, 1, 1),
        datetime.date(2020, 2, 29),
        datetime.date(2024, 12, 31),
        datetime.date(2025, 3, 1),
        datetime.date(2100, 3, 1),
        datetime.date(2000, 1, 1),
    ],
)
def test_days_from_civil_matches_calendar(date):
    expected = (date - datetime.date(2019, 1, 1)).days
    assert days_from_civil(date.year, date.month, date.day) == expected


@pytest.mark.parametrize("days", range(-5000, 60000, 173))
def test_civil_round_trip(days):
    y, m, d = civil_year(days), civil_month(days), civil_day(days)
    assert days_from_civil(y, m, d) == days
    assert 1 <= m <= 12
    assert 1 <= d <= 31


def test_load_reads_storage():
    storage = bytearray(256)
    storage[YEAR_ADDRESS] = 25
    storage[MONTH_ADDRESS] = 1
    storage[DAY_ADDRESS] = 1
    storage[HOURS_ADDRESS] = 13
    storage[MINUTES_ADDRESS] = 30
    clock = Clock(storage)
    clock.load()
    assert (clock.year, clock.month, clock.day, clock.hours, clock.minutes) == (25, 1, 1, 13, 30)
    assert clock.count == 0


def test_set_writes_storage_except_seconds():
    clock = make_clock()
    clock.set(25, 1, 1, 13, 30, 5)
    assert clock.storage[YEAR_ADDRESS] == 25
    assert clock.storage[HOURS_ADDRESS] == 13
    assert clock.storage[MINUTES_ADDRESS] == 30
    assert clock.seconds == 5
    assert 5 not in clock.storage


@pytest.mark.parametrize(
    "minute, expected",
    [
        (0, Frequency.MINUTE),
        (9, Frequency.MINUTE10),
        (14, Frequency.MINUTE15),
        (29, Frequency.MINUTE30),
        (59, Frequency.HOUR),
    ],
)
def test_minute_boundaries(minute, expected):
    clock = make_clock()
    clock.set(25, 6, 10, 5, minute, 59)
    assert clock.tick() is expected
    assert clock.seconds == 0


def test_plain_second():
    clock = make_clock()
    clock.set(25, 6, 10, 5, 3, 10)
    assert clock.tick() is Frequency.SECOND
    assert clock.seconds == 11


def test_day_rollover_persists_day():
    clock = make_clock()
    clock.set(25, 6, 10, 23, 59, 59)
    assert clock.tick() is Frequency.DAY
    assert (clock.day, clock.hours, clock.minutes) == (11, 0, 0)
    assert clock.storage[DAY_ADDRESS] == 11


def test_month_rollover():
    clock = make_clock()
    clock.set(25, 1, 31, 23, 59, 59)
    assert clock.tick() is Frequency.DAY
    assert (clock.month, clock.day) == (2, 1)
    assert clock.storage[MONTH_ADDRESS] == 2


def test_april_has_thirty_days():
    clock = make_clock()
    clock.set(25, 4, 30, 23, 59, 59)
    clock.tick()
    assert (clock.month, clock.day) == (5, 1)


def test_leap_february():
    clock = make_clock()
    clock.set(24, 2, 28, 23, 59, 59)
    clock.tick()
    assert (clock.month, clock.day) == (2, 29)


def test_non_leap_february():
    clock = make_clock()
    clock.set(25, 2, 28, 23, 59, 59)
    clock.tick()
    assert (clock.month, clock.day) == (3, 1)


def test_year_rollover():
    clock = make_clock()
    clock.set(25, 12, 31, 23, 59, 59)
    clock.tick()
    assert (clock.year, clock.month, clock.day) == (26, 1, 1)
    assert clock.storage[YEAR_ADDRESS] == 26


def test_epoch_secs_advances_by_one_per_tick():
    clock = make_clock()
    clock.set(25, 12, 31, 23, 59, 57)
    before = clock.epoch_secs()
    for _ in range(5):
        clock.tick()
    assert clock.epoch_secs() == before + 5
    assert clock.count == 5


def test_epoch_secs_at_epoch():
    clock = make_clock()
    clock.set(19, 1, 1, 0, 0, 0)
    assert clock.epoch_secs() == 0