"""Wall clock kept by the kernel, with civil-date arithmetic relative to 2019-01-01."""

from __future__ import annotations

import enum
from collections.abc import MutableSequence

YEAR_ADDRESS = 123
MONTH_ADDRESS = 124
DAY_ADDRESS = 125
HOURS_ADDRESS = 126
MINUTES_ADDRESS = 127

# Day offsets that move the civil algorithm's epoch (0000-03-01) to 2019-01-01.
_EPOCH_SHIFT = 719468 + 17897


class Frequency(enum.Enum):
    """The coarsest period boundary crossed by a clock tick."""

    FIRST_CALL = enum.auto()
    SECOND = enum.auto()
    MINUTE = enum.auto()
    MINUTE10 = enum.auto()
    MINUTE15 = enum.auto()
    MINUTE30 = enum.auto()
    HOUR = enum.auto()
    DAY = enum.auto()
    MONTH = enum.auto()


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _tmod(a: int, b: int) -> int:
    """Remainder matching truncating division."""
    return a - b * _tdiv(a, b)


def days_from_civil(y: int, m: int, d: int) -> int:
    """Number of days between 2019-01-01 and the given date."""
    if m <= 2:
        y -= 1
    era = _tdiv(y, 400)
    yoe = y - era * 400
    doy = _tdiv(153 * (m + (-3 if m > 2 else 9)) + 2, 5) + d - 1
    doe = yoe * 365 + _tdiv(yoe, 4) - _tdiv(yoe, 100) + doy
    return era * 146097 + doe - _EPOCH_SHIFT


def _civil(days: int) -> tuple[int, int, int]:
    days += _EPOCH_SHIFT
    era = _tdiv(days, 146097)
    doe = days - era * 146097
    yoe = _tdiv(doe - _tdiv(doe, 1460) + _tdiv(doe, 36524) - _tdiv(doe, 146096), 365)
    doy = doe - (365 * yoe + _tdiv(yoe, 4) - _tdiv(yoe, 100))
    mp = _tdiv(5 * doy + 2, 153)
    month = mp + (3 if mp < 10 else -9)
    day = doy - _tdiv(153 * mp + 2, 5) + 1
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def civil_year(days: int) -> int:
    """Year of the date that lies ``days`` days after 2019-01-01."""
    return _civil(days)[0]


def civil_month(days: int) -> int:
    """Month (1-12) of the date that lies ``days`` days after 2019-01-01."""
    return _civil(days)[1]


def civil_day(days: int) -> int:
    """Day of month of the date that lies ``days`` days after 2019-01-01."""
    return _civil(days)[2]


class Clock:
    """A calendar clock whose date fields are persisted in byte storage.

    The year is kept as two digits (years since 2000). Seconds are never
    persisted.
    """

    def __init__(self, storage: MutableSequence[int]) -> None:
        self.storage = storage
        self.year = 0
        self.month = 0
        self.day = 0
        self.hours = 0
        self.minutes = 0
        self.seconds = 0
        self.count = 0

    def _store(self, address: int, value: int) -> None:
        self.storage[address] = value & 0xFF

    def load(self) -> None:
        """Read the date and time (without seconds) from storage."""
        self.count = 0
        self.year = self.storage[YEAR_ADDRESS]
        self.month = self.storage[MONTH_ADDRESS]
        self.day = self.storage[DAY_ADDRESS]
        self.hours = self.storage[HOURS_ADDRESS]
        self.minutes = self.storage[MINUTES_ADDRESS]

    def set(self, year: int, month: int, day: int, hours: int, minutes: int, seconds: int) -> None:
        """Set every field; all but the seconds are written to storage."""
        self.year = year
        self._store(YEAR_ADDRESS, year)
        self.month = month
        self._store(MONTH_ADDRESS, month)
        self.day = day
        self._store(DAY_ADDRESS, day)
        self.hours = hours
        self._store(HOURS_ADDRESS, hours)
        self.minutes = minutes
        self._store(MINUTES_ADDRESS, minutes)
        self.seconds = seconds

    def _days_in_month(self) -> int:
        if self.month == 2:
            return 29 if self.year % 4 == 0 else 28
        return 31 - _tmod(_tmod(self.month - 1, 7), 2)

    def tick(self) -> Frequency:
        """Advance by one second and report the largest boundary crossed."""
        days_in_month = self._days_in_month()
        self.seconds += 1
        self.count += 1
        kind = Frequency.SECOND

        if self.seconds == 60:
            self.seconds = 0
            self.minutes += 1
            kind = Frequency.MINUTE
            if self.minutes % 10 == 0:
                kind = Frequency.MINUTE10
            if self.minutes % 15 == 0:
                kind = Frequency.MINUTE15
            if self.minutes % 30 == 0:
                kind = Frequency.MINUTE30
        if self.minutes == 60:
            kind = Frequency.HOUR
            self.minutes = 0
            self.hours += 1
            self._store(HOURS_ADDRESS, self.hours)
        if self.hours == 24:
            kind = Frequency.DAY
            self.hours = 0
            self.day += 1
            self._store(DAY_ADDRESS, self.day)
        if self.day == days_in_month + 1:
            self.day = 1
            self.month += 1
            kind = Frequency.DAY
            self._store(MONTH_ADDRESS, self.month)
        if self.month == 13:
            self.month = 1
            self.year += 1
            self._store(YEAR_ADDRESS, self.year)
        return kind

    def epoch_secs(self) -> int:
        """Seconds since 2019-01-01 00:00:00."""
        days = days_from_civil(self.year + 2000, self.month, self.day)
        return days * 86400 + self.hours * 3600 + self.minutes * 60 + self.seconds