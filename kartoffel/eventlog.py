"""A compact circular event log stored in a byte buffer.

Layout of the buffer::

    0        version byte
    1..n-1   ring of bytes holding, in order:
             LOG_START, entry*, last timestamp (4 digits base 251), LOG_END

Every entry is the event byte followed by the seconds elapsed since the
previous entry, written little-end first in base 251. The last delta byte
carries a length tag in its high bits, so the ring can be walked backwards
from the timestamp of the newest entry. When the ring runs out of space
the oldest entries are dropped.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableSequence
from dataclasses import dataclass

from kartoffel.clock import civil_day, civil_month, civil_year

LOG_HANDLE = 252
LOG_VERSION = 0x0A
LOG_END = 254
LOG_START = 255
MAX_EVENT = 250
MIN_SIZE = 30

_BASE = 251
_TIMESTAMP_BYTES = 4
_FREE_GAP = 10


class LogError(Exception):
    """The log is corrupt or an entry cannot be recorded."""

    def __init__(self, code: int, info: int, message: str) -> None:
        super().__init__(f"{message} (code {code}, info {info})")
        self.code = code
        self.info = info


@dataclass(frozen=True)
class LogEntry:
    """One recorded event and the moment it happened."""

    event: int
    timestamp: int
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    @classmethod
    def at(cls, event: int, timestamp: int) -> LogEntry:
        days = timestamp // 86400
        return cls(
            event=event,
            timestamp=timestamp,
            year=civil_year(days),
            month=civil_month(days),
            day=civil_day(days),
            hour=timestamp % 86400 // 3600,
            minute=timestamp % 3600 // 60,
            second=timestamp % 60,
        )


def _digits(seconds: int) -> list[int]:
    return [
        seconds // _BASE**3,
        seconds // _BASE**2 % _BASE,
        seconds // _BASE % _BASE,
        seconds % _BASE,
    ]


def _encode_delta(delta: int) -> list[int]:
    head = [delta % _BASE]
    if delta < 128:
        return head
    if delta <= _BASE * 63:
        return head + [delta // _BASE + 128]
    if delta <= _BASE**2 * 31:
        return head + [delta // _BASE % _BASE, delta // _BASE**2 + 192]
    if delta <= _BASE**3 * 15:
        return head + [
            delta // _BASE % _BASE,
            delta // _BASE**2 % _BASE,
            delta // _BASE**3 + 224,
        ]
    raise LogError(42, delta, f"time since the last entry is too large: {delta}s")


class EventLog:
    """Events between 0 and 250 with second-resolution timestamps."""

    def __init__(self, buffer: MutableSequence[int]) -> None:
        self.buffer = buffer

    @classmethod
    def create(cls, size: int, now: int) -> EventLog:
        """A new empty log of ``size`` bytes whose clock starts at ``now``."""
        if size < MIN_SIZE:
            raise LogError(38, size, f"a log needs at least {MIN_SIZE} bytes")
        buffer = bytearray(size)
        buffer[0] = LOG_VERSION
        buffer[1] = LOG_START
        buffer[2:6] = bytes(_digits(now))
        buffer[6] = LOG_END
        return cls(buffer)

    # ring navigation

    def _wrap(self, offset: int) -> int:
        ring = len(self.buffer) - 1
        return (offset - 1) % ring + 1

    def _value(self, offset: int, delta: int = 0) -> int:
        return self.buffer[self._wrap(offset + delta)]

    def _set(self, offset: int, delta: int, value: int) -> None:
        self.buffer[self._wrap(offset + delta)] = value

    def _end_offset(self) -> int:
        for offset in range(1, len(self.buffer)):
            if self.buffer[offset] == LOG_END:
                return offset
        raise LogError(39, 0, "log has no end marker")

    def _start_offset(self) -> int:
        for offset in range(len(self.buffer)):
            if self.buffer[offset] == LOG_START:
                return offset
        raise LogError(40, 0, "log has no start marker")

    def _last_seconds(self) -> int:
        end = self._end_offset()
        seconds = 0
        for delta in range(-_TIMESTAMP_BYTES, 0):
            seconds = seconds * _BASE + self._value(end, delta)
        return seconds

    def _tail(self) -> int:
        return self._wrap(self._end_offset() - _TIMESTAMP_BYTES - 1)

    def _records(self) -> Iterator[tuple[int, int, int]]:
        """Yield (event, timestamp, offset after the entry), newest first."""
        seconds = self._last_seconds()
        cur = self._tail()
        for _ in range(len(self.buffer)):
            last = self._value(cur)
            if last == LOG_START:
                return
            if last & 0x80 == 0:
                width, delta = 2, last
            elif last & 0xC0 == 0x80:
                width = 3
                delta = (last - 128) * _BASE + self._value(cur, -1)
            elif last & 0xE0 == 0xC0:
                width = 4
                delta = (last - 192) * _BASE**2 + self._value(cur, -1) * _BASE + self._value(cur, -2)
            elif last & 0xF0 == 0xE0:
                width = 5
                delta = (
                    (last - 224) * _BASE**3
                    + self._value(cur, -1) * _BASE**2
                    + self._value(cur, -2) * _BASE
                    + self._value(cur, -3)
                )
            else:
                raise LogError(41, last, f"invalid length tag {last}")
            event = self._value(cur, 1 - width)
            cur = self._wrap(cur - width)
            yield event, seconds, cur
            seconds -= delta
        raise LogError(40, 0, "log has no reachable start marker")

    # making room

    def _advance_start(self) -> None:
        records = list(self._records())
        cur = records[-2][2] if len(records) >= 2 else self._tail()
        self.buffer[self._start_offset()] = 0
        self._set(cur, 0, LOG_START)

    def _ensure_free_gap(self) -> None:
        while True:
            start = self._start_offset()
            end = self._end_offset()
            if all(start != self._wrap(end + i) for i in range(_FREE_GAP)):
                return
            self._advance_start()

    # public interface

    def is_empty(self) -> bool:
        """Whether no entries are recorded."""
        return next(self._records(), None) is None

    def log(self, event: int, now: int) -> None:
        """Record ``event`` at epoch second ``now``; events above 250 are ignored."""
        if event > MAX_EVENT:
            return
        self._ensure_free_gap()
        cur = self._end_offset()
        delta = now - self._last_seconds()
        if delta < 0:
            raise LogError(42, delta, "entries must be logged in time order")
        record = [event, *_encode_delta(delta), *_digits(now), LOG_END]
        for position, value in enumerate(record, start=-_TIMESTAMP_BYTES):
            self._set(cur, position, value)

    def entries(self) -> Iterator[LogEntry]:
        """The recorded entries, newest first."""
        for event, seconds, _ in self._records():
            yield LogEntry.at(event, seconds)

    def __len__(self) -> int:
        return sum(1 for _ in self._records())

    def dump(self) -> str:
        """A plain-text listing of all entries, newest first."""
        rule = "=========="
        lines = ["LOG", rule]
        lines.extend(
            f"{e.year}-{e.month}-{e.day} {e.hour}-{e.minute}-{e.second}    {e.event}"
            for e in self.entries()
        )
        lines.append(rule)
        return "\n".join(lines)