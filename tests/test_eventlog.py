import pytest

from kartoffel.eventlog import EventLog, LogError


def test_create_layout():
    log = EventLog.create(30, 0)
    assert list(log.buffer[:7]) == [0x0A, 255, 0, 0, 0, 0, 254]
    assert len(log.buffer) == 30


def test_create_too_small():
    with pytest.raises(LogError) as info:
        EventLog.create(29, 0)
    assert info.value.code == 38


def test_new_log_is_empty():
    log = EventLog.create(40, 500)
    assert log.is_empty()
    assert len(log) == 0
    assert list(log.entries()) == []


@pytest.mark.parametrize(
    "delta, encoded",
    [
        (120, [18, 120]),
        (128, [18, 128, 128]),
        (251, [18, 0, 129]),
        (15810, [18, 248, 190]),
    ],
)
def test_documented_encodings(delta, encoded):
    log = EventLog.create(40, 0)
    log.log(18, delta)
    assert list(log.buffer[2:2 + len(encoded)]) == encoded
    assert log.buffer[2 + len(encoded) + 4] == 254


@pytest.mark.parametrize("delta", [0, 5, 127, 128, 250, 251, 15813, 15814, 30000, 1_950_000, 5_000_000])
def test_round_trip_of_delta(delta):
    start = 1000
    log = EventLog.create(40, start)
    log.log(7, start + delta)
    (entry,) = list(log.entries())
    assert entry.event == 7
    assert entry.timestamp == start + delta
    assert not log.is_empty()


def test_delta_too_large():
    log = EventLog.create(40, 0)
    with pytest.raises(LogError) as info:
        log.log(1, 251**3 * 15 + 1)
    assert info.value.code == 42


def test_time_going_backwards():
    log = EventLog.create(40, 100)
    with pytest.raises(LogError) as info:
        log.log(1, 50)
    assert info.value.code == 42


def test_events_above_250_are_ignored():
    log = EventLog.create(40, 0)
    before = bytes(log.buffer)
    log.log(251, 10)
    assert bytes(log.buffer) == before
    assert len(log) == 0


def test_epoch_date_fields():
    log = EventLog.create(40, 0)
    log.log(3, 0)
    (entry,) = list(log.entries())
    assert (entry.year, entry.month, entry.day) == (2019, 1, 1)
    assert (entry.hour, entry.minute, entry.second) == (0, 0, 0)


def test_entries_newest_first():
    log = EventLog.create(60, 0)
    times = [10, 400, 20000, 20001]
    for event, t in enumerate(times):
        log.log(event, t)
    entries = list(log.entries())
    assert [e.event for e in entries] == [3, 2, 1, 0]
    assert [e.timestamp for e in entries] == times[::-1]
    assert len(log) == len(times)


def test_wraparound_keeps_newest_entries():
    log = EventLog.create(30, 0)
    for i in range(60):
        log.log(i % 200, i * 10)
    entries = list(log.entries())
    assert 0 < len(entries) < 60
    assert entries[0].event == 59
    assert entries[0].timestamp == 590
    assert all(e.timestamp == e.event * 10 for e in entries)
    assert [e.event for e in entries] == list(range(59, 59 - len(entries), -1))


def test_wraparound_with_mixed_widths():
    log = EventLog.create(35, 0)
    times = {}
    now = 0
    steps = [3, 200, 16000, 40, 2_000_000, 1, 300]
    for i in range(80):
        now += steps[i % len(steps)]
        log.log(i, now)
        times[i] = now
    entries = list(log.entries())
    assert entries[0].event == 79
    assert all(e.timestamp == times[e.event] for e in entries)


def test_reopen_from_buffer():
    log = EventLog.create(50, 0)
    for i in range(5):
        log.log(i, i * 100)
    copy = EventLog(bytearray(log.buffer))
    assert list(copy.entries()) == list(log.entries())


def test_missing_end_marker():
    log = EventLog(bytearray(30))
    with pytest.raises(LogError) as info:
        list(log.entries())
    assert info.value.code == 39


def test_dump():
    log = EventLog.create(40, 0)
    log.log(18, 120)
    lines = log.dump().splitlines()
    assert lines[0] == "LOG"
    assert lines[1] == lines[-1] == "=========="
    assert lines[2] == "2019-1-1 0-2-0    18"
    assert len(lines) == 4