# kartoffel

The core pieces of a small home-automation controller, as plain Python
objects. It needs nothing beyond the standard library.

## Modules

- `kartoffel.clock`: a `Clock` that keeps year (two digits), month, day,
  hours, minutes and seconds, and writes all but the seconds into any
  byte-addressed storage (`load`, `set`). `tick()` advances one second and
  returns the `Frequency` boundary it crossed; `epoch_secs()` counts seconds
  since 2019-01-01 00:00:00. The helpers `days_from_civil`, `civil_year`,
  `civil_month` and `civil_day` convert between dates and day numbers
  relative to that same day.
- `kartoffel.drawing`: a `Canvas` framebuffer (320 × 240 by default) with a
  current `color`, a clipping rectangle (`push_clipping`, `pop_clipping`),
  pixels, horizontal and vertical lines, Bresenham lines, rectangles,
  fills and `draw_bar`. `pixel(x, y)` reads a pixel back. `draw_icon` and
  `icon_size` handle run-length encoded icons. Colours use the 16-bit
  5-6-5 layout produced by `color_from_rgb`.
- `kartoffel.heap`: a compacting `Heap` of blocks of up to 255 bytes, each
  owned by an instance and a handle, with byte and float access, freeing
  and fragment deletion.
- `kartoffel.eventlog`: an `EventLog` that stores events 0..250 with their
  timestamps in a circular byte buffer, two to five bytes per entry, and
  drops the oldest entries when full. `entries()` yields `LogEntry`
  objects newest first; `dump()` returns a text listing.
- `kartoffel.codewords`: tri-state code words for remote-controlled outlets
  of types A to D (`code_word_a`, `code_word_a_channel`, `code_word_b`,
  `code_word_c`, `code_word_d`) and their bit patterns (`tristate_to_bits`,
  `binary_to_bits`).
- `kartoffel.rules`: a `RuleBook` of conditions and actions ("axons")
  stored as bytes. Axons are inserted, read, rewritten and deleted by
  index; `evaluate` runs each combined condition with callbacks you supply
  and performs its actions when all its conditions hold.
- `kartoffel.instance`: an `InstanceTable` of installed app instances kept
  in byte storage, with `Status` flags, lookups and a context stack
  (`switch_context`, `pop_context`, or the `context` context manager).

Failures are raised as exceptions: `HeapError`, `LogError`, `RulesError`
and `InstanceError` carry a numeric `code` and an `info` value. The
code-word functions raise `ValueError` for settings that do not exist.

## Install

    pip install .

To run the tests:

    pip install .[test]
    pytest

## Examples

    from kartoffel.codewords import code_word_b, tristate_to_bits
    from kartoffel.drawing import color_from_rgb

    word = code_word_b(1, 2, True)        # "0FFFF0FFFFFF"
    code, length = tristate_to_bits(word) # length == 24

    red = color_from_rgb(255, 0, 0)       # 0xF800

An event log:

    from kartoffel.eventlog import EventLog

    log = EventLog.create(64, now=0)
    log.log(3, now=120)
    entry = next(log.entries())           # event 3 at 2019-01-01 00:02:00

A rule book, with labels supplied by a callable. Each `[` in a label
adds one parameter to the axon:

    from kartoffel.rules import RuleBook

    def labels(is_condition, instance, kind):
        return "Temperature above [degrees]" if is_condition else "Switch on"

    book = RuleBook.create(labels)
    book.insert_axon(0, True, 1, 0)
    book.dump()                           # "ff c0 01 00 00 00 ed "

## What it does not do

The package holds data structures and encodings only. It has no command to
run, no main loop or scheduler, and does not drive a display: a `Canvas`
is an in-memory framebuffer. It builds RC outlet code words and bit
patterns but does not transmit or receive radio signals. Storage for the
clock and the instance table is any mutable sequence of bytes you pass in;
nothing is written to disk.