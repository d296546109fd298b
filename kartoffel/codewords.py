"""Tri-state code words for the common families of remote-controlled outlets.

A code word is a string of the letters ``0``, ``1`` and ``F``. On the air
each letter takes two bits: ``0`` is 00, ``F`` is 01 and ``1`` is 11.
"""

from __future__ import annotations

_CHANNEL_CODES = ("00000", "10000", "01000", "00100", "00010", "00001")

_TRISTATE_BITS = {"0": 0b00, "F": 0b01, "1": 0b11}


def _dip(switches: str) -> str:
    if len(switches) < 5:
        raise ValueError(f"DIP switch setting needs 5 positions, got {switches!r}")
    return "".join("F" if c == "0" else "0" for c in switches[:5])


def code_word_a(group: str, device: str, status: bool) -> str:
    """Type A: two banks of five DIP switches, each given as a string of 0/1."""
    return _dip(group) + _dip(device) + ("0F" if status else "F0")


def code_word_a_channel(group: str, channel: int, status: bool) -> str:
    """Type A with the device bank given as a channel number (0..5)."""
    if not 0 <= channel < len(_CHANNEL_CODES):
        raise ValueError(f"channel must be 0..{len(_CHANNEL_CODES) - 1}, not {channel}")
    return code_word_a(group, _CHANNEL_CODES[channel], status)


def code_word_b(address: int, channel: int, status: bool) -> str:
    """Type B: two rotary or sliding switches with positions 1..4."""
    if not (1 <= address <= 4 and 1 <= channel <= 4):
        raise ValueError(f"address and channel must be 1..4, not {address} and {channel}")
    address_part = "".join("0" if address == i else "F" for i in range(1, 5))
    channel_part = "".join("0" if channel == i else "F" for i in range(1, 5))
    return address_part + channel_part + "FFF" + ("F" if status else "0")


def code_word_c(family: str, group: int, device: int, status: bool) -> str:
    """Type C (Intertechno): family letter a..p, group and device 1..4."""
    if len(family) != 1:
        raise ValueError(f"family must be a single letter, not {family!r}")
    number = ord(family) - ord("a")
    if not (0 <= number <= 15 and 1 <= group <= 4 and 1 <= device <= 4):
        raise ValueError(f"invalid family {family!r}, group {group} or device {device}")

    def bits(value: int, count: int) -> str:
        return "".join("F" if value & (1 << i) else "0" for i in range(count))

    return bits(number, 4) + bits(device - 1, 2) + bits(group - 1, 2) + "0FF" + ("F" if status else "0")


def code_word_d(group: str, device: int, status: bool) -> str:
    """Type D (REV): group letter A..D (either case), device 1..3."""
    if len(group) != 1:
        raise ValueError(f"group must be a single letter, not {group!r}")
    number = ord(group) - ord("a") if group >= "a" else ord(group) - ord("A")
    if not (0 <= number <= 3 and 1 <= device <= 3):
        raise ValueError(f"invalid group {group!r} or device {device}")
    group_part = "".join("1" if number == i else "F" for i in range(4))
    device_part = "".join("1" if device == i else "F" for i in range(1, 4))
    return group_part + device_part + "000" + ("10" if status else "01")


def tristate_to_bits(code_word: str) -> tuple[int, int]:
    """The bit pattern and its length for a tri-state code word.

    Letters other than ``0``, ``1`` and ``F`` are sent as 00.
    """
    code = 0
    for letter in code_word:
        code = (code << 2) | _TRISTATE_BITS.get(letter, 0)
    return code, 2 * len(code_word)


def binary_to_bits(code_word: str) -> tuple[int, int]:
    """The bit pattern and its length for a binary code word; any non-``0`` is a one."""
    code = 0
    for letter in code_word:
        code = (code << 1) | (letter != "0")
    return code, len(code_word)