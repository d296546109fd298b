import pytest

from kartoffel.codewords import (
    binary_to_bits,
    code_word_a,
    code_word_a_channel,
    code_word_b,
    code_word_c,
    code_word_d,
    tristate_to_bits,
)


def test_code_word_b_pinned():
    assert code_word_b(1, 2, True) == "0FFFF0FFFFFF"


def test_code_word_d_pinned():
    assert code_word_d("A", 1, True) == "1FFF1FF00010"


def test_code_word_a_pinned():
    assert code_word_a("11111", "00000", True) == "00000FFFFF0F"


@pytest.mark.parametrize(
    "word",
    [
        code_word_a("10101", "01010", True),
        code_word_b(4, 3, False),
        code_word_c("c", 2, 3, True),
        code_word_d("d", 3, False),
    ],
)
def test_code_words_are_twelve_tristate_letters(word):
    assert len(word) == 12
    assert set(word) <= {"0", "1", "F"}


def test_code_word_a_on_and_off_share_address():
    on = code_word_a("11000", "00110", True)
    off = code_word_a("11000", "00110", False)
    assert on[:10] == off[:10]
    assert on[10:] == off[10:][::-1]


def test_code_word_a_channel_uses_channel_table():
    assert code_word_a_channel("11111", 1, True) == code_word_a("11111", "10000", True)
    assert code_word_a_channel("00000", 5, False) == code_word_a("00000", "00001", False)


def test_code_word_a_channel_out_of_range():
    with pytest.raises(ValueError):
        code_word_a_channel("11111", 6, True)


def test_code_word_a_too_short():
    with pytest.raises(ValueError):
        code_word_a("111", "00000", True)


@pytest.mark.parametrize("address,channel", [(0, 1), (5, 1), (1, 0), (1, 5)])
def test_code_word_b_rejects_out_of_range(address, channel):
    with pytest.raises(ValueError):
        code_word_b(address, channel, True)


def test_code_word_b_status_is_last_letter():
    on = code_word_b(2, 4, True)
    off = code_word_b(2, 4, False)
    assert on[:-1] == off[:-1]
    assert (on[-1], off[-1]) == ("F", "0")


def test_code_word_c_status_and_family():
    on = code_word_c("a", 1, 1, True)
    off = code_word_c("a", 1, 1, False)
    assert on[:-1] == off[:-1]
    assert on.startswith("0000")
    assert code_word_c("b", 1, 1, True)[0] == "F"


@pytest.mark.parametrize("family,group,device", [("z", 1, 1), ("A", 1, 1), ("a", 0, 1), ("a", 1, 5)])
def test_code_word_c_rejects_invalid(family, group, device):
    with pytest.raises(ValueError):
        code_word_c(family, group, device, True)


def test_code_word_d_case_insensitive():
    assert code_word_d("b", 2, False) == code_word_d("B", 2, False)


@pytest.mark.parametrize("group,device", [("E", 1), ("e", 1), ("A", 0), ("A", 4)])
def test_code_word_d_rejects_invalid(group, device):
    with pytest.raises(ValueError):
        code_word_d(group, device, True)


@pytest.mark.parametrize("n", [0, 1, 5, 12])
def test_tristate_letters_match_bit_pairs(n):
    assert tristate_to_bits("0" * n) == binary_to_bits("00" * n)
    assert tristate_to_bits("F" * n) == binary_to_bits("01" * n)
    assert tristate_to_bits("1" * n) == binary_to_bits("11" * n)


def test_tristate_mixed_word_matches_binary():
    assert tristate_to_bits("0F1F") == binary_to_bits("00011101")


@pytest.mark.parametrize("value", [0, 1, 6, 255, 0xABCDE])
def test_binary_round_trip(value):
    text = format(value, "b")
    assert binary_to_bits(text) == (value, len(text))


def test_binary_treats_any_non_zero_as_one():
    assert binary_to_bits("0x1") == binary_to_bits("011")