"""Tests for digit grouping and cursor tracking."""

import pytest

from card_field.formatter import (
    GroupFormatter,
    InvalidPattern,
    clean_digits,
    cursor_after_edit,
    group_digits,
    reposition_cursor,
    validate_pattern,
)
from card_field.types import CursorState, EditEvent

SAMPLE_INPUTS = [
    "",
    "   ",
    "4",
    "4111",
    "41111",
    "4111 1111",
    "4111-1111-1111-1111",
    " 4111 1111 1111 1111 ",
    "abc 12 de 3",
    "1234567890123456789012",
    "  --  ",
    "12 34 56 78 90",
]


class TestCleanDigits:
    def test_keeps_only_digits(self):
        assert clean_digits("4111-1111 abc 2") == "411111112"

    def test_strips_whitespace(self):
        assert clean_digits("  4111  ") == "4111"

    def test_empty(self):
        assert clean_digits("") == ""

    def test_no_digits(self):
        assert clean_digits("card no.") == ""

    def test_non_ascii_digits_dropped(self):
        assert clean_digits("4²٣ 1") == "41"

    @pytest.mark.parametrize("raw", SAMPLE_INPUTS)
    def test_idempotent(self, raw):
        once = clean_digits(raw)
        assert clean_digits(once) == once


class TestGroupDigits:
    def test_full_number(self):
        assert group_digits("4111111111111111", (4, 4, 4, 4)) == "4111 1111 1111 1111"

    def test_partial_last_group(self):
        assert group_digits("411111", (4, 4, 4, 4)) == "4111 11"

    def test_exact_group_boundary_has_no_trailing_separator(self):
        assert group_digits("41111111", (4, 4, 4, 4)) == "4111 1111"

    def test_shorter_than_first_group(self):
        assert group_digits("41", (4, 4, 4, 4)) == "41"

    def test_empty(self):
        assert group_digits("", (4, 4, 4, 4)) == ""

    def test_truncates_to_capacity(self):
        digits = "12345678901234567890"
        assert group_digits(digits, (4, 4, 4, 4)) == "1234 5678 9012 3456"

    def test_uneven_pattern(self):
        assert group_digits("378282246310005", (4, 6, 5)) == "3782 822463 10005"

    def test_separator_after_every_fourth_digit(self):
        for n in range(1, 16):
            digits = "7" * n
            groups = group_digits(digits, (4, 4, 4, 4)).split(" ")
            assert all(len(g) == 4 for g in groups[:-1])
            assert 1 <= len(groups[-1]) <= 4
            assert "".join(groups) == digits


class TestValidatePattern:
    def test_valid(self):
        assert validate_pattern([4, 4, 4, 4]) == (4, 4, 4, 4)

    def test_empty(self):
        with pytest.raises(InvalidPattern):
            validate_pattern([])

    def test_none(self):
        with pytest.raises(InvalidPattern):
            validate_pattern(None)

    def test_zero_entry(self):
        with pytest.raises(InvalidPattern):
            validate_pattern([4, 0, 4])

    def test_negative_entry(self):
        with pytest.raises(InvalidPattern):
            validate_pattern([4, -4])

    def test_non_integer_entry(self):
        with pytest.raises(InvalidPattern):
            validate_pattern([4, "4"])

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            GroupFormatter([])


class TestCursorAfterEdit:
    def test_insertion(self):
        state = cursor_after_edit(EditEvent(start=4, removed=0, inserted=1))
        assert state == CursorState(position=5, velocity=1)

    def test_deletion(self):
        state = cursor_after_edit(EditEvent(start=5, removed=1, inserted=0))
        assert state == CursorState(position=5, velocity=-1)

    def test_replacement(self):
        state = cursor_after_edit(EditEvent(start=0, removed=3, inserted=3))
        assert state == CursorState(position=3, velocity=0)


class TestRepositionCursor:
    def test_clamped_to_length(self):
        assert reposition_cursor("4111", CursorState(position=9, velocity=0)) == 4

    def test_clamped_to_zero(self):
        assert reposition_cursor("4111", CursorState(position=-2, velocity=0)) == 0

    def test_insertion_skips_separator(self):
        assert reposition_cursor("4111 1", CursorState(position=5, velocity=1)) == 6

    def test_deletion_retreats_over_separator(self):
        assert reposition_cursor("4111 111", CursorState(position=5, velocity=-1)) == 4

    def test_no_adjustment_without_velocity(self):
        assert reposition_cursor("4111 1", CursorState(position=5, velocity=0)) == 5

    def test_deletion_near_start_not_adjusted(self):
        assert reposition_cursor("1 2", CursorState(position=1, velocity=-1)) == 1

    def test_insertion_mid_group_not_adjusted(self):
        assert reposition_cursor("4111 1111", CursorState(position=7, velocity=1)) == 7


class TestGroupFormatter:
    def test_default_pattern(self):
        fmt = GroupFormatter()
        assert fmt.pattern == (4, 4, 4, 4)
        assert fmt.capacity == 16

    def test_reformat_empty(self):
        assert GroupFormatter().reformat("") == ("", 0)

    def test_reformat_whitespace_only(self):
        fmt = GroupFormatter()
        fmt.observe_edit(0, 0, 3)
        assert fmt.reformat("   ") == ("", 0)

    def test_full_number_without_edit_context(self):
        text, _ = GroupFormatter().reformat("4111111111111111")
        assert text == "4111 1111 1111 1111"

    def test_dashes_stripped(self):
        text, _ = GroupFormatter().reformat("4111-1111-1111-1111")
        assert text == "4111 1111 1111 1111"

    def test_typing_fifth_digit(self):
        fmt = GroupFormatter()
        # "4111" -> type "1" at offset 4
        fmt.observe_edit(4, 0, 1)
        assert fmt.reformat("41111") == ("4111 1", 6)

    def test_insert_before_separator_in_middle(self):
        fmt = GroupFormatter()
        # "4111 1111" with "2" typed at offset 4
        fmt.observe_edit(4, 0, 1)
        text, cursor = fmt.reformat("41112 1111")
        assert text == "4111 2111 1"
        assert cursor == 6
        assert text[cursor - 1] == "2"

    def test_delete_after_separator(self):
        fmt = GroupFormatter()
        # "4111 1111" with the digit at offset 5 removed
        fmt.observe_edit(5, 1, 0)
        assert fmt.reformat("4111 111") == ("4111 111", 4)

    def test_delete_separator(self):
        fmt = GroupFormatter()
        # Backspace over the separator of "4111 1111"
        fmt.observe_edit(4, 1, 0)
        assert fmt.reformat("41111111") == ("4111 1111", 4)

    def test_twenty_digits_truncated(self):
        fmt = GroupFormatter()
        fmt.observe_edit(0, 0, 20)
        text, cursor = fmt.reformat("12345678901234567890")
        assert text == "1234 5678 9012 3456"
        assert cursor == len(text)

    def test_truncation_ignores_noise(self):
        text, _ = GroupFormatter().reformat("1234-5678/9012.3456 7890 xyz")
        assert text == "1234 5678 9012 3456"

    def test_reformat_does_not_change_state(self):
        fmt = GroupFormatter()
        fmt.observe_edit(4, 0, 1)
        before = fmt.state
        first = fmt.reformat("41111")
        assert fmt.reformat("41111") == first
        assert fmt.state == before

    def test_format_helper(self):
        assert GroupFormatter((4, 6, 5)).format("3782-822463-10005") == "3782 822463 10005"


class TestFormattedOutputProperties:
    @pytest.mark.parametrize("raw", SAMPLE_INPUTS)
    @pytest.mark.parametrize("pattern", [(4, 4, 4, 4), (4, 6, 5), (1, 1, 1), (3,)])
    def test_separator_placement(self, raw, pattern):
        text, _ = GroupFormatter(pattern).reformat(raw)
        assert "  " not in text
        assert not text.startswith(" ")
        assert not text.endswith(" ")

    @pytest.mark.parametrize("raw", SAMPLE_INPUTS)
    @pytest.mark.parametrize("start,removed,inserted", [
        (0, 0, 0), (0, 0, 1), (3, 1, 0), (4, 0, 1), (5, 1, 0), (30, 0, 5), (9, 9, 0),
    ])
    def test_cursor_within_text(self, raw, start, removed, inserted):
        fmt = GroupFormatter()
        fmt.observe_edit(start, removed, inserted)
        text, cursor = fmt.reformat(raw)
        assert 0 <= cursor <= len(text)

    @pytest.mark.parametrize("raw", SAMPLE_INPUTS)
    def test_digit_count_never_exceeds_capacity(self, raw):
        fmt = GroupFormatter()
        text, _ = fmt.reformat(raw)
        assert len(text.replace(" ", "")) <= fmt.capacity
