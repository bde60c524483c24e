"""Digit grouping and cursor tracking for card-number style input.

The formatter turns whatever the user typed into digit groups separated by a
single space (``4111 1111 1111 1111``) and works out where the cursor should
land in the regrouped text so that typing and deleting feel continuous.

Usage from a host text field, once per edit::

    fmt.observe_edit(start, removed, inserted)
    text, cursor = fmt.reformat(current_text)
"""

from __future__ import annotations

import re
from typing import Sequence

from card_field.types import CursorState, EditEvent

SEPARATOR = " "
DEFAULT_GROUP_PATTERN = (4, 4, 4, 4)

_NON_DIGIT_RE = re.compile(r"[^0-9]")


class InvalidPattern(ValueError):
    """Raised when a group pattern is empty or has a non-positive entry."""


def validate_pattern(pattern: Sequence[int]) -> tuple[int, ...]:
    """Return the pattern as a tuple, raising InvalidPattern if unusable."""
    if pattern is None or len(pattern) == 0:
        raise InvalidPattern("group pattern cannot be empty")
    for size in pattern:
        if isinstance(size, bool) or not isinstance(size, int):
            raise InvalidPattern(f"group sizes must be integers, got {size!r}")
        if size <= 0:
            raise InvalidPattern(f"group sizes must be greater than zero, got {size}")
    return tuple(pattern)


def clean_digits(text: str) -> str:
    """Strip surrounding whitespace and drop every non-digit character."""
    return _NON_DIGIT_RE.sub("", text.strip())


def group_digits(digits: str, pattern: Sequence[int]) -> str:
    """Join digits into groups, truncating anything beyond the pattern's capacity."""
    if not digits:
        return digits
    length = min(len(digits), sum(pattern))
    parts = []
    start = 0
    end = 0
    for size in pattern:
        end += size
        if end >= length:
            parts.append(digits[start:length])
            break
        parts.append(digits[start:end])
        start = end
    return SEPARATOR.join(parts)


def cursor_after_edit(event: EditEvent) -> CursorState:
    """Provisional cursor state right after an edit, before regrouping."""
    return CursorState(position=event.start + event.inserted, velocity=event.velocity)


def reposition_cursor(formatted: str, state: CursorState) -> int:
    """Clamp the cursor into the formatted text and step over a separator.

    Moves at most one position, so separators must be a single character.
    """
    pos = max(0, min(state.position, len(formatted)))
    if state.velocity > 0 and pos > 0 and formatted[pos - 1] == SEPARATOR:
        # Typed up to a group boundary: land after the separator
        pos += 1
    elif state.velocity < 0 and pos > 1 and formatted[pos - 1] == SEPARATOR:
        pos -= 1
    return pos


def reformat(text: str, pattern: Sequence[int], state: CursorState) -> tuple[str, int]:
    """Regroup ``text`` and compute the cursor for it. Pure function."""
    formatted = group_digits(clean_digits(text), pattern)
    return formatted, reposition_cursor(formatted, state)


class GroupFormatter:
    """Formats digit input into groups and tracks the cursor between edits.

    The only state kept between calls is the CursorState produced by the last
    observe_edit(). reformat() never changes it, so calling it again on the
    same text gives the same answer.
    """

    def __init__(self, pattern: Sequence[int] = DEFAULT_GROUP_PATTERN):
        self._pattern = validate_pattern(pattern)
        self.state = CursorState()

    @property
    def pattern(self) -> tuple[int, ...]:
        return self._pattern

    @property
    def capacity(self) -> int:
        """Maximum number of digits shown."""
        return sum(self._pattern)

    def observe_edit(self, start: int, removed: int, inserted: int):
        """Record the edit that is about to be reformatted."""
        self.state = cursor_after_edit(EditEvent(start, removed, inserted))

    def observe(self, event: EditEvent):
        self.observe_edit(event.start, event.removed, event.inserted)

    def reformat(self, text: str) -> tuple[str, int]:
        """Return (formatted_text, cursor_position) for the current text."""
        return reformat(text, self._pattern, self.state)

    def format(self, text: str) -> str:
        """Format text with no cursor bookkeeping."""
        return group_digits(clean_digits(text), self._pattern)
