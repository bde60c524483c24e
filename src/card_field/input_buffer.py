from __future__ import annotations

from typing import Callable

from card_field.types import EditEvent

ChangeCallback = Callable[[EditEvent], None]


class InputBuffer:
    """Editable text buffer with cursor position tracking.

    Every edit that changes the text is described by an EditEvent, returned
    to the caller and passed to ``on_change`` once the new text is in place.
    Edits that change nothing return None and notify no one.
    """

    def __init__(self, on_change: ChangeCallback | None = None):
        self._text = ""
        self._cursor = 0
        self.on_change = on_change

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def _splice(self, start: int, end: int, new: str, cursor: int) -> EditEvent | None:
        """Replace text[start:end] with ``new``, move the cursor, and notify."""
        if start == end and not new:
            self._cursor = cursor
            return None
        self._text = self._text[:start] + new + self._text[end:]
        self._cursor = cursor
        event = EditEvent(start=start, removed=end - start, inserted=len(new))
        if self.on_change is not None:
            self.on_change(event)
        return event

    def insert(self, s: str) -> EditEvent | None:
        """Insert text at the cursor position."""
        pos = self._cursor
        return self._splice(pos, pos, s, pos + len(s))

    def backspace(self) -> EditEvent | None:
        """Delete the character before the cursor."""
        if self._cursor == 0:
            return None
        pos = self._cursor
        return self._splice(pos - 1, pos, "", pos - 1)

    def delete(self) -> EditEvent | None:
        """Delete the character at the cursor."""
        if self._cursor >= len(self._text):
            return None
        pos = self._cursor
        return self._splice(pos, pos + 1, "", pos)

    def move_left(self):
        if self._cursor > 0:
            self._cursor -= 1

    def move_right(self):
        if self._cursor < len(self._text):
            self._cursor += 1

    def move_home(self):
        self._cursor = 0

    def move_end(self):
        self._cursor = len(self._text)

    def move_to(self, pos: int):
        """Place the cursor at ``pos``, clamped to the text."""
        self._cursor = max(0, min(pos, len(self._text)))

    def _word_left(self) -> int:
        pos = self._cursor
        # Skip separators going left
        while pos > 0 and not self._text[pos - 1].isalnum():
            pos -= 1
        while pos > 0 and self._text[pos - 1].isalnum():
            pos -= 1
        return pos

    def move_word_left(self):
        """Move cursor to the beginning of the previous group."""
        self._cursor = self._word_left()

    def move_word_right(self):
        """Move cursor to the end of the next group."""
        pos = self._cursor
        length = len(self._text)
        while pos < length and not self._text[pos].isalnum():
            pos += 1
        while pos < length and self._text[pos].isalnum():
            pos += 1
        self._cursor = pos

    def kill_word_back(self) -> EditEvent | None:
        """Delete from cursor back to start of previous group (Ctrl+W)."""
        start = self._word_left()
        return self._splice(start, self._cursor, "", start)

    def kill_to_start(self) -> EditEvent | None:
        """Delete from cursor to start of line (Ctrl+U)."""
        return self._splice(0, self._cursor, "", 0)

    def kill_to_end(self) -> EditEvent | None:
        """Delete from cursor to end of line (Ctrl+K)."""
        return self._splice(self._cursor, len(self._text), "", self._cursor)

    def set_text(self, text: str) -> EditEvent | None:
        """Replace buffer content and move cursor to end."""
        if text == self._text:
            self._cursor = len(text)
            return None
        return self._splice(0, len(self._text), text, len(text))

    def replace(self, text: str, cursor: int) -> EditEvent | None:
        """Replace buffer content and place the cursor at ``cursor``."""
        cursor = max(0, min(cursor, len(text)))
        if text == self._text:
            self._cursor = cursor
            return None
        return self._splice(0, len(self._text), text, cursor)

    def clear(self) -> str:
        """Clear the buffer and return the previous content."""
        text = self._text
        self._splice(0, len(text), "", 0)
        return text
