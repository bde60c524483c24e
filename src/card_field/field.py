"""Host-side card number field.

Wires an InputBuffer to a GroupFormatter. Each user edit on the buffer is fed
to the formatter, and the formatted text is written back into the buffer.
Writing it back fires the buffer's change callback again. The ``applying``
flag keeps those self-inflicted notifications away from the formatter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence

from card_field.config import DEFAULT_HINT, FieldConfig
from card_field.formatter import DEFAULT_GROUP_PATTERN, GroupFormatter, clean_digits
from card_field.input_buffer import InputBuffer
from card_field.types import EditEvent

if TYPE_CHECKING:
    from card_field.debug_log import DebugLogger

TextListener = Callable[[str], None]


class CardNumberField:
    def __init__(self, pattern: Sequence[int] = DEFAULT_GROUP_PATTERN,
                 hint: str = DEFAULT_HINT,
                 debug_logger: "DebugLogger | None" = None):
        self.formatter = GroupFormatter(pattern)
        self.hint = hint
        self.error: str | None = None
        self.debug_logger = debug_logger
        self.applying = False
        self._buf = InputBuffer(on_change=self._on_text_changed)
        self._text_listeners: list[TextListener] = []
        self._action_listeners: list[TextListener] = []

    @classmethod
    def from_config(cls, config: "FieldConfig",
                    debug_logger: "DebugLogger | None" = None) -> "CardNumberField":
        return cls(pattern=config.group_pattern, hint=config.hint,
                   debug_logger=debug_logger)

    # --- State ---

    @property
    def text(self) -> str:
        return self._buf.text

    @property
    def cursor(self) -> int:
        return self._buf.cursor

    @property
    def card_number(self) -> str:
        return self._buf.text

    @card_number.setter
    def card_number(self, value: str | None):
        self._buf.set_text(value or "")
        self._buf.move_end()

    @property
    def digits(self) -> str:
        """Digits currently shown, without separators."""
        return clean_digits(self._buf.text)

    @property
    def capacity(self) -> int:
        return self.formatter.capacity

    @property
    def is_complete(self) -> bool:
        return len(self.digits) == self.capacity

    @property
    def has_error(self) -> bool:
        return bool(self.error)

    @property
    def label(self) -> str:
        """Text for the label above the field: the error if set, else the hint."""
        return self.error if self.has_error else self.hint

    # --- Listeners ---

    def add_text_change_listener(self, listener: TextListener):
        """Call ``listener(text)`` with the formatted text after each edit."""
        self._text_listeners.append(listener)

    def on_editor_action(self, listener: TextListener):
        """Call ``listener(text)`` when the field is submitted."""
        self._action_listeners.append(listener)

    def submit(self) -> str:
        text = self._buf.text
        for listener in list(self._action_listeners):
            listener(text)
        return text

    # --- Editing ---

    def insert(self, s: str):
        self._buf.insert(s)

    def backspace(self):
        self._buf.backspace()

    def delete(self):
        self._buf.delete()

    def kill_word_back(self):
        self._buf.kill_word_back()

    def kill_to_start(self):
        self._buf.kill_to_start()

    def kill_to_end(self):
        self._buf.kill_to_end()

    def clear(self) -> str:
        return self._buf.clear()

    def move_left(self):
        self._buf.move_left()

    def move_right(self):
        self._buf.move_right()

    def move_home(self):
        self._buf.move_home()

    def move_end(self):
        self._buf.move_end()

    def move_word_left(self):
        self._buf.move_word_left()

    def move_word_right(self):
        self._buf.move_word_right()

    def move_to(self, pos: int):
        self._buf.move_to(pos)

    def _on_text_changed(self, event: EditEvent):
        if self.applying:
            return
        self.formatter.observe(event)
        if self.debug_logger:
            self.debug_logger.log_edit(event)
        raw = self._buf.text
        formatted, cursor = self.formatter.reformat(raw)
        self.applying = True
        try:
            self._buf.replace(formatted, cursor)
        finally:
            self.applying = False
        if self.debug_logger:
            self.debug_logger.log_format(raw, formatted, cursor)
        self.error = None
        for listener in list(self._text_listeners):
            listener(formatted)
