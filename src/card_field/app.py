from __future__ import annotations

import curses

from card_field.config import Config
from card_field.debug_log import DebugLogger
from card_field.field import CardNumberField

ESC = 27
CTRL_D = 4


def handle_key(field: CardNumberField, ch: int) -> tuple[str | None, bool]:
    """Apply one key press to the field.

    Returns (submitted_number or None, quit_bool).
    """
    if ch == -1:
        return None, False

    if ch == ESC:
        return None, True

    if ch in (curses.KEY_ENTER, 10, 13):
        return field.submit(), False

    if ch in (curses.KEY_BACKSPACE, 127, 8):
        field.backspace()
        return None, False

    if ch == curses.KEY_DC:
        field.delete()
        return None, False

    if ch == curses.KEY_LEFT:
        field.move_left()
        return None, False

    if ch == curses.KEY_RIGHT:
        field.move_right()
        return None, False

    if ch in (curses.KEY_HOME, 1):  # Ctrl+A
        field.move_home()
        return None, False

    if ch in (curses.KEY_END, 5):  # Ctrl+E
        field.move_end()
        return None, False

    # Ctrl+Left / Ctrl+Right jump between groups
    if ch >= 256:
        try:
            kn = curses.keyname(ch).decode("ascii", errors="ignore")
        except (ValueError, AttributeError):
            kn = ""
        if kn == "kLFT5":
            field.move_word_left()
        elif kn == "kRIT5":
            field.move_word_right()
        return None, False

    if ch == 23:  # Ctrl+W
        field.kill_word_back()
        return None, False

    if ch == 21:  # Ctrl+U
        field.kill_to_start()
        return None, False

    if ch == 11:  # Ctrl+K
        field.kill_to_end()
        return None, False

    if 0 <= ch < 256:
        c = chr(ch)
        if c.isprintable():
            field.insert(c)
    return None, False


def draw(stdscr, field: CardNumberField, prompt: str, status: str):
    stdscr.erase()
    h, w = stdscr.getmaxyx()
    max_visible = w - 1
    label_attr = curses.A_BOLD if field.has_error else curses.A_DIM
    try:
        stdscr.addnstr(0, 0, field.label, max_visible, label_attr)
        stdscr.addnstr(1, 0, prompt + field.text, max_visible)
        stdscr.addnstr(h - 1, 0, status, max_visible, curses.A_REVERSE)
    except curses.error:
        pass
    try:
        stdscr.move(1, min(len(prompt) + field.cursor, max_visible))
    except curses.error:
        pass
    stdscr.refresh()


def status_line(field: CardNumberField, logger: DebugLogger) -> str:
    pattern = "-".join(str(n) for n in field.formatter.pattern)
    status = f"pattern {pattern} | Enter: submit | Ctrl+D: debug | Esc: quit"
    if logger.enabled:
        status += " | DBG"
    return status


def run_field(stdscr, config: Config, debug: bool = False) -> str | None:
    """Run the interactive demo field. Returns the submitted number, if any."""
    try:
        curses.curs_set(1)
    except curses.error:
        pass
    stdscr.keypad(True)

    logger = DebugLogger()
    if debug:
        logger.start()

    field = CardNumberField.from_config(config.field, debug_logger=logger)

    try:
        while True:
            draw(stdscr, field, config.ui.prompt, status_line(field, logger))
            ch = stdscr.getch()
            if ch == CTRL_D:
                state = logger.toggle()
                logger.log_message(f"Debug logging {'ON' if state else 'OFF'}")
                continue
            number, quit_ = handle_key(field, ch)
            if quit_:
                return None
            if number is None:
                continue
            if field.is_complete:
                logger.log_message(f"submitted {field.digits}")
                return number
            field.error = config.field.incomplete_error
    except KeyboardInterrupt:
        return None
    finally:
        logger.stop()
