import time

from card_field.types import EditEvent, safe_text_preview, ts_str

DEFAULT_LOG_PATH = "card_field.log"


class DebugLogger:
    """Optional debug log of edit events and formatting passes."""

    def __init__(self, path: str = DEFAULT_LOG_PATH):
        self.path = path
        self.enabled = False
        self._fh = None

    def start(self):
        self._fh = open(self.path, "a", encoding="utf-8")
        self.enabled = True
        sep = f"\n{'='*60}\n  Session started: {time.strftime('%Y-%m-%d %H:%M:%S')}\n{'='*60}\n"
        self._fh.write(sep)
        self._fh.flush()

    def stop(self):
        self.enabled = False
        if self._fh:
            try:
                self._fh.close()
            except OSError:
                pass
        self._fh = None

    def toggle(self) -> bool:
        if self.enabled:
            self.stop()
        else:
            self.start()
        return self.enabled

    def _write(self, line: str):
        self._fh.write(f"{ts_str(time.time())} | {line}\n")
        self._fh.flush()

    def log_edit(self, ev: EditEvent):
        if not self.enabled or not self._fh:
            return
        self._write(f"EDIT start={ev.start} -{ev.removed} +{ev.inserted} (v={ev.velocity:+d})")

    def log_format(self, raw: str, formatted: str, cursor: int):
        if not self.enabled or not self._fh:
            return
        self._write(
            f"FMT  {safe_text_preview(raw)!r} -> {safe_text_preview(formatted)!r} @{cursor}"
        )

    def log_message(self, text: str):
        if not self.enabled or not self._fh:
            return
        for line in text.split("\n"):
            self._write(f"SYS  {line}")
