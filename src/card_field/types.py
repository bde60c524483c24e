import time
from dataclasses import dataclass


@dataclass(frozen=True)
class EditEvent:
    start: int  # offset where the mutation begins
    removed: int
    inserted: int

    @property
    def velocity(self) -> int:
        return self.inserted - self.removed


@dataclass(frozen=True)
class CursorState:
    position: int = 0
    velocity: int = 0  # > 0 insertion, < 0 deletion


def ts_str(t: float) -> str:
    lt = time.localtime(t)
    return time.strftime("%H:%M:%S", lt)


def safe_text_preview(s: str, max_len: int = 60) -> str:
    # Keep log lines on one line
    s = s.replace("\r", "\\r").replace("\n", "\\n")
    if len(s) > max_len:
        s = s[:max_len] + "\u2026"
    return s
