"""Elapsed play time that survives pause/resume."""

from typing import Optional


class SessionClock:
    def __init__(self):
        self._accumulated = 0.0
        self._started_at: Optional[float] = None

    @property
    def ticking(self) -> bool:
        return self._started_at is not None

    def start(self, now: float):
        if self._started_at is None:
            self._started_at = now

    resume = start

    def pause(self, now: float):
        if self._started_at is not None:
            self._accumulated += max(0.0, now - self._started_at)
            self._started_at = None

    stop = pause

    def reset(self):
        self._accumulated = 0.0
        self._started_at = None

    def elapsed(self, now: float) -> float:
        if self._started_at is None:
            return self._accumulated
        return self._accumulated + max(0.0, now - self._started_at)


def format_elapsed(ms: float) -> str:
    total = int(ms // 1000)
    return f"{total // 60:02d}:{total % 60:02d}"
