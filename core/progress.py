"""
Loader progress reporting.

Loaders call ``callback(percent, text)`` while they scan and read a series.
``LoadProgress`` is such a callback: it rounds the percentage, drops exact
repeats and hands a ``ProgressEvent`` to each listener. ``ProgressPrinter``
is the listener the CLI uses; it writes one line per event.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, List, Optional


@dataclass(frozen=True)
class ProgressEvent:
    stage: str
    percent: int
    text: str


def round_percent(value: float) -> int:
    """Round half up and clamp to [0, 100]."""
    return max(0, min(100, int(float(value) + 0.5)))


class LoadProgress:
    """Callable progress sink for ``BaseLoader.load(..., callback=...)``."""

    def __init__(self, stage: str = "load"):
        self.stage = stage
        self._listeners: List[Callable[[ProgressEvent], None]] = []
        self._last: Optional[ProgressEvent] = None

    def add_listener(self, listener: Callable[[ProgressEvent], None]) -> "LoadProgress":
        self._listeners.append(listener)
        return self

    def __call__(self, percent: float, text: str) -> None:
        event = ProgressEvent(self.stage, round_percent(percent), text)
        if event == self._last:
            return
        self._last = event
        for listener in self._listeners:
            listener(event)


class ProgressPrinter:
    """Writes ``[stage] percent% text`` lines."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def __call__(self, event: ProgressEvent) -> None:
        self.stream.write(f"[{event.stage}] {event.percent:3d}% {event.text}\n")
        self.stream.flush()


__all__ = ["ProgressEvent", "round_percent", "LoadProgress", "ProgressPrinter"]
