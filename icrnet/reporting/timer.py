"""Wall-clock timing of long phases."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """Print a message when a phase starts and its duration when it ends."""

    def __init__(self, echo: bool = True) -> None:
        self.echo = echo
        self.elapsed = 0.0
        self._start: float | None = None

    def start(self, message: str = "") -> None:
        if self.echo and message:
            print(message, end=" ", flush=True)
        self._start = time.perf_counter()

    def stop(self) -> float:
        if self._start is None:
            raise RuntimeError("Timer.stop() called before start()")
        self.elapsed = time.perf_counter() - self._start
        self._start = None
        if self.echo:
            print(f"Done ({self.elapsed:.2f} sec)")
        return self.elapsed

    @contextmanager
    def measure(self, message: str = "") -> Iterator["Timer"]:
        self.start(message)
        try:
            yield self
        finally:
            self.stop()


__all__ = ["Timer"]
