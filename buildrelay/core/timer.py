"""Build duration timer."""

from __future__ import annotations

import math
import time
from collections.abc import Callable

ONE_SECOND_MS = 1000


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


class BuildTimer:
    """Tracks elapsed wall-clock time of the current build.

    One timer per build cycle, reset only by ``start()`` (the ``compile``
    signal).  Reading the timer before it was ever started yields zero
    elapsed time instead of failing.

    Parameters
    ----------
    clock:
        Zero-argument callable returning the current instant in integer
        milliseconds.  Defaults to the monotonic clock.
    """

    def __init__(self, clock: Callable[[], int] = _monotonic_ms) -> None:
        self._clock = clock
        self._started_at: int | None = None

    @property
    def started(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        """Record the current instant as the build's start."""
        self._started_at = self._clock()

    def elapsed_ms(self) -> int:
        if self._started_at is None:
            return 0
        return max(0, int(self._clock() - self._started_at))

    def elapsed_label(self) -> str:
        """Return ``"412ms"`` below one second, whole seconds (``"3s"``) above."""
        elapsed = self.elapsed_ms()
        if elapsed < ONE_SECOND_MS:
            return f"{elapsed}ms"
        # Half-up rounding: 2500ms is "3s", not banker's "2s".
        return f"{math.floor(elapsed / ONE_SECOND_MS + 0.5)}s"

    def time_message(self) -> str:
        """The label formatted for appending to an operations line."""
        return f" ({self.elapsed_label()})"

    def __repr__(self) -> str:
        return f"BuildTimer(started={self.started}, elapsed={self.elapsed_label()!r})"
