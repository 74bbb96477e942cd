"""Bundler lifecycle signals as seen by the relay."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class LifecycleSignal(str, Enum):
    """Lifecycle signals raised by the bundler, in causal order per cycle.

    ``progress`` is bundler-native and may interleave with the others any
    number of times.
    """

    WATCH_RUN = "watch-run"
    RUN = "run"
    COMPILE = "compile"
    PROGRESS = "progress"
    INVALID = "invalid"
    FAILED = "failed"
    DONE = "done"


class SignalEvent(BaseModel):
    """One lifecycle signal with the arguments the bundler passed along.

    ``percent``/``message`` accompany ``progress``, ``stats`` accompanies
    ``done`` and ``error`` accompanies ``failed``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    signal: LifecycleSignal
    percent: float | None = None
    message: str | None = None
    stats: Any = None
    error: Any = None
