"""Message emitter — builds every batch the relay sends.

All lifecycle transitions are serialized here, into one place, so that
handler mode and socket mode see exactly the same batches.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from buildrelay.core.serialization import canonical_json_bytes, to_transport_safe
from buildrelay.models.messages import (
    BuildStatus,
    EventType,
    Message,
    StatsPayload,
    batch_to_wire,
)
from buildrelay.models.stats import BuildStats

logger = logging.getLogger(__name__)

# A sink receives one wire-form batch per lifecycle transition.
Sink = Callable[[list[dict[str, Any]]], Any]

IDLE = "idle"


class MessageEmitter:
    """Builds message batches and hands them to a sink.

    Parameters
    ----------
    sink:
        Callable receiving each batch as a list of plain dicts.  May be
        replaced later (``sink`` property); ``None`` silently drops
        batches.
    """

    def __init__(self, sink: Sink | None) -> None:
        self._sink = sink

    @property
    def sink(self) -> Sink | None:
        return self._sink

    @sink.setter
    def sink(self, sink: Sink | None) -> None:
        self._sink = sink

    def emit(self, batch: list[Message]) -> list[dict[str, Any]]:
        """Serialize *batch* and deliver it; returns the wire form."""
        wire = [
            {**entry, "value": to_transport_safe(entry["value"])}
            if "value" in entry
            else entry
            for entry in batch_to_wire(batch)
        ]
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Batch %s", canonical_json_bytes(wire).decode("ascii"))
        if self._sink is None:
            logger.debug("No sink bound; dropped batch of %d message(s).", len(wire))
        else:
            self._sink(wire)
        return wire

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    def node_env(self, value: str) -> list[dict[str, Any]]:
        return self.emit([Message(type=EventType.NODE_ENV, value=value)])

    def compiling(self) -> list[dict[str, Any]]:
        return self.emit([_status(BuildStatus.COMPILING)])

    def progress(
        self, percent: float, message: str, time_message: str
    ) -> list[dict[str, Any]]:
        return self.emit([
            _status(BuildStatus.COMPILING),
            Message(type=EventType.PROGRESS, value=min(1.0, max(0.0, percent))),
            Message(type=EventType.OPERATIONS, value=f"{message}{time_message}"),
        ])

    def invalidated(self) -> list[dict[str, Any]]:
        return self.emit([
            _status(BuildStatus.INVALIDATED),
            Message(type=EventType.PROGRESS, value=0),
            Message(type=EventType.OPERATIONS, value=IDLE),
            Message(type=EventType.CLEAR),
        ])

    def failed(self, time_message: str) -> list[dict[str, Any]]:
        return self.emit([
            _status(BuildStatus.FAILED),
            Message(type=EventType.OPERATIONS, value=f"{IDLE}{time_message}"),
        ])

    def success(
        self,
        stats: BuildStats,
        stats_options: Mapping[str, Any],
        time_message: str,
    ) -> list[dict[str, Any]]:
        payload = StatsPayload(
            errors=stats.has_errors(),
            warnings=stats.has_warnings(),
            data=to_transport_safe(stats.to_json()),
        )
        return self.emit([
            _status(BuildStatus.SUCCESS),
            Message(type=EventType.PROGRESS, value=0),
            Message(type=EventType.OPERATIONS, value=f"{IDLE}{time_message}"),
            Message(type=EventType.STATS, value=payload.model_dump()),
            Message(type=EventType.LOG, value=stats.to_string(stats_options)),
        ])


def _status(status: BuildStatus) -> Message:
    return Message(type=EventType.STATUS, value=status)
