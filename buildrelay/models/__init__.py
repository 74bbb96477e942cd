"""buildrelay data models — Pydantic v2, frozen (immutable)."""

from buildrelay.models.messages import (
    MESSAGE_EVENT,
    MODE_EVENT,
    PROTOCOL_VERSION,
    BuildStatus,
    DisplayMode,
    EventType,
    Message,
    StatsPayload,
    batch_to_wire,
)
from buildrelay.models.signals import LifecycleSignal, SignalEvent
from buildrelay.models.stats import BuildHost, BuildStats, StatsReport

__all__ = [
    # messages
    "PROTOCOL_VERSION",
    "MESSAGE_EVENT",
    "MODE_EVENT",
    "EventType",
    "BuildStatus",
    "Message",
    "StatsPayload",
    "DisplayMode",
    "batch_to_wire",
    # signals
    "LifecycleSignal",
    "SignalEvent",
    # bundler interfaces
    "BuildHost",
    "BuildStats",
    "StatsReport",
]
