"""Outbound/inbound message contract between the relay and the display.

A lifecycle transition produces one *batch*: an ordered list of
``Message`` entries delivered together.  The display aggregates by
message type, so the order inside a batch matters and batches must never
be interleaved.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

# Bump when a message type is added or a payload shape changes.
PROTOCOL_VERSION = "1"

# Transport event carrying a batch.
MESSAGE_EVENT = "message"

# Inbound transport event carrying the display mode.
MODE_EVENT = "mode"


class EventType(str, Enum):
    """The closed set of message types understood by the display."""

    NODE_ENV = "nodeEnv"
    STATUS = "status"
    PROGRESS = "progress"
    OPERATIONS = "operations"
    CLEAR = "clear"
    STATS = "stats"
    LOG = "log"


class BuildStatus(str, Enum):
    """Values carried by ``status`` messages."""

    COMPILING = "Compiling"
    INVALIDATED = "Invalidated"
    FAILED = "Failed"
    SUCCESS = "Success"


class Message(BaseModel):
    """A single typed entry of a batch."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    value: Any = None

    def to_wire(self) -> dict[str, Any]:
        """Return the plain-dict form sent to handlers and the socket.

        ``clear`` carries no value at all, not even ``null``.
        """
        if self.type == EventType.CLEAR:
            return {"type": self.type.value}
        value = self.value.value if isinstance(self.value, Enum) else self.value
        return {"type": self.type.value, "value": value}


class StatsPayload(BaseModel):
    """Value of a ``stats`` message."""

    model_config = ConfigDict(frozen=True)

    errors: bool
    warnings: bool
    data: dict[str, Any] = {}


class DisplayMode(BaseModel):
    """Inbound ``mode`` payload sent once by the display after connect."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    minimal: bool = False


def batch_to_wire(batch: list[Message]) -> list[dict[str, Any]]:
    """Convert a batch of messages to its wire form."""
    return [message.to_wire() for message in batch]
