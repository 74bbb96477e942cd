"""Exceptions raised by buildrelay."""

from __future__ import annotations


class BuildRelayError(RuntimeError):
    """Base class for buildrelay errors."""


class InvalidSignalError(BuildRelayError, ValueError):
    """Raised when a lifecycle signal lacks the arguments it needs."""


class ChannelClosedError(BuildRelayError):
    """Raised when sending on a closed signal channel."""
