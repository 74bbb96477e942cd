"""Bridge layer between the bundler and the display process.

Modules
-------
lifecycle
    ``LifecycleBridge`` maps bundler lifecycle signals to message batches
    and owns the build timer.
transport
    ``ConnectionManager`` wraps a ``socketio.Client``: lazy connect,
    display-mode negotiation and idempotent teardown.
channel
    ``SignalChannel`` feeds lifecycle signals to the bridge from an
    asyncio event loop.
"""

from buildrelay.bridge.channel import SignalChannel
from buildrelay.bridge.lifecycle import LifecycleBridge, resolve_stats_options
from buildrelay.bridge.transport import ConnectionManager, ConnectionState

__all__ = [
    "ConnectionManager",
    "ConnectionState",
    "LifecycleBridge",
    "SignalChannel",
    "resolve_stats_options",
]
