"""buildrelay: stream a bundler's build lifecycle to a remote display.

A ``LifecycleBridge`` attaches to the bundler, translates its lifecycle
signals (compile, progress, invalid, failed, done) into typed message
batches and delivers them either to a caller-supplied handler or over a
Socket.IO connection to the display process.
"""

__version__ = "0.1.0"
__description__ = "Relay bundler build progress, errors and stats to a remote display"

from buildrelay.bridge.lifecycle import LifecycleBridge
from buildrelay.bridge.transport import ConnectionManager

__all__ = ["LifecycleBridge", "ConnectionManager", "__version__"]
