"""Local rendering of relay batches.

Modules
-------
console_handler
    ``ConsoleHandler`` is a batch handler that renders each batch as
    Rich terminal output, for embedding the relay without a display
    process.
"""

from buildrelay.monitor.console_handler import ConsoleHandler

__all__ = ["ConsoleHandler"]
