"""Rich terminal handler for relay batches.

Pass a ``ConsoleHandler`` as the bridge's ``handler`` to watch a build in
the current terminal instead of a separate display process.

Color scheme
------------
- yellow    : Compiling
- dim       : Invalidated
- bold red  : Failed
- green     : Success
"""

from __future__ import annotations

from collections import deque
from typing import Any

from rich.console import Console
from rich.errors import MarkupError
from rich.panel import Panel
from rich.text import Text

from buildrelay.models.messages import BuildStatus, EventType

_STATUS_STYLES: dict[str, str] = {
    BuildStatus.COMPILING.value: "yellow",
    BuildStatus.INVALIDATED.value: "dim",
    BuildStatus.FAILED.value: "bold red",
    BuildStatus.SUCCESS.value: "green",
}

_BAR_WIDTH = 30

DEFAULT_HISTORY = 50


class ConsoleHandler:
    """Renders each batch it receives to a Rich console.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    show_log:
        Print the stats log carried by ``done`` batches.
    history:
        Number of most recent batches kept in ``batches``.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        show_log: bool = True,
        history: int = DEFAULT_HISTORY,
    ) -> None:
        self.console = console or Console()
        self.show_log = show_log
        self.batches: deque[list[dict[str, Any]]] = deque(maxlen=history)

    def __call__(self, batch: list[dict[str, Any]]) -> None:
        self.batches.append(batch)
        fields = {entry["type"]: entry.get("value") for entry in batch}

        if EventType.CLEAR.value in fields:
            self.console.rule(style="dim")

        status = fields.get(EventType.STATUS.value)
        line = Text()
        if status is not None:
            line.append(f"{status:<12}", style=_STATUS_STYLES.get(status, ""))
        if EventType.PROGRESS.value in fields and status == BuildStatus.COMPILING.value:
            line.append(_progress_bar(float(fields[EventType.PROGRESS.value])))
            line.append(" ")
        operations = fields.get(EventType.OPERATIONS.value)
        if operations:
            line.append(str(operations), style="dim")
        if EventType.NODE_ENV.value in fields:
            line.append(f"NODE_ENV={fields[EventType.NODE_ENV.value]}", style="cyan")
        if line.plain:
            self.console.print(line)

        stats = fields.get(EventType.STATS.value)
        if isinstance(stats, dict):
            self.console.print(_stats_summary(stats))

        log = fields.get(EventType.LOG.value)
        if self.show_log and log:
            self.console.print(
                Panel(_log_text(str(log)), title="Build report", border_style="blue")
            )


def _progress_bar(percent: float) -> str:
    filled = int(round(max(0.0, min(1.0, percent)) * _BAR_WIDTH))
    return f"[{'#' * filled}{'.' * (_BAR_WIDTH - filled)}] {percent * 100:5.1f}%"


def _log_text(log: str) -> Text:
    try:
        return Text.from_markup(log)
    except MarkupError:
        return Text(log)


def _stats_summary(stats: dict[str, Any]) -> Text:
    text = Text()
    if stats.get("errors"):
        text.append("errors ", style="bold red")
    if stats.get("warnings"):
        text.append("warnings ", style="yellow")
    if not text.plain:
        text.append("clean build", style="green")
    return text
