"""``buildrelay demo`` — relay a simulated build cycle.

Drives a ``LifecycleBridge`` through a synthetic build (compile, progress
phases, then done or failed) so the display, or the local console with
``--local``, can be checked without a real bundler.
"""

from __future__ import annotations

import time
from collections import defaultdict
from collections.abc import Callable
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel

from buildrelay.bridge.lifecycle import LifecycleBridge
from buildrelay.core.environment import StaticEnvironment
from buildrelay.models.signals import LifecycleSignal
from buildrelay.models.stats import StatsReport
from buildrelay.monitor.console_handler import ConsoleHandler

console = Console()

_PHASES = [
    "building modules",
    "sealing",
    "optimizing chunks",
    "hashing",
    "emitting",
]


class DemoHost:
    """In-process stand-in for a bundler compiler."""

    def __init__(self) -> None:
        self.options: dict[str, Any] = {"output": {}, "stats": {"colors": True}}
        self._taps: dict[str, list[Callable[..., None]]] = defaultdict(list)

    def tap(self, signal: str, callback: Callable[..., None]) -> None:
        self._taps[signal].append(callback)

    def fire(self, signal: LifecycleSignal, *args: Any) -> None:
        for callback in self._taps[signal.value]:
            callback(*args)


def demo_cmd(
    local: bool = typer.Option(
        False,
        "--local",
        "-l",
        help="Render batches in this terminal instead of sending them.",
    ),
    fail: bool = typer.Option(
        False, "--fail", help="End the build with a failure."
    ),
    invalidate: bool = typer.Option(
        False,
        "--invalidate",
        help="Invalidate once before compiling, as a watch rebuild would.",
    ),
    node_env: str = typer.Option(
        "development", "--node-env", help="NODE_ENV announced to the display."
    ),
    delay: float = typer.Option(
        0.2,
        "--delay",
        "-d",
        help="Delay in seconds between progress steps.",
    ),
    wait: float = typer.Option(
        2.0,
        "--wait",
        help="Seconds to wait for the display connection.",
    ),
    host: str = typer.Option(None, "--host", help="Display host."),
    port: int = typer.Option(None, "--port", help="Display port."),
) -> None:
    """Relay a simulated build cycle to the display."""
    handler = ConsoleHandler(console) if local else None
    bridge = LifecycleBridge(handler, host=host, port=port)
    compiler = DemoHost()
    bridge.apply(compiler, StaticEnvironment(node_env))

    if bridge.connection is not None:
        deadline = time.monotonic() + wait
        while not bridge.connection.is_live and time.monotonic() < deadline:
            time.sleep(0.05)
        if not bridge.connection.is_live:
            console.print(
                f"[yellow]Display not reachable at {bridge.connection.url}; "
                "batches will be dropped.[/yellow]"
            )

    try:
        compiler.fire(LifecycleSignal.RUN)
        if invalidate:
            compiler.fire(LifecycleSignal.INVALID)
        compiler.fire(LifecycleSignal.COMPILE)

        for i, phase in enumerate(_PHASES):
            compiler.fire(LifecycleSignal.PROGRESS, i / len(_PHASES), phase)
            time.sleep(delay)

        if fail:
            compiler.fire(
                LifecycleSignal.FAILED, RuntimeError("simulated compilation failure")
            )
        else:
            compiler.fire(LifecycleSignal.DONE, _demo_stats(compiler.options))
    finally:
        bridge.cleanup()

    console.print(
        Panel(
            f"[bold]Build:[/bold] {'failed' if fail else 'succeeded'}\n"
            f"[bold]Elapsed:[/bold] {bridge.timer.elapsed_label()}",
            title="[bold]Demo Summary[/bold]",
            border_style="red" if fail else "green",
            padding=(1, 2),
        )
    )


def _demo_stats(options: dict[str, Any]) -> StatsReport:
    return StatsReport(
        hash="4f2a9c1e",
        time_ms=812,
        assets=[
            {"name": "main.js", "size": 48213},
            {"name": "vendor.js", "size": 301877},
        ],
        warnings=["asset size limit: vendor.js exceeds 244 KiB"],
        options=options,
    )
