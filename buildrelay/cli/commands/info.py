"""``buildrelay info`` — show resolved settings and project root."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from buildrelay import __version__
from buildrelay.bridge.lifecycle import LifecycleBridge
from buildrelay.config import CACHE_FILENAME, RelaySettings
from buildrelay.models.messages import PROTOCOL_VERSION

console = Console()


def info_cmd(
    context: Path = typer.Option(
        None,
        "--context",
        "-c",
        help="Bundle context directory used for project root inference.",
    ),
    root: Path = typer.Option(
        None,
        "--root",
        help="Explicit project root (overrides inference).",
    ),
) -> None:
    """Print the relay configuration as the bundler integration would see it."""
    cfg = RelaySettings()
    bridge = LifecycleBridge(handler=_discard, root=root, settings=cfg)
    project_root = bridge.get_project_root(context)

    table = Table(title="buildrelay", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("Protocol", PROTOCOL_VERSION)
    table.add_row("Display", cfg.url)
    table.add_row("Manifest", cfg.manifest_name)
    table.add_row(
        "Project root",
        str(project_root) if project_root else "[yellow]not found (versions disabled)[/yellow]",
    )
    table.add_row("Cache file", str(CACHE_FILENAME))
    table.add_row("Log level", cfg.log_level)

    console.print(table)


def _discard(batch: list[dict]) -> None:
    return None
