"""Main Typer application — imports and registers all CLI commands.

Entry point: ``buildrelay`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer

from buildrelay.cli.commands.demo import demo_cmd
from buildrelay.cli.commands.info import info_cmd
from buildrelay.config import settings

app = typer.Typer(
    name="buildrelay",
    help="buildrelay: stream bundler build progress to a remote display.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="demo", help="Relay a simulated build cycle.")(demo_cmd)
app.command(name="info", help="Show resolved settings and project root.")(info_cmd)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
) -> None:
    """Configure logging for every command."""
    level = logging.DEBUG if verbose else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
