"""buildrelay command-line interface (Typer)."""
