"""Bundler-side interfaces consumed by the lifecycle bridge.

The relay never bundles anything itself.  It only needs a host it can
subscribe to and a stats object it can query once a build is done.
``StatsReport`` is a minimal concrete stats object used by the demo
command and by embedders whose bundler has no stats type of its own.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


@runtime_checkable
class BuildStats(Protocol):
    """Stats object handed to the ``done`` signal."""

    options: Mapping[str, Any]

    def has_errors(self) -> bool:
        ...

    def has_warnings(self) -> bool:
        ...

    def to_json(self) -> dict[str, Any]:
        ...

    def to_string(self, options: Mapping[str, Any]) -> str:
        ...


@runtime_checkable
class BuildHost(Protocol):
    """A bundler compiler the bridge can attach to.

    ``options`` is the bundler's mutable configuration mapping.
    ``tap(signal, callback)`` subscribes *callback* to a lifecycle signal
    name (see ``LifecycleSignal``).  ``progress`` callbacks receive
    ``(percent, message)``, ``done`` receives the stats object and
    ``failed`` receives the error.
    """

    options: dict[str, Any]

    def tap(self, signal: str, callback: Callable[..., None]) -> None:
        ...


class StatsReport(BaseModel):
    """Plain stats object satisfying ``BuildStats``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    hash: str = ""
    time_ms: int = 0
    assets: list[dict[str, Any]] = []
    errors: list[Any] = []
    warnings: list[Any] = []
    options: dict[str, Any] = Field(default_factory=dict)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_json(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "time": self.time_ms,
            "assets": list(self.assets),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }

    def to_string(self, options: Mapping[str, Any]) -> str:
        """Render a human-readable build report.

        With ``colors`` set, lines carry rich markup for the display.
        """
        colors = bool(options.get("colors"))

        def _style(text: str, style: str) -> str:
            return f"[{style}]{text}[/{style}]" if colors else text

        lines = [f"Hash: {self.hash}", f"Time: {self.time_ms}ms"]
        for asset in self.assets:
            lines.append(
                f"{_style(str(asset.get('name', '?')), 'green')}  "
                f"{asset.get('size', 0)} bytes"
            )
        for warning in self.warnings:
            lines.append(_style(f"WARNING {warning}", "yellow"))
        for error in self.errors:
            lines.append(_style(f"ERROR {error}", "red"))
        return "\n".join(lines)
