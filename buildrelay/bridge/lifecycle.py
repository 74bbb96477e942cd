"""Lifecycle bridge — translates bundler lifecycle signals into batches.

Per build cycle the bundler raises, in order::

    watch-run | run  ->  compile  ->  [invalid]  ->  failed | done

with ``progress`` interleaving any number of times.  Each signal maps to
at most one batch:

============  =====================  ==========================================
Signal        Side effect            Batch
============  =====================  ==========================================
watch-run     watching = True        --
run           watching = False       --
compile       timer.start()          status=Compiling
progress      --                     status, progress, operations (+ elapsed)
invalid       --                     status=Invalidated, progress=0, idle, clear
failed        --                     status=Failed, operations=idle (+ elapsed)
done          --                     status=Success, progress=0, idle, stats, log
============  =====================  ==========================================

Batches go either to a caller-supplied handler (called synchronously) or
through a ``ConnectionManager`` to the display process.  Both paths
receive identical batches.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, MutableMapping
from pathlib import Path
from typing import Any

from buildrelay.bridge.channel import SignalChannel
from buildrelay.bridge.transport import ConnectionManager
from buildrelay.config import RelaySettings
from buildrelay.config import settings as default_settings
from buildrelay.core.emitter import MessageEmitter, Sink
from buildrelay.core.environment import BuildEnvironmentProvider, resolve_node_env
from buildrelay.core.errors import InvalidSignalError
from buildrelay.core.root_resolver import resolve_project_root
from buildrelay.core.serialization import to_transport_safe
from buildrelay.core.timer import BuildTimer
from buildrelay.models.messages import DisplayMode
from buildrelay.models.signals import LifecycleSignal, SignalEvent
from buildrelay.models.stats import BuildHost, BuildStats

logger = logging.getLogger(__name__)

DEFAULT_STATS_OPTIONS: dict[str, Any] = {"colors": True}


def resolve_stats_options(options: Mapping[str, Any] | None) -> Mapping[str, Any]:
    """Pick the display options used to render the stats log.

    Dev-server stats config first, then the global stats config, then
    ``{"colors": True}``.  Empty values fall through.
    """
    options = options or {}
    dev_server = options.get("devServer")
    if isinstance(dev_server, Mapping) and dev_server.get("stats"):
        return _as_options(dev_server["stats"])
    if options.get("stats"):
        return _as_options(options["stats"])
    return dict(DEFAULT_STATS_OPTIONS)


def _as_options(value: Any) -> Mapping[str, Any]:
    # Bundlers accept preset names ("minimal", "verbose") as well as mappings.
    if isinstance(value, Mapping):
        return value
    return {"preset": value}


class LifecycleBridge:
    """Relays one bundler's lifecycle to the display.

    Parameters
    ----------
    handler:
        Optional callable receiving every batch directly.  When given, no
        connection is ever created.  May also be passed positionally.
    host, port:
        Display endpoint; default to the relay settings.
    root:
        Explicit project root, skipping inference.
    settings:
        ``RelaySettings`` supplying defaults.  The module-level singleton
        is used when omitted.
    timer:
        Build timer; injectable for tests.
    connection:
        Pre-built ``ConnectionManager``; by default one is created when no
        handler is given.
    """

    def __init__(
        self,
        handler: Sink | None = None,
        *,
        host: str | None = None,
        port: int | None = None,
        root: str | Path | None = None,
        settings: RelaySettings | None = None,
        timer: BuildTimer | None = None,
        connection: ConnectionManager | None = None,
    ) -> None:
        cfg = settings or default_settings
        self.host = host or cfg.host
        self.port = port or cfg.port
        self.root = root if root is not None else cfg.root
        self._manifest_name = cfg.manifest_name
        self.handler = handler
        self.watching = False
        self.node_env: str | None = None
        self._timer = timer or BuildTimer()
        self._emitter = MessageEmitter(handler)

        self._connection: ConnectionManager | None = None
        if handler is None:
            self._connection = connection or ConnectionManager(self.host, self.port)
            self._connection.bind(self._emitter)

        self._dispatch_table: dict[LifecycleSignal, Callable[[SignalEvent], None]] = {
            LifecycleSignal.WATCH_RUN: lambda _e: self.on_watch_run(),
            LifecycleSignal.RUN: lambda _e: self.on_run(),
            LifecycleSignal.COMPILE: lambda _e: self.on_compile(),
            LifecycleSignal.PROGRESS: self._dispatch_progress,
            LifecycleSignal.INVALID: lambda _e: self.on_invalid(),
            LifecycleSignal.FAILED: lambda e: self.on_failed(e.error),
            LifecycleSignal.DONE: self._dispatch_done,
        }

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def timer(self) -> BuildTimer:
        return self._timer

    @property
    def connection(self) -> ConnectionManager | None:
        """The display connection, ``None`` in handler mode."""
        return self._connection

    @property
    def display_mode(self) -> DisplayMode | None:
        if self._connection is None:
            return None
        return self._connection.display_mode

    @property
    def minimal(self) -> bool | None:
        if self._connection is None:
            return None
        return self._connection.minimal

    # ------------------------------------------------------------------
    # Host integration
    # ------------------------------------------------------------------

    def apply(
        self,
        host: BuildHost,
        environment: BuildEnvironmentProvider | None = None,
    ) -> None:
        """Attach to *host*: resolve NODE_ENV, open the display, tap signals."""
        _enable_pathinfo(host.options)

        self.node_env = resolve_node_env(environment)
        if self._connection is not None:
            self._connection.open(self.node_env)

        host.tap(LifecycleSignal.WATCH_RUN.value, lambda *_a: self.on_watch_run())
        host.tap(LifecycleSignal.RUN.value, lambda *_a: self.on_run())
        host.tap(LifecycleSignal.COMPILE.value, lambda *_a: self.on_compile())
        host.tap(LifecycleSignal.PROGRESS.value, self.on_progress)
        host.tap(LifecycleSignal.INVALID.value, lambda *_a: self.on_invalid())
        host.tap(LifecycleSignal.FAILED.value, self.on_failed)
        host.tap(LifecycleSignal.DONE.value, self.on_done)
        logger.debug("Attached to %s (NODE_ENV=%s).", type(host).__name__, self.node_env)

    def cleanup(self) -> None:
        """Close the display connection unless a watch build is in flight.

        Idempotent, and safe to register with ``atexit`` or any external
        teardown hook.
        """
        if self._connection is not None:
            self._connection.close_if_idle(self.watching)

    def get_project_root(
        self,
        bundle_context: str | Path | None,
        cwd: str | Path | None = None,
    ) -> Path | None:
        """Infer the project root used by the display's ``versions`` view."""
        return resolve_project_root(
            self.root, bundle_context, cwd, manifest_name=self._manifest_name
        )

    # ------------------------------------------------------------------
    # Lifecycle callbacks
    # ------------------------------------------------------------------

    def on_watch_run(self) -> None:
        self.watching = True

    def on_run(self) -> None:
        self.watching = False

    def on_compile(self) -> None:
        self._timer.start()
        self._emitter.compiling()

    def on_progress(self, percent: float, message: str = "") -> None:
        self._emitter.progress(percent, message or "", self._timer.time_message())

    def on_invalid(self) -> None:
        self._emitter.invalidated()

    def on_failed(self, error: Any = None) -> None:
        if error is not None:
            logger.debug("Build failed: %s", to_transport_safe(error))
        self._emitter.failed(self._timer.time_message())

    def on_done(self, stats: BuildStats) -> None:
        options = getattr(stats, "options", None)
        self._emitter.success(
            stats, resolve_stats_options(options), self._timer.time_message()
        )

    # ------------------------------------------------------------------
    # Signal routing
    # ------------------------------------------------------------------

    def dispatch(self, event: SignalEvent) -> None:
        """Route a ``SignalEvent`` to its lifecycle callback."""
        self._dispatch_table[event.signal](event)

    async def consume(self, channel: SignalChannel) -> None:
        """Process signals from *channel* in order until it is closed."""
        async for event in channel:
            self.dispatch(event)
        self.cleanup()

    def _dispatch_progress(self, event: SignalEvent) -> None:
        if event.percent is None:
            raise InvalidSignalError("progress signal requires a percent")
        self.on_progress(event.percent, event.message or "")

    def _dispatch_done(self, event: SignalEvent) -> None:
        if event.stats is None:
            raise InvalidSignalError("done signal requires a stats object")
        self.on_done(event.stats)

    def __repr__(self) -> str:
        mode = "handler" if self._connection is None else repr(self._connection)
        return f"LifecycleBridge(mode={mode}, watching={self.watching})"


def _enable_pathinfo(options: Any) -> None:
    # Module path comments let the display inspect bundle contents.
    if not isinstance(options, MutableMapping):
        return
    output = options.get("output")
    if output is None:
        output = options["output"] = {}
    if isinstance(output, MutableMapping):
        output["pathinfo"] = True
