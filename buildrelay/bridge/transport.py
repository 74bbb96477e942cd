"""Connection manager — owns the Socket.IO channel to the display process.

Bridge boundary
---------------
The display process runs a Socket.IO server.  This module wraps a
``socketio.Client`` behind a ``ConnectionManager`` exposing the few
operations the lifecycle bridge depends on: ``open``, ``send`` and
``close_if_idle``.

The connection is opened lazily on a background thread.  Until the
client reports ``connect``, batches are dropped rather than queued: a
progress update from before the display was ready is not worth
replaying.  Connection failures are never surfaced to the build; the
relay simply stays inert.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import Any

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from buildrelay.config import DEFAULT_HOST, DEFAULT_PORT
from buildrelay.core.emitter import MessageEmitter
from buildrelay.models.messages import (
    MESSAGE_EVENT,
    MODE_EVENT,
    DisplayMode,
    EventType,
    Message,
    batch_to_wire,
)

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """Lifecycle of the display connection."""

    UNCONNECTED = "unconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


def _noop(batch: list[dict[str, Any]]) -> None:
    return None


class ConnectionManager:
    """Lazily connected Socket.IO channel to the display.

    Parameters
    ----------
    host:
        Display host.
    port:
        Display port.
    client_factory:
        Zero-argument callable building the Socket.IO client.  Defaults to
        ``socketio.Client``; tests inject an in-process fake.
    background:
        Connect on a daemon thread (default).  When ``False`` the connect
        runs inline, which keeps tests deterministic.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        *,
        client_factory: Callable[[], Any] | None = None,
        background: bool = True,
    ) -> None:
        self._host = host
        self._port = port
        self._client_factory = client_factory or socketio.Client
        self._background = background
        self._client: Any | None = None
        self._state = ConnectionState.UNCONNECTED
        self._handler: Callable[[list[dict[str, Any]]], Any] | None = _noop
        self._node_env = ""
        self._mode: DisplayMode | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def url(self) -> str:
        return f"http://{self._host}:{self._port}"

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def display_mode(self) -> DisplayMode | None:
        """Mode announced by the display, ``None`` until received."""
        return self._mode

    @property
    def minimal(self) -> bool | None:
        return self._mode.minimal if self._mode is not None else None

    @property
    def is_live(self) -> bool:
        """``True`` once connected and not yet closed."""
        return self._state == ConnectionState.CONNECTED

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def open(self, node_env: str) -> None:
        """Start connecting.  Only the first call has an effect."""
        if self._state != ConnectionState.UNCONNECTED:
            return
        self._node_env = node_env
        client = self._client_factory()
        client.on("connect", self._on_connect)
        client.on("disconnect", self._on_disconnect)
        client.on(MODE_EVENT, self._on_mode)
        self._client = client
        self._state = ConnectionState.CONNECTING
        logger.info("Connecting to display at %s", self.url)

        if self._background:
            threading.Thread(
                target=self._connect,
                args=(client,),
                name="buildrelay-connect",
                daemon=True,
            ).start()
        else:
            self._connect(client)

    def send(self, batch: list[dict[str, Any]]) -> None:
        """Deliver *batch* through the currently bound handler.

        Before connect this drops the batch; after ``close_if_idle`` it
        is a no-op.
        """
        handler = self._handler
        if handler is None:
            return
        handler(batch)

    def bind(self, emitter: MessageEmitter) -> None:
        """Route *emitter*'s batches through this connection."""
        emitter.sink = self.send

    def close_if_idle(self, watching: bool) -> bool:
        """Tear the connection down unless a watch build is in flight.

        Returns ``True`` if this call closed the connection.  Safe to call
        any number of times, from any teardown hook.
        """
        client = self._client
        if watching or client is None:
            return False
        self._handler = None
        self._client = None
        self._state = ConnectionState.CLOSED
        try:
            client.disconnect()
        except Exception:
            logger.debug("Error while disconnecting from display.", exc_info=True)
        logger.info("Display connection closed.")
        return True

    # ------------------------------------------------------------------
    # Socket.IO callbacks
    # ------------------------------------------------------------------

    def _connect(self, client: Any) -> None:
        try:
            client.connect(self.url)
        except SocketConnectionError as exc:
            logger.debug("Display not reachable at %s: %s", self.url, exc)
        except Exception:
            logger.debug("Unexpected error connecting to %s", self.url, exc_info=True)
        else:
            if self._client is not client:
                # closed while the connect was in flight
                client.disconnect()

    def _on_connect(self) -> None:
        client = self._client
        if self._state == ConnectionState.CLOSED or client is None:
            return
        self._handler = self._make_emit_handler(client)
        self._state = ConnectionState.CONNECTED
        logger.info("Connected to display at %s", self.url)
        self._handler(
            batch_to_wire([Message(type=EventType.NODE_ENV, value=self._node_env)])
        )

    def _on_disconnect(self, *args: Any) -> None:
        if self._state != ConnectionState.CONNECTED:
            return
        self._handler = _noop
        self._state = ConnectionState.CONNECTING
        logger.info("Display at %s disconnected.", self.url)

    def _on_mode(self, data: Any) -> None:
        if self._mode is not None:
            return
        try:
            self._mode = DisplayMode.model_validate(data or {})
        except ValueError:
            logger.debug("Ignoring malformed mode payload: %r", data)
            return
        logger.debug("Display mode: minimal=%s", self._mode.minimal)

    @staticmethod
    def _make_emit_handler(client: Any) -> Callable[[list[dict[str, Any]]], None]:
        def _emit(batch: list[dict[str, Any]]) -> None:
            try:
                client.emit(MESSAGE_EVENT, batch)
            except Exception as exc:
                logger.debug("Dropped batch of %d message(s): %s", len(batch), exc)

        return _emit

    def __repr__(self) -> str:
        return f"ConnectionManager(url={self.url!r}, state={self._state.value})"
