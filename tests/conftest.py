"""Shared test fixtures for buildrelay."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from socketio.exceptions import ConnectionError as SocketConnectionError

from buildrelay.bridge.lifecycle import LifecycleBridge
from buildrelay.bridge.transport import ConnectionManager
from buildrelay.config import RelaySettings
from buildrelay.core.timer import BuildTimer
from buildrelay.models.signals import LifecycleSignal
from buildrelay.models.stats import StatsReport


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: int = 1_000) -> None:
        self.now = now

    def advance(self, ms: int) -> None:
        self.now += ms

    def __call__(self) -> int:
        return self.now


class FakeHost:
    """Minimal bundler compiler satisfying ``BuildHost``."""

    def __init__(self, options: dict[str, Any] | None = None) -> None:
        self.options: dict[str, Any] = options if options is not None else {"output": {}}
        self.taps: dict[str, list[Callable[..., None]]] = defaultdict(list)

    def tap(self, signal: str, callback: Callable[..., None]) -> None:
        self.taps[signal].append(callback)

    def fire(self, signal: LifecycleSignal | str, *args: Any) -> None:
        name = signal.value if isinstance(signal, LifecycleSignal) else signal
        for callback in self.taps[name]:
            callback(*args)


class FakeSocketClient:
    """In-process stand-in for ``socketio.Client``."""

    def __init__(self, *, reachable: bool = True, auto_connect: bool = True) -> None:
        self.reachable = reachable
        self.auto_connect = auto_connect
        self.handlers: dict[str, Callable[..., Any]] = {}
        self.emitted: list[tuple[str, Any]] = []
        self.connect_urls: list[str] = []
        self.disconnect_calls = 0
        self.on_connect_call: Callable[[], None] | None = None

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self.handlers[event] = handler

    def connect(self, url: str) -> None:
        self.connect_urls.append(url)
        if not self.reachable:
            raise SocketConnectionError("Connection refused")
        if self.on_connect_call is not None:
            self.on_connect_call()
        if self.auto_connect:
            self.trigger("connect")

    def emit(self, event: str, data: Any = None) -> None:
        self.emitted.append((event, data))

    def disconnect(self) -> None:
        self.disconnect_calls += 1
        if "disconnect" in self.handlers:
            self.handlers["disconnect"]()

    def trigger(self, event: str, *args: Any) -> None:
        self.handlers[event](*args)

    @property
    def batches(self) -> list[Any]:
        return [data for event, data in self.emitted if event == "message"]


class SocketFactory:
    """``client_factory`` that remembers the clients it built."""

    def __init__(self, **client_kwargs: Any) -> None:
        self.client_kwargs = client_kwargs
        self.clients: list[FakeSocketClient] = []

    def __call__(self) -> FakeSocketClient:
        client = FakeSocketClient(**self.client_kwargs)
        self.clients.append(client)
        return client

    @property
    def client(self) -> FakeSocketClient:
        return self.clients[-1]


class RecordingHandler:
    """Caller-supplied handler recording every batch."""

    def __init__(self) -> None:
        self.batches: list[list[dict[str, Any]]] = []

    def __call__(self, batch: list[dict[str, Any]]) -> None:
        self.batches.append(batch)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def relay_settings() -> RelaySettings:
    """Settings isolated from the environment and any .env file."""
    return RelaySettings(_env_file=None, host="127.0.0.1", port=9838, root=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer(clock: FakeClock) -> BuildTimer:
    return BuildTimer(clock=clock)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def socket_factory() -> SocketFactory:
    return SocketFactory()


@pytest.fixture
def make_clock() -> type[FakeClock]:
    return FakeClock


@pytest.fixture
def make_host() -> type[FakeHost]:
    return FakeHost


@pytest.fixture
def make_recorder() -> type[RecordingHandler]:
    return RecordingHandler


@pytest.fixture
def make_socket_factory() -> type[SocketFactory]:
    """The fake client factory class, for tests needing custom clients."""
    return SocketFactory


@pytest.fixture
def handler_bridge(
    recorder: RecordingHandler, timer: BuildTimer, relay_settings: RelaySettings
) -> LifecycleBridge:
    """A bridge in caller-supplied handler mode."""
    return LifecycleBridge(recorder, timer=timer, settings=relay_settings)


@pytest.fixture
def make_socket_bridge(
    relay_settings: RelaySettings,
) -> Callable[..., tuple[LifecycleBridge, SocketFactory]]:
    """Factory fixture: a bridge wired to a fake Socket.IO client."""

    def _factory(
        timer: BuildTimer | None = None, **client_kwargs: Any
    ) -> tuple[LifecycleBridge, SocketFactory]:
        factory = SocketFactory(**client_kwargs)
        connection = ConnectionManager(
            relay_settings.host,
            relay_settings.port,
            client_factory=factory,
            background=False,
        )
        bridge = LifecycleBridge(
            timer=timer, settings=relay_settings, connection=connection
        )
        return bridge, factory

    return _factory


@pytest.fixture
def make_stats() -> Callable[..., StatsReport]:
    """Factory fixture: build a StatsReport with sensible defaults."""

    def _factory(**overrides: Any) -> StatsReport:
        defaults: dict[str, Any] = {
            "hash": "abc123",
            "time_ms": 640,
            "assets": [{"name": "main.js", "size": 1024}],
        }
        defaults.update(overrides)
        return StatsReport(**defaults)

    return _factory
