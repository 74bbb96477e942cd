"""Build environment (``NODE_ENV``) providers.

The relay announces the bundler's resolved ``NODE_ENV`` to the display
once per connection.  The host integration layer supplies it through a
``BuildEnvironmentProvider``; the relay never inspects the bundler's
plugin list itself.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


DEFAULT_NODE_ENV = "development"


@runtime_checkable
class BuildEnvironmentProvider(Protocol):
    """Anything that can report the bundler's ``NODE_ENV``."""

    def node_env(self) -> str | None:
        ...


class StaticEnvironment:
    """Provider returning a fixed value."""

    def __init__(self, value: str | None = DEFAULT_NODE_ENV) -> None:
        self._value = value

    def node_env(self) -> str | None:
        return self._value

    def __repr__(self) -> str:
        return f"StaticEnvironment({self._value!r})"


class DefineConstantsEnvironment:
    """Provider backed by a define-style constant table.

    Define plugins declare compile-time constants whose values are source
    snippets, so ``NODE_ENV`` is stored JSON-encoded::

        {"process.env": {"NODE_ENV": '"production"'}}

    Flat keys (``{"process.env.NODE_ENV": '"production"'}``) are
    accepted too.
    """

    def __init__(self, definitions: Mapping[str, Any] | None) -> None:
        self._definitions = definitions or {}

    def node_env(self) -> str | None:
        raw = _lookup(self._definitions, ("process.env", "NODE_ENV"))
        if raw is None:
            raw = self._definitions.get("process.env.NODE_ENV")
        if raw is None:
            return None
        value = json.loads(raw) if isinstance(raw, str) else raw
        if not isinstance(value, str):
            raise ValueError(f"NODE_ENV must decode to a string, got {value!r}")
        return value


def resolve_node_env(provider: BuildEnvironmentProvider | None) -> str:
    """Ask *provider* for ``NODE_ENV``, degrading to ``"development"``.

    A missing provider, a missing value or any provider failure yields
    the default; environment lookup must never abort relay setup.
    """
    if provider is None:
        return DEFAULT_NODE_ENV
    try:
        value = provider.node_env()
    except Exception:
        return DEFAULT_NODE_ENV
    return value if isinstance(value, str) and value else DEFAULT_NODE_ENV


def _lookup(data: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    current: Any = data
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current
