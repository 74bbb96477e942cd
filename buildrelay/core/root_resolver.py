"""Best-effort inference of the project root.

The display's ``versions`` feature needs to know where to start resolving
packages from, to translate ``~/lodash/index.js`` into
``/ACTUAL/PATH/node_modules/lodash/index.js``.  In common practice the
bundle context is the project root, but some setups point the context at
a directory of copied assets instead.

Resolution order:

1. the explicit ``root`` option, if set (never checked),
2. the bundle context, if a manifest exists directly under it,
3. the current working directory, if a manifest exists directly under it,
4. ``None`` — which disables ``versions`` instead of failing the build.
"""

from __future__ import annotations

import json
from pathlib import Path

DEFAULT_MANIFEST = "package.json"


def has_manifest(directory: str | Path, manifest_name: str = DEFAULT_MANIFEST) -> bool:
    """Return ``True`` if *directory* holds a usable JSON manifest.

    Missing files, unreadable files, malformed or pathologically nested
    JSON and falsy scalar documents (``null``, ``false``, ``0``, ``""``)
    all count as "no manifest".
    """
    try:
        with open(Path(directory) / manifest_name, encoding="utf-8") as f:
            manifest = json.load(f)
    except (OSError, ValueError, RecursionError):
        return False
    # Objects and arrays count even when empty.
    return isinstance(manifest, (dict, list)) or bool(manifest)


def resolve_project_root(
    explicit_root: str | Path | None,
    bundle_context: str | Path | None,
    cwd: str | Path | None = None,
    *,
    manifest_name: str = DEFAULT_MANIFEST,
) -> Path | None:
    """Resolve the project root, or ``None`` if no heuristic matches.

    Computed on every call; nothing is cached.
    """
    # A bad explicit root is the caller's problem.
    if explicit_root:
        return Path(explicit_root)

    if bundle_context and has_manifest(bundle_context, manifest_name):
        return Path(bundle_context)

    try:
        directory = Path(cwd) if cwd is not None else Path.cwd()
    except OSError:
        # cwd was removed from under us
        return None
    if has_manifest(directory, manifest_name):
        return directory

    return None
