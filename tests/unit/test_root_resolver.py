"""Unit tests for project root inference."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from buildrelay.core.root_resolver import has_manifest, resolve_project_root


def _project(directory: Path, manifest: str = "package.json") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / manifest).write_text(json.dumps({"name": directory.name}))
    return directory


class TestResolutionOrder:
    def test_explicit_root_wins_unchecked(self, tmp_path):
        context = _project(tmp_path / "b")
        result = resolve_project_root("/a", context, cwd=context)
        assert result == Path("/a")

    def test_bundle_context_with_manifest(self, tmp_path):
        context = _project(tmp_path / "b")
        cwd = _project(tmp_path / "cwd")
        assert resolve_project_root(None, context, cwd=cwd) == context

    def test_falls_back_to_cwd(self, tmp_path):
        context = tmp_path / "assets"
        context.mkdir()
        cwd = _project(tmp_path / "cwd")
        assert resolve_project_root(None, context, cwd=cwd) == cwd

    def test_no_context_uses_cwd(self, tmp_path):
        cwd = _project(tmp_path / "cwd")
        assert resolve_project_root(None, None, cwd=cwd) == cwd

    def test_nothing_matches_returns_none(self, tmp_path):
        context = tmp_path / "b"
        context.mkdir()
        cwd = tmp_path / "cwd"
        cwd.mkdir()
        assert resolve_project_root(None, context, cwd=cwd) is None

    def test_defaults_to_process_cwd(self, tmp_path, monkeypatch):
        _project(tmp_path)
        monkeypatch.chdir(tmp_path)
        assert resolve_project_root(None, None) == tmp_path

    def test_custom_manifest_name(self, tmp_path):
        context = _project(tmp_path / "b", manifest="manifest.json")
        assert resolve_project_root(None, context, cwd=tmp_path) is None
        assert (
            resolve_project_root(None, context, cwd=tmp_path, manifest_name="manifest.json")
            == context
        )


class TestProbeFailures:
    def test_malformed_manifest_is_no_match(self, tmp_path):
        context = tmp_path / "b"
        context.mkdir()
        (context / "package.json").write_text("{not json")
        assert has_manifest(context) is False
        assert resolve_project_root(None, context, cwd=context) is None

    def test_manifest_directory_is_no_match(self, tmp_path):
        context = tmp_path / "b"
        (context / "package.json").mkdir(parents=True)
        assert has_manifest(context) is False

    def test_missing_context_directory(self, tmp_path):
        cwd = _project(tmp_path / "cwd")
        assert resolve_project_root(None, tmp_path / "missing", cwd=cwd) == cwd

    def test_deeply_nested_manifest_is_no_match(self, tmp_path):
        context = tmp_path / "b"
        context.mkdir()
        (context / "package.json").write_text("[" * 100_000 + "]" * 100_000)
        empty = tmp_path / "empty"
        empty.mkdir()
        assert has_manifest(context) is False
        assert resolve_project_root(None, context, cwd=empty) is None

    @pytest.mark.parametrize("document", ["null", "false", "0", '""'])
    def test_falsy_manifest_is_no_match(self, tmp_path, document):
        context = tmp_path / "b"
        context.mkdir()
        (context / "package.json").write_text(document)
        empty = tmp_path / "empty"
        empty.mkdir()
        assert has_manifest(context) is False
        assert resolve_project_root(None, context, cwd=empty) is None

    @pytest.mark.parametrize("document", ["{}", "[]", '"x"', "1"])
    def test_empty_containers_and_truthy_scalars_match(self, tmp_path, document):
        context = tmp_path / "b"
        context.mkdir()
        (context / "package.json").write_text(document)
        assert has_manifest(context) is True

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="root ignores file permissions",
    )
    def test_unreadable_manifest_is_no_match(self, tmp_path):
        context = _project(tmp_path / "b")
        manifest = context / "package.json"
        manifest.chmod(0)
        try:
            cwd = _project(tmp_path / "cwd")
            assert has_manifest(context) is False
            assert resolve_project_root(None, context, cwd=cwd) == cwd
        finally:
            manifest.chmod(0o644)
