"""Tests for yarnbox.run_config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from yarnbox.run_config import EngineProfile, ModuleOverride, RunContext


def _context(**kwargs: object) -> RunContext:
    defaults: dict[str, object] = {
        "cwd": Path("/work/app"),
        "project_id": "abcd1234",
        "image": "node:lts",
    }
    defaults.update(kwargs)
    return RunContext(**defaults)  # type: ignore[arg-type]


class TestRunContext:
    """Tests for RunContext dataclass."""

    def test_defaults(self) -> None:
        context = _context()
        assert context.engine == EngineProfile("docker", "docker")
        assert context.env_overlay == ()
        assert context.has_env_file is False
        assert context.module_overrides == ()
        assert context.tty is False

    def test_derived_paths(self) -> None:
        context = _context()
        assert context.env_file == Path("/work/app/.env")
        assert context.project_id_file == Path("/work/app/.yarnbox-id")
        assert context.dependency_dir == Path("/work/app/node_modules")

    def test_cache_volume(self) -> None:
        assert _context().cache_volume == "abcd1234-dependencies"

    def test_frozen(self) -> None:
        """RunContext is immutable (frozen)."""
        context = _context()
        with pytest.raises(AttributeError):
            context.project_id = "other"  # type: ignore[misc]

    def test_hashable(self) -> None:
        context = _context(env_overlay=(("A", "1"),))
        _ = {context: "value"}


class TestChildEnv:
    """Tests for RunContext.child_env."""

    def test_overlay_wins(self) -> None:
        context = _context(env_overlay=(("NODE_ENV", "production"),))
        env = context.child_env({"NODE_ENV": "development", "PATH": "/bin"})
        assert env == {"NODE_ENV": "production", "PATH": "/bin"}

    def test_base_not_mutated(self) -> None:
        base = {"PATH": "/bin"}
        _context(env_overlay=(("A", "1"),)).child_env(base)
        assert base == {"PATH": "/bin"}

    def test_inherits_process_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("YARNBOX_INHERITED", "yes")
        assert _context().child_env()["YARNBOX_INHERITED"] == "yes"


class TestModuleOverride:
    """Tests for ModuleOverride."""

    def test_absolute_path(self) -> None:
        override = ModuleOverride.from_path("/src/my-lib", Path("/work/app"))
        assert override.host_path == Path("/src/my-lib")
        assert override.container_path == Path("/work/app/node_modules/my-lib")
        assert override.volume == "/src/my-lib:/work/app/node_modules/my-lib"

    def test_trailing_slash(self) -> None:
        override = ModuleOverride.from_path("/src/my-lib/", Path("/work/app"))
        assert override.container_path.name == "my-lib"

    def test_relative_path(self, tmp_path: Path) -> None:
        override = ModuleOverride.from_path("libs/ui", tmp_path)
        assert override.host_path == (tmp_path / "libs" / "ui").resolve()
        assert override.container_path == tmp_path / "node_modules" / "ui"

    def test_home_expanded(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        override = ModuleOverride.from_path("~/ui", Path("/work/app"))
        assert override.host_path == tmp_path / "ui"
