"""Pytest configuration and fixtures for yarnbox tests.

This module ensures the yarnbox package is importable during tests
without requiring installation, and provides a fake container engine.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for development testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


class FakeEngine:
    """Records every engine subprocess call instead of running it.

    Commands whose trailing arguments match a registered failure exit with
    the registered code; everything else succeeds.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str] | None] = []
        self._failures: list[tuple[tuple[str, ...], int]] = []

    def fail(self, *tail: str, returncode: int = 1) -> None:
        self._failures.append((tail, returncode))

    def run(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        cmd = list(cmd)
        self.calls.append(cmd)
        self.envs.append(kwargs.get("env"))
        returncode = 0
        for tail, code in self._failures:
            if tuple(cmd[-len(tail) :]) == tail:
                returncode = code
        return subprocess.CompletedProcess(
            cmd, returncode, stdout="", stderr="engine said no" if returncode else ""
        )

    @property
    def tool_calls(self) -> list[list[str]]:
        """Arguments passed to yarn, one entry per container run."""
        return [cmd[cmd.index("yarn") + 1 :] for cmd in self.calls if cmd[1] == "run"]

    @property
    def volume_calls(self) -> list[list[str]]:
        return [cmd for cmd in self.calls if cmd[1:3] == ["volume", "rm"]]


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project directory used as the working directory."""
    monkeypatch.chdir(tmp_path)
    for var in ("YARNBOX_ENGINE", "YARNBOX_IMAGE"):
        monkeypatch.delenv(var, raising=False)
    return Path.cwd()


@pytest.fixture
def fake_engine(monkeypatch: pytest.MonkeyPatch) -> FakeEngine:
    """Engine that is installed, accessible, and records its invocations."""
    fake = FakeEngine()
    monkeypatch.setattr("yarnbox.engine.subprocess.run", fake.run)
    monkeypatch.setattr("yarnbox.engine.shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr("yarnbox.engine.user_in_group", lambda group: True)
    return fake
