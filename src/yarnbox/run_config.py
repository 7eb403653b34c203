"""Run context dataclasses for yarnbox.

Bundles everything a run needs (project identity, environment overlay,
module overrides, engine and user identity) into one immutable object that
is built once at startup and passed to every step.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .constants import CACHE_VOLUME_SUFFIX, DEPENDENCY_DIR, ENV_FILE, PROJECT_ID_FILE


@dataclass(frozen=True)
class EngineProfile:
    """Container engine executable plus its host access convention.

    ``access_group`` is the host group whose members may use the engine,
    or None when the engine has no such convention.
    """

    name: str = "docker"
    access_group: str | None = "docker"


@dataclass(frozen=True)
class ModuleOverride:
    """A local directory mounted over one installed dependency."""

    host_path: Path
    container_path: Path

    @classmethod
    def from_path(cls, path: str, cwd: Path) -> ModuleOverride:
        """Map ``path`` onto ``<cwd>/node_modules/<basename>``."""
        host_path = Path(path).expanduser()
        if not host_path.is_absolute():
            host_path = (cwd / host_path).resolve()
        return cls(host_path, cwd / DEPENDENCY_DIR / host_path.name)

    @property
    def volume(self) -> str:
        return f"{self.host_path}:{self.container_path}"


@dataclass(frozen=True)
class RunContext:
    """Configuration for a yarnbox run.

    Immutable dataclass; frozen=True for hashability and to prevent
    accidental mutation while the pipeline runs.
    """

    cwd: Path
    project_id: str
    image: str
    engine: EngineProfile = field(default_factory=EngineProfile)
    env_overlay: tuple[tuple[str, str], ...] = ()
    has_env_file: bool = False
    module_overrides: tuple[ModuleOverride, ...] = ()
    uid: int = 0
    gid: int = 0
    tty: bool = False

    @property
    def env_file(self) -> Path:
        return self.cwd / ENV_FILE

    @property
    def project_id_file(self) -> Path:
        return self.cwd / PROJECT_ID_FILE

    @property
    def dependency_dir(self) -> Path:
        return self.cwd / DEPENDENCY_DIR

    @property
    def cache_volume(self) -> str:
        return f"{self.project_id}{CACHE_VOLUME_SUFFIX}"

    def child_env(self, base: dict[str, str] | None = None) -> dict[str, str]:
        """Build the environment for an engine process.

        Host environment (or ``base``) updated with the overlay; the
        current process environment is never modified.
        """
        env = dict(os.environ if base is None else base)
        env.update(self.env_overlay)
        return env
