"""Configuration loading for yarnbox.

Everything read from the host (project identity dotfile, environment file,
engine selection) is loaded here once and frozen into a RunContext.
"""

from __future__ import annotations

import hashlib
import os
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path

from .constants import (
    DEFAULT_ENGINE,
    DEFAULT_IMAGE,
    ENGINE_ACCESS_GROUPS,
    ENGINE_ENV_VAR,
    ENV_FILE,
    IMAGE_ENV_VAR,
    PROJECT_ID_FILE,
    PROJECT_ID_LENGTH,
)
from .logging import get_logger
from .run_config import EngineProfile, ModuleOverride, RunContext

logger = get_logger(__name__)


def get_engine_profile(environ: Mapping[str, str] | None = None) -> EngineProfile:
    """Select the container engine from YARNBOX_ENGINE (default: docker).

    Unknown engines get no access group, so the permission check is skipped.

    Only the host environment is read. The engine is chosen during preflight,
    before the project's ``.env`` is ingested, so unlike YARNBOX_IMAGE a
    YARNBOX_ENGINE line in ``.env`` has no effect.
    """
    env = os.environ if environ is None else environ
    name = env.get(ENGINE_ENV_VAR, "").strip() or DEFAULT_ENGINE
    return EngineProfile(name=name, access_group=ENGINE_ACCESS_GROUPS.get(Path(name).name))


def derive_project_id(path: Path) -> str:
    """Derive the short project identifier for an absolute path.

    Deterministic per path; not meant to be cryptographically strong.
    """
    digest = hashlib.md5(str(path).encode("utf-8"), usedforsecurity=False).hexdigest()
    return digest[:PROJECT_ID_LENGTH]


def resolve_project_id(cwd: Path) -> str:
    """Return the persisted project identifier, creating it on first run."""
    id_file = cwd / PROJECT_ID_FILE
    if id_file.exists():
        project_id = id_file.read_text(encoding="utf-8").strip()
        logger.debug("Using persisted project id %s from %s", project_id, id_file)
        return project_id

    project_id = derive_project_id(cwd)
    id_file.write_text(f"{project_id}\n", encoding="utf-8")
    logger.debug("Created project id %s in %s", project_id, id_file)
    return project_id


def parse_env_lines(lines: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines.

    Blank lines and lines whose first non-blank character is ``#`` are
    skipped. The line is split on the first ``=``; the key is trimmed and
    the value kept as written, so ``KEY=`` yields an empty value. Lines
    without ``=`` or with an empty key are skipped.
    """
    overlay: dict[str, str] = {}
    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            logger.debug("Skipping malformed env line %d: %r", lineno, line)
            continue
        overlay[key] = value
    return overlay


def load_env_file(path: Path) -> dict[str, str]:
    """Load the environment overlay from ``path``, or {} if it does not exist."""
    if not path.is_file():
        return {}
    overlay = parse_env_lines(path.read_text(encoding="utf-8").splitlines())
    logger.debug("Loaded %d variable(s) from %s", len(overlay), path)
    return overlay


def load_context(
    cwd: Path,
    *,
    engine: EngineProfile,
    module_paths: Iterable[str] = (),
    environ: Mapping[str, str] | None = None,
) -> RunContext:
    """Build the immutable run context for ``cwd``.

    Args:
        cwd: Absolute working directory (mounted at the same path).
        engine: Engine profile that passed preflight.
        module_paths: ``-m/--node-module`` values, in command-line order.
        environ: Host environment (defaults to os.environ).

    Returns:
        RunContext shared by every invocation of this run.
    """
    env = os.environ if environ is None else environ
    project_id = resolve_project_id(cwd)

    env_file = cwd / ENV_FILE
    overlay = load_env_file(env_file)
    image = overlay.get(IMAGE_ENV_VAR) or env.get(IMAGE_ENV_VAR) or DEFAULT_IMAGE

    return RunContext(
        cwd=cwd,
        project_id=project_id,
        image=image,
        engine=engine,
        env_overlay=tuple(overlay.items()),
        has_env_file=env_file.is_file(),
        module_overrides=tuple(ModuleOverride.from_path(p, cwd) for p in module_paths),
        uid=os.getuid(),
        gid=os.getgid(),
        tty=sys.stdout.isatty(),
    )
