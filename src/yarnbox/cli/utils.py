"""CLI utilities for yarnbox.

Engine preflight checks.
"""

from __future__ import annotations

from collections.abc import Mapping

from .. import engine
from ..config import get_engine_profile
from ..run_config import EngineProfile


def check_engine(environ: Mapping[str, str] | None = None) -> EngineProfile:
    """Run preflight checks and return the engine profile to use.

    Raises:
        EngineMissingError: If the engine executable is not in PATH.
        PermissionDeniedError: If the user is not in the engine's access group.
    """
    profile = get_engine_profile(environ)
    engine.find_engine(profile)
    engine.check_engine_access(profile)
    return profile
