"""Container engine operations for yarnbox.

Preflight checks and subprocess wrappers around the engine CLI, separated
from CLI logic for better modularity.
"""

from __future__ import annotations

import grp
import os
import pwd
import shutil
import subprocess
from typing import TYPE_CHECKING

from .constants import ENGINE_COMMAND_TIMEOUT, EXIT_INTERRUPTED
from .errors import (
    ChildInvocationFailedError,
    EngineMissingError,
    EngineTimeoutError,
    PermissionDeniedError,
)
from .logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .run_config import EngineProfile

logger = get_logger(__name__)

__all__ = [
    "find_engine",
    "user_in_group",
    "check_engine_access",
    "safe_engine_run",
    "run_container",
    "remove_volume",
]


def _format_cmd(cmd: Sequence[str]) -> str:
    return " ".join(cmd[:4]) + ("..." if len(cmd) > 4 else "")


def find_engine(profile: EngineProfile) -> str:
    """Locate the engine executable.

    Raises:
        EngineMissingError: If the executable is not in PATH.
    """
    path = shutil.which(profile.name)
    if path is None:
        raise EngineMissingError(
            f"{profile.name} not found in PATH.",
            hint=f"Install {profile.name} (or set YARNBOX_ENGINE) and try again.",
        )
    logger.debug("Using engine %s at %s", profile.name, path)
    return path


def _current_user_name() -> str:
    try:
        return pwd.getpwuid(os.getuid()).pw_name
    except KeyError:
        return ""


def user_in_group(group_name: str) -> bool | None:
    """Check whether the invoking user belongs to ``group_name``.

    Returns:
        None if the group does not exist on this host, otherwise whether
        the user is root or a member (primary, supplementary or listed).
    """
    try:
        group = grp.getgrnam(group_name)
    except KeyError:
        return None
    if os.getuid() == 0:
        return True
    if group.gr_gid == os.getgid() or group.gr_gid in os.getgroups():
        return True
    return _current_user_name() in group.gr_mem


def check_engine_access(profile: EngineProfile) -> None:
    """Probe whether the invoking user may use the engine.

    Only engines with a host access group are checked, and only when that
    group exists.

    Raises:
        PermissionDeniedError: If the group exists and the user is not in it.
    """
    if not profile.access_group:
        return
    member = user_in_group(profile.access_group)
    logger.debug("Access group %s membership: %s", profile.access_group, member)
    if member is False:
        user = _current_user_name() or "$USER"
        raise PermissionDeniedError(
            f"Permission denied for {profile.name}: "
            f"not a member of the '{profile.access_group}' group.",
            hint=f"Run: sudo usermod -aG {profile.access_group} {user}, then log in again.",
        )


def safe_engine_run(
    cmd: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    timeout: int = ENGINE_COMMAND_TIMEOUT,
) -> subprocess.CompletedProcess[str]:
    """Run a short engine command with captured output.

    Raises:
        EngineMissingError: If the engine command is not found.
        EngineTimeoutError: If the command times out.
    """
    cmd_str = _format_cmd(cmd)
    logger.debug("Running engine command: %s", cmd_str)
    try:
        result = subprocess.run(
            list(cmd),
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
            env=None if env is None else dict(env),
        )
    except FileNotFoundError as e:
        logger.error("Engine not found in PATH: %s", cmd_str)
        raise EngineMissingError(f"Engine not found in PATH. Command: {cmd_str}") from e
    except subprocess.TimeoutExpired as e:
        logger.error("Engine command timed out after %ds: %s", timeout, cmd_str)
        raise EngineTimeoutError(
            f"Engine command timed out after {timeout}s. Command: {cmd_str}"
        ) from e
    logger.debug("Engine command completed: exit=%d", result.returncode)
    return result


def run_container(cmd: Sequence[str], *, env: Mapping[str, str]) -> None:
    """Run a container in the foreground and wait for it to exit.

    Output streams straight to the terminal. There is no timeout; watch
    tasks block until interrupted.

    Raises:
        EngineMissingError: If the engine command is not found.
        ChildInvocationFailedError: If the container exits non-zero.
    """
    logger.debug("Running container: %s", " ".join(cmd))
    try:
        result = subprocess.run(list(cmd), check=False, env=dict(env))
        returncode = result.returncode
    except FileNotFoundError as e:
        raise EngineMissingError(f"Engine not found in PATH. Command: {_format_cmd(cmd)}") from e
    except KeyboardInterrupt:
        returncode = EXIT_INTERRUPTED

    logger.debug("Container exited: %d", returncode)
    if returncode != 0:
        raise ChildInvocationFailedError(
            f"Container exited with code {returncode}",
            returncode,
        )


def remove_volume(engine: str, volume: str, *, env: Mapping[str, str]) -> None:
    """Force-remove a named volume; a missing volume is not an error.

    Raises:
        ChildInvocationFailedError: If the engine refuses (e.g. volume in use).
    """
    result = safe_engine_run([engine, "volume", "rm", "-f", volume], env=env)
    if result.returncode != 0:
        raise ChildInvocationFailedError(
            f"Failed to remove volume {volume}: {result.stderr.strip()}",
            result.returncode,
        )
