"""Engine command generation for yarnbox.

Assembles ``run`` command lines from a RunContext.
Nothing here executes anything.
"""

from __future__ import annotations

from collections.abc import Sequence

from .constants import CONTAINER_CACHE_DIR, CONTAINER_HOME, TOOL_COMMAND
from .run_config import RunContext


def _build_mount_args(context: RunContext, with_overrides: bool) -> list[str]:
    """Build mount arguments for the run command.

    Args:
        context: Current run context.
        with_overrides: Mount the ``-m/--node-module`` directories.

    Returns:
        List of mount arguments.
    """
    cwd = str(context.cwd)
    args = [
        # Project mount at the identical path
        "-v",
        f"{cwd}:{cwd}",
        # Project-scoped dependency cache
        "-v",
        f"{context.cache_volume}:{CONTAINER_CACHE_DIR}",
    ]

    if with_overrides:
        for override in context.module_overrides:
            args.extend(["-v", override.volume])

    return args


def _build_env_args(context: RunContext) -> list[str]:
    """Build environment arguments for the run command."""
    args = [
        "-e",
        f"HOME={CONTAINER_HOME}",
        "-e",
        f"YARN_CACHE_FOLDER={CONTAINER_CACHE_DIR}",
    ]

    if context.has_env_file:
        args.extend(["--env-file", str(context.env_file)])

    return args


def get_run_cmd(
    context: RunContext,
    tool_args: Sequence[str],
    *,
    with_overrides: bool = False,
) -> list[str]:
    """Generate the engine run command for one dependency-tool invocation.

    Args:
        context: Current run context.
        tool_args: Arguments for the dependency tool (e.g. ``("run", "build")``).
        with_overrides: Include module-override volumes. Install steps must
            leave this off so they resolve against the real registry.

    Returns:
        Full command line, starting with the engine executable.
    """
    cmd = [
        context.engine.name,
        "run",
        "--rm",  # Remove container on exit
    ]

    # Pseudo-terminal only when our own stdout is one
    if context.tty:
        cmd.append("-it")

    # Files written into the project stay owned by the host user
    cmd.extend(["--user", f"{context.uid}:{context.gid}"])

    cmd.extend(_build_mount_args(context, with_overrides))
    cmd.extend(["-w", str(context.cwd)])
    cmd.extend(_build_env_args(context))

    cmd.append(context.image)
    cmd.append(TOOL_COMMAND)
    cmd.extend(tool_args)
    return cmd
