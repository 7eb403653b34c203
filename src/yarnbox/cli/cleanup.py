"""Cleanup operations for yarnbox.

Handles the clean subcommand: the project's own clean task, local
dependency files and the cache volume.
"""

from __future__ import annotations

import shutil

from rich.console import Console
from rich.markup import escape

from .. import engine
from ..constants import CLEAN_TASK
from ..errors import ChildInvocationFailedError
from ..logging import get_logger
from ..run_config import RunContext
from .tasks import run_tool

console = Console()
logger = get_logger(__name__)


def run_clean_task(context: RunContext) -> bool:
    """Run the project's own clean task, best effort.

    Returns:
        True if the task succeeded, False if it failed (failure is ignored).
    """
    try:
        run_tool(context, CLEAN_TASK)
    except ChildInvocationFailedError as e:
        logger.debug("Clean task failed: %s", e)
        console.print(f"[yellow]Clean task exited with code {e.returncode}, continuing[/yellow]")
        return False
    return True


def remove_dependency_dir(context: RunContext) -> int:
    """Remove the local dependency directory.

    A directory that survives removal (a symlink, or files owned by another
    user) is reported and left in place.

    Returns:
        1 if the directory was removed, 0 otherwise.
    """
    if not context.dependency_dir.exists():
        return 0
    shutil.rmtree(context.dependency_dir, ignore_errors=True)
    if context.dependency_dir.exists():
        logger.debug("rmtree left %s in place", context.dependency_dir)
        console.print(
            f"[yellow]Could not remove {escape(str(context.dependency_dir))}, "
            "remove it manually[/yellow]"
        )
        return 0
    return 1


def remove_project_id_file(context: RunContext) -> int:
    """Remove the persisted project identifier.

    Returns:
        1 if the file was removed, 0 otherwise.
    """
    if context.project_id_file.exists():
        context.project_id_file.unlink()
        return 1
    return 0


def clean_project(context: RunContext) -> None:
    """Clean task, local files, then the cache volume.

    Local cleanup and volume removal always happen, whatever the clean
    task's outcome.

    Raises:
        ChildInvocationFailedError: If the volume cannot be removed.
    """
    run_clean_task(context)

    console.print("[dim]Removing local files...[/dim]")
    removed = remove_dependency_dir(context) + remove_project_id_file(context)
    logger.debug("Removed %d local item(s)", removed)

    console.print(f"[dim]Removing volume {context.cache_volume}...[/dim]")
    engine.remove_volume(context.engine.name, context.cache_volume, env=context.child_env())

    console.print("[green]✓ Clean complete[/green]")
