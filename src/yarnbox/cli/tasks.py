"""Task pipelines for yarnbox.

Each subcommand is a fixed sequence of container invocations. A failing
step raises ChildInvocationFailedError and aborts the rest of its pipeline;
nothing already done is rolled back.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape

from .. import engine
from ..constants import BUILD_TASK, INSTALL_TASK, TEST_TASK, TOOL_COMMAND, WATCH_TASK
from ..generator import get_run_cmd
from ..logging import get_logger
from ..run_config import RunContext

console = Console()
logger = get_logger(__name__)


def run_tool(
    context: RunContext,
    tool_args: Sequence[str],
    *,
    with_overrides: bool = False,
) -> None:
    """Run the dependency tool once inside the image and wait for it."""
    cmd = get_run_cmd(context, tool_args, with_overrides=with_overrides)
    console.print(f"[dim]→ {TOOL_COMMAND} {escape(' '.join(tool_args))}[/dim]", highlight=False)
    engine.run_container(cmd, env=context.child_env())


def install(context: RunContext) -> None:
    """Install dependencies; module overrides are never mounted here."""
    run_tool(context, INSTALL_TASK)


def build(context: RunContext) -> None:
    logger.debug("Build pipeline in %s", context.cwd)
    install(context)
    run_tool(context, BUILD_TASK)


def watch(context: RunContext) -> None:
    """Install, build once, then block on the watch task."""
    logger.debug("Watch pipeline in %s", context.cwd)
    install(context)
    run_tool(context, BUILD_TASK)
    run_tool(context, WATCH_TASK)


def test(context: RunContext) -> None:
    logger.debug("Test pipeline in %s", context.cwd)
    install(context)
    run_tool(context, TEST_TASK)


def passthrough(context: RunContext, tool_args: Sequence[str]) -> None:
    """Run the dependency tool with arbitrary arguments and module overrides."""
    run_tool(context, tool_args, with_overrides=True)
