"""CLI package for yarnbox.

This package contains the CLI commands and supporting modules:
- tasks: container pipelines for build, watch, test and yarn passthrough
- cleanup: the clean subcommand
- utils: engine preflight checks
"""

from __future__ import annotations

from collections.abc import Callable
from functools import update_wrapper
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.markup import escape

from ..config import load_context
from ..constants import EXIT_INTERRUPTED
from ..errors import ChildInvocationFailedError, EngineError, InvalidArgumentsError
from ..logging import get_logger
from ..run_config import RunContext
from . import cleanup, tasks
from .utils import check_engine

console = Console(stderr=True)
logger = get_logger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

F = TypeVar("F", bound=Callable[..., Any])

__all__ = ["cli", "check_engine", "pass_run_context", "PassthroughCommand", "RunnerGroup"]


class RunnerGroup(click.Group):
    """Click group that owns error reporting for the whole run.

    Usage errors exit with status 1 instead of click's 2. Engine errors are
    printed with their remediation hint. A failed container invocation
    becomes the runner's own exit status.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except InvalidArgumentsError:
            raise
        except click.UsageError as e:
            raise InvalidArgumentsError(e.format_message(), ctx) from e

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except InvalidArgumentsError:
            raise
        except click.UsageError as e:
            raise InvalidArgumentsError(e.format_message(), e.ctx or ctx) from e
        except EngineError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            if e.hint:
                console.print(f"[dim]{escape(e.hint)}[/dim]")
            ctx.exit(1)
        except ChildInvocationFailedError as e:
            if e.returncode == EXIT_INTERRUPTED:
                console.print("[dim]Interrupted[/dim]")
            else:
                console.print(f"[red]Error: {escape(str(e))}[/red]")
            ctx.exit(e.returncode)


class PassthroughCommand(click.Command):
    """Command that hands every token after its name to the tool unparsed.

    Nothing is interpreted, not even ``--`` or ``-h``.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.params["args"] = tuple(args)
        return []


def pass_run_context(f: F) -> F:
    """Run preflight and build the RunContext, then pass it as first argument.

    Done when the subcommand runs, so a subcommand's ``-h`` exits before any
    engine check or project file write.
    """

    def new_func(*args: Any, **kwargs: Any) -> Any:
        ctx = click.get_current_context()
        profile = check_engine()
        node_modules = ctx.find_root().params.get("node_modules", ())
        context = load_context(Path.cwd(), engine=profile, module_paths=node_modules)
        logger.debug("Run context: %s", context)
        return f(context, *args, **kwargs)

    return update_wrapper(new_func, f)  # type: ignore[return-value]


@click.group(
    cls=RunnerGroup,
    context_settings=CONTEXT_SETTINGS,
    no_args_is_help=False,
)
@click.option(
    "--node-module",
    "-m",
    "node_modules",
    multiple=True,
    metavar="PATH",
    help="Mount a local package over node_modules/<basename> (yarn passthrough only)",
)
def cli(node_modules: tuple[str, ...]) -> None:
    """yarnbox - Run yarn builds in isolated containers.

    Every step runs in the dependency-tool image as your own user, with the
    project mounted at its own path.
    """


@cli.command()
@pass_run_context
def build(context: RunContext) -> None:
    """Install dependencies, then run the build task."""
    tasks.build(context)


@cli.command()
@pass_run_context
def watch(context: RunContext) -> None:
    """Install, build, then run the watch task (blocks)."""
    tasks.watch(context)


@cli.command()
@pass_run_context
def test(context: RunContext) -> None:
    """Install dependencies, then run the test task."""
    tasks.test(context)


@cli.command(cls=PassthroughCommand, add_help_option=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@pass_run_context
def yarn(context: RunContext, args: tuple[str, ...]) -> None:
    """Run yarn with ARGS, with --node-module overrides mounted."""
    tasks.passthrough(context, args)


@cli.command()
@pass_run_context
def clean(context: RunContext) -> None:
    """Run the clean task, remove node_modules, the project id and the cache volume."""
    cleanup.clean_project(context)


if __name__ == "__main__":  # pragma: no cover
    cli()
