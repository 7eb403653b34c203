"""Unified exception hierarchy for yarnbox.

All custom exceptions inherit from YarnboxError for consistent error handling.
The CLI group catches these and converts them to user-friendly messages and
exit codes.

Dependency direction:
    This module has NO internal dependencies (leaf module).
    It may be imported by: all other yarnbox modules.
    It should NOT import from any other yarnbox modules.
"""

from __future__ import annotations

import click


class YarnboxError(Exception):
    """Base exception for all yarnbox errors.

    All yarnbox-specific exceptions should inherit from this class.
    """


class InvalidArgumentsError(click.UsageError, YarnboxError):
    """Bad flag, missing flag value, or unknown/missing subcommand.

    Click prints the usage text when showing it; unlike click's own usage
    errors it exits with status 1.
    """

    exit_code = 1


class EngineError(YarnboxError):
    """Container engine errors.

    Base class for all engine-related exceptions. ``hint`` holds a
    remediation instruction shown to the user below the error.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.hint = hint


class EngineMissingError(EngineError):
    """Raised when the container engine is not installed or not in PATH."""


class PermissionDeniedError(EngineError):
    """Raised when the current user may not talk to the container engine."""


class EngineTimeoutError(EngineError):
    """Raised when a short engine command (volume rm, info) times out."""


class ChildInvocationFailedError(YarnboxError):
    """Raised when an engine invocation exits with a non-zero status.

    The runner exits with the same status.
    """

    def __init__(self, message: str, returncode: int) -> None:
        super().__init__(message)
        self.returncode = returncode
