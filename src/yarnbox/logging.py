"""Diagnostic logging for yarnbox.

User-facing output goes through rich consoles. This module only carries
diagnostics such as every engine command and skipped ``.env`` lines, shown
on stderr when YARNBOX_DEBUG=1.

Usage:
    from yarnbox.logging import get_logger
    logger = get_logger(__name__)
    logger.debug("Engine command: %s", cmd)
"""

from __future__ import annotations

import logging
import os
import sys

from .constants import DEBUG_ENV_VALUES, DEBUG_ENV_VAR

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _get_log_level() -> int:
    """Determine log level from environment."""
    if os.environ.get(DEBUG_ENV_VAR, "").lower() in DEBUG_ENV_VALUES:
        return logging.DEBUG
    return logging.WARNING


def _init_logging() -> None:
    """Attach the stderr handler to the ``yarnbox`` logger once."""
    package_logger = logging.getLogger("yarnbox")
    if package_logger.handlers:
        return
    package_logger.setLevel(_get_log_level())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    package_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``yarnbox`` namespace for a module."""
    _init_logging()
    if not name.startswith("yarnbox"):
        name = f"yarnbox.{name}"
    return logging.getLogger(name)
