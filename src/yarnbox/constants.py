"""Constants module for yarnbox.

All file names, defaults and timeouts are defined here (SSOT).
"""

from __future__ import annotations

# === Engine ===
DEFAULT_ENGINE = "docker"
ENGINE_ENV_VAR = "YARNBOX_ENGINE"
# Host group granting access to the engine daemon; None means no check
ENGINE_ACCESS_GROUPS: dict[str, str | None] = {
    "docker": "docker",
    "podman": None,  # rootless, no daemon socket group
}
ENGINE_COMMAND_TIMEOUT = 60  # Quick engine commands (volume rm)

# === Image ===
DEFAULT_IMAGE = "node:lts"
IMAGE_ENV_VAR = "YARNBOX_IMAGE"
TOOL_COMMAND = "yarn"  # Dependency tool entry point inside the image

# === Project files (relative to the working directory) ===
PROJECT_ID_FILE = ".yarnbox-id"
PROJECT_ID_LENGTH = 8
ENV_FILE = ".env"
DEPENDENCY_DIR = "node_modules"

# === Cache volume ===
CACHE_VOLUME_SUFFIX = "-dependencies"
CONTAINER_CACHE_DIR = "/yarn-cache"  # Named volume mount point
CONTAINER_HOME = "/tmp"  # Writable HOME for an arbitrary uid

# === Tasks run by the image ===
INSTALL_TASK = ("install",)
BUILD_TASK = ("run", "build")
WATCH_TASK = ("run", "watch")
TEST_TASK = ("run", "test")
CLEAN_TASK = ("run", "clean")

# === Exit codes ===
EXIT_INTERRUPTED = 130  # Ctrl+C

# === Diagnostics ===
DEBUG_ENV_VAR = "YARNBOX_DEBUG"
DEBUG_ENV_VALUES = ("1", "true", "yes")
