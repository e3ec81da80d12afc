"""
Centralized path management for opencode-synced.

Provides home expansion and per-platform normalization for plugin path
strings, plus the standard locations of the opencode config directory,
the skills hub and the sync config file. Standard locations can be
overridden via environment variables.
"""

import ntpath
import os
import posixpath
from pathlib import Path
from types import ModuleType

from opencode_synced.config import (
    CONFIG_FILENAME,
    SKILL_TARGET_RELATIVE_DIRS,
    WINDOWS_PLATFORM,
)


def path_module(platform: str) -> ModuleType:
    """Return the path flavour (``ntpath`` or ``posixpath``) for *platform*."""
    return ntpath if platform == WINDOWS_PLATFORM else posixpath


def expand_home(path: str, home_dir: str) -> str:
    """Replace a leading ``~`` with *home_dir*.

    Only position 0 is considered; any other ``~`` is left alone.
    """
    if path.startswith("~"):
        return home_dir + path[1:]
    return path


def normalize_path(path: str, home_dir: str, platform: str) -> str:
    """Expand ``~`` and convert separators to the platform separator.

    This is a string-level normalization for prefix comparison only:
    ``.``/``..`` segments, symlinks and case are not touched.

    Args:
        path: Path string, possibly using foreign separators.
        home_dir: Replacement for a leading ``~``.
        platform: ``sys.platform``-style identifier.

    Returns:
        Normalized path string.
    """
    expanded = expand_home(path, home_dir)
    if platform == WINDOWS_PLATFORM:
        return expanded.replace("/", "\\")
    return expanded.replace("\\", "/")


def _resolve_path(env_var: str, default: Path) -> str:
    """Resolve a path from an environment variable or fall back to a default.

    If the environment variable is set, its value is expanded
    (``~`` and ``$VAR`` substitution) and returned. Otherwise the
    *default* path is returned.
    """
    env_path = os.environ.get(env_var)
    if env_path:
        return str(Path(os.path.expanduser(os.path.expandvars(env_path))))
    return str(default)


def get_opencode_config_dir() -> str:
    """Get the opencode configuration directory.

    Override with OPENCODE_SYNCED_CONFIG_DIR environment variable.
    """
    return _resolve_path(
        "OPENCODE_SYNCED_CONFIG_DIR",
        Path.home() / ".config" / "opencode",
    )


def get_skills_hub_dir() -> str:
    """Get the path to the central skills hub.

    Override with OPENCODE_SYNCED_SKILLS_HUB environment variable.
    """
    return _resolve_path(
        "OPENCODE_SYNCED_SKILLS_HUB",
        Path(get_opencode_config_dir()) / "skills",
    )


def get_sync_config_path() -> str:
    """Get the path to the sync config file.

    Override with OPENCODE_SYNCED_CONFIG environment variable.
    """
    return _resolve_path(
        "OPENCODE_SYNCED_CONFIG",
        Path(get_opencode_config_dir()) / CONFIG_FILENAME,
    )


def get_skill_target_dirs(home: Path | None = None) -> list[Path]:
    """Get the tool skill directories that should link to the hub."""
    home = home or Path.home()
    return [home.joinpath(*parts) for parts in SKILL_TARGET_RELATIVE_DIRS]
