"""Plugin path rewriting between local paths and portable references.

Provides:
- Classification of plugin list entries (local path / portable / package)
- Local path <-> ``sync://plugins/<name>`` conversion against a base directory
- Plugin base directory resolution (inference, detection, explicit config)
- Whole-list transforms for storing in the repo and for local use

Everything here is pure string manipulation except the existence checks
used while resolving the base directory, which go through an injectable
PathExistsCheck.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Sequence
from enum import Enum
from typing import Any, Protocol

from opencode_synced.config import (
    COMMON_PLUGIN_DIRS,
    PACKAGE_SCOPE_MARKER,
    PORTABLE_PREFIX,
    PORTABLE_SCHEME,
)
from opencode_synced.paths import expand_home, normalize_path, path_module
from opencode_synced.settings import SyncConfig

logger = logging.getLogger(__name__)

_DRIVE_LETTER_RE = re.compile(r"^[A-Za-z]:[\\/]")
_UNC_PREFIX = "\\\\"


class PathExistsCheck(Protocol):
    """Capability for checking whether a path exists."""

    def __call__(self, path: str) -> bool: ...


class PluginKind(Enum):
    LOCAL = "local"
    PORTABLE = "portable"
    PACKAGE = "package"
    STRUCTURED = "structured"  # non-string entry, passed through verbatim


# ──────────────────────────────────────────────────────────
# Classification
# ──────────────────────────────────────────────────────────


def is_local_plugin_path(value: str) -> bool:
    """Return True if *value* names a plugin on the local filesystem.

    Local means rooted at ``/``, ``~``, a drive letter (``C:\\``, ``C:/``)
    or a UNC share (``\\\\server\\share``). A backslash-rooted path without
    a drive is not treated as local.
    """
    if value.startswith(PORTABLE_SCHEME):
        return False
    if value.startswith(PACKAGE_SCOPE_MARKER):
        return False
    if "/" not in value and "\\" not in value:
        return False
    if value.startswith("/") or value.startswith(_UNC_PREFIX):
        return True
    if value.startswith("~"):
        return True
    if _DRIVE_LETTER_RE.match(value):
        return True
    return False


def is_portable_plugin_path(value: str) -> bool:
    """Return True if *value* is a ``sync://plugins/`` reference."""
    return value.startswith(PORTABLE_PREFIX)


def classify_plugin(entry: Any) -> PluginKind:
    """Classify a plugin list entry.

    Non-string entries are STRUCTURED. Strings that are neither local
    paths nor portable references are PACKAGE identifiers.
    """
    if not isinstance(entry, str):
        return PluginKind.STRUCTURED
    if is_portable_plugin_path(entry):
        return PluginKind.PORTABLE
    if is_local_plugin_path(entry):
        return PluginKind.LOCAL
    return PluginKind.PACKAGE


# ──────────────────────────────────────────────────────────
# Conversion
# ──────────────────────────────────────────────────────────


def plugin_path_to_portable(
    plugin_path: str,
    plugin_base_dir: str,
    platform: str,
) -> str | None:
    """Convert a local plugin path to ``sync://plugins/<name>``.

    Only the first path segment below *plugin_base_dir* is kept, so
    ``<base>/my-plugin/src`` becomes ``sync://plugins/my-plugin``.

    Returns:
        The portable reference, or None if *plugin_path* is not local or
        does not live under *plugin_base_dir*.
    """
    if not is_local_plugin_path(plugin_path):
        return None

    normalized_plugin_path = normalize_path(plugin_path, "", platform)
    normalized_base_dir = normalize_path(plugin_base_dir, "", platform)

    if not normalized_plugin_path.startswith(normalized_base_dir):
        return None

    pathmod = path_module(platform)
    try:
        relative_path = pathmod.relpath(normalized_plugin_path, normalized_base_dir)
    except ValueError:
        return None

    # "/plugins-other" shares the "/plugins" prefix but relpath escapes it
    if not relative_path or relative_path == "." or relative_path.startswith(".."):
        return None

    plugin_name = relative_path.split(pathmod.sep)[0]
    if not plugin_name:
        return None

    return f"{PORTABLE_PREFIX}{plugin_name}"


def portable_to_plugin_path(
    portable_path: str,
    plugin_base_dir: str,
    platform: str | None = None,
) -> str | None:
    """Convert ``sync://plugins/<name>`` to ``<plugin_base_dir>/<name>``.

    The resulting directory is not checked for existence.
    """
    if not portable_path.startswith(PORTABLE_PREFIX):
        return None

    plugin_name = portable_path[len(PORTABLE_PREFIX) :]
    if not plugin_name:
        return None

    return path_module(platform or sys.platform).join(plugin_base_dir, plugin_name)


# ──────────────────────────────────────────────────────────
# Base directory resolution
# ──────────────────────────────────────────────────────────


def _find_common_ancestor(paths: list[str], platform: str) -> str | None:
    """Longest shared leading run of path segments.

    A single path yields its parent directory.
    """
    if not paths:
        return None

    sep = path_module(platform).sep

    if len(paths) == 1:
        parts = paths[0].split(sep)
        return sep.join(parts[:-1]) if len(parts) > 1 else None

    split_paths = [p.split(sep) for p in paths]

    common_parts: list[str] = []
    for i, part in enumerate(split_paths[0]):
        if all(i < len(parts) and parts[i] == part for parts in split_paths):
            common_parts.append(part)
        else:
            break

    if not common_parts:
        return None
    return sep.join(common_parts)


def infer_plugin_base_dir(
    plugins: Sequence[Any],
    home_dir: str,
    platform: str,
    exists: PathExistsCheck | None = None,
) -> str | None:
    """Guess the plugin base directory from the local paths in *plugins*.

    The common ancestor is returned even when it does not exist on disk;
    existence is only logged.
    """
    exists = exists or os.path.exists

    local_paths = [
        p for p in plugins if isinstance(p, str) and is_local_plugin_path(p)
    ]
    if not local_paths:
        return None

    normalized_paths = [
        normalize_path(expand_home(p, home_dir), home_dir, platform)
        for p in local_paths
    ]

    common_ancestor = _find_common_ancestor(normalized_paths, platform)
    if not common_ancestor:
        return None

    expanded = expand_home(common_ancestor, home_dir)
    if exists(expanded):
        logger.debug(f"Inferred plugin base dir {expanded}")
    else:
        logger.debug(f"Inferred plugin base dir {expanded} (not found on disk)")
    return expanded


def detect_plugin_base_dir(
    home_dir: str,
    exists: PathExistsCheck | None = None,
) -> str | None:
    """Return the first conventional plugin directory that exists."""
    exists = exists or os.path.exists

    for candidate in COMMON_PLUGIN_DIRS:
        expanded = expand_home(candidate, home_dir)
        if exists(expanded):
            logger.debug(f"Detected plugin base dir {expanded}")
            return expanded
    return None


def resolve_explicit_plugin_base_dir(
    config: SyncConfig | None,
    home_dir: str,
    platform: str,
) -> str | None:
    """Read the plugin base directory from *config*."""
    if config is None or not config.plugin_base_dir:
        return None

    base_dir = config.plugin_base_dir

    if isinstance(base_dir, str):
        return expand_home(base_dir, home_dir)

    platform_dir = base_dir.get(platform)
    if not platform_dir:
        return None

    return expand_home(platform_dir, home_dir)


def resolve_plugin_base_dir(
    config: SyncConfig | None,
    home_dir: str,
    platform: str,
    plugins: Sequence[Any] | None = None,
    exists: PathExistsCheck | None = None,
) -> str | None:
    """Resolve the plugin base directory.

    Priority (highest to lowest):
    1. Inferred from local paths in *plugins*
    2. First existing conventional directory (~/Code/opencode-plugins, ...)
    3. Explicit ``pluginBaseDir`` from *config*

    Args:
        config: Sync configuration, or None.
        home_dir: User home directory used for ``~`` expansion.
        platform: ``sys.platform``-style identifier.
        plugins: Current plugin list, used for inference.
        exists: Existence check; defaults to os.path.exists.

    Returns:
        Plugin base directory, or None if nothing could be resolved.
    """
    if plugins:
        inferred = infer_plugin_base_dir(plugins, home_dir, platform, exists)
        if inferred is not None:
            return inferred

    detected = detect_plugin_base_dir(home_dir, exists)
    if detected is not None:
        return detected

    return resolve_explicit_plugin_base_dir(config, home_dir, platform)


# ──────────────────────────────────────────────────────────
# List transforms
# ──────────────────────────────────────────────────────────


def transform_plugins_for_repo(
    plugins: Sequence[Any],
    plugin_base_dir: str | None,
    platform: str,
) -> list[Any]:
    """Rewrite local plugin paths as portable references.

    Entries that cannot be converted (packages, paths outside the base
    directory, non-string values) are returned unchanged.
    """
    if not plugin_base_dir:
        return list(plugins)

    result: list[Any] = []
    for plugin in plugins:
        if not isinstance(plugin, str):
            result.append(plugin)
            continue
        portable = plugin_path_to_portable(plugin, plugin_base_dir, platform)
        result.append(portable if portable is not None else plugin)
    return result


def transform_plugins_for_local(
    plugins: Sequence[Any],
    plugin_base_dir: str | None,
    platform: str | None = None,
) -> list[Any]:
    """Rewrite portable references as paths under *plugin_base_dir*."""
    if not plugin_base_dir:
        return list(plugins)

    result: list[Any] = []
    for plugin in plugins:
        if not isinstance(plugin, str):
            result.append(plugin)
            continue
        local_path = portable_to_plugin_path(plugin, plugin_base_dir, platform)
        result.append(local_path if local_path is not None else plugin)
    return result


def prepare_plugins_for_repo(
    plugins: Sequence[Any],
    config: SyncConfig | None,
    home_dir: str | None = None,
    platform: str | None = None,
    exists: PathExistsCheck | None = None,
) -> list[Any]:
    """Resolve the base directory from *plugins* and make them portable."""
    home_dir = home_dir if home_dir is not None else os.path.expanduser("~")
    platform = platform or sys.platform

    base_dir = resolve_plugin_base_dir(config, home_dir, platform, plugins, exists)
    if base_dir is None:
        logger.info("No plugin base directory resolved, plugins left unchanged")
    return transform_plugins_for_repo(plugins, base_dir, platform)


def prepare_plugins_for_local(
    plugins: Sequence[Any],
    config: SyncConfig | None,
    home_dir: str | None = None,
    platform: str | None = None,
    exists: PathExistsCheck | None = None,
) -> list[Any]:
    """Resolve the base directory and expand portable references in *plugins*.

    Portable references carry no local path, so inference from *plugins*
    only sees entries that are already local.
    """
    home_dir = home_dir if home_dir is not None else os.path.expanduser("~")
    platform = platform or sys.platform

    base_dir = resolve_plugin_base_dir(config, home_dir, platform, plugins, exists)
    if base_dir is None:
        logger.info("No plugin base directory resolved, plugins left unchanged")
    return transform_plugins_for_local(plugins, base_dir, platform)
