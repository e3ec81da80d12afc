"""
opencode-synced Settings Management

This module loads the sync configuration file (JSON, or YAML by suffix)
into a SyncConfig. Only the keys this package acts on are interpreted;
every other key is preserved untouched in ``extra``.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from opencode_synced.config import SUPPORTED_PLATFORMS, YAML_SUFFIXES
from opencode_synced.paths import get_sync_config_path

logger = logging.getLogger(__name__)

PluginBaseDir = str | dict[str, str]


def _parse_plugin_base_dir(value: Any) -> PluginBaseDir | None:
    """Validate a raw ``pluginBaseDir`` value.

    Strings are kept as-is. Mappings keep only known platform keys with
    string values; anything else is dropped with a warning.
    """
    if value is None:
        return None

    if isinstance(value, str):
        return value

    if not isinstance(value, dict):
        logger.warning(
            f"Ignoring pluginBaseDir of type {type(value).__name__}, "
            "expected a string or a per-platform mapping"
        )
        return None

    result: dict[str, str] = {}
    for key, platform_dir in value.items():
        if key not in SUPPORTED_PLATFORMS:
            logger.warning(f"Ignoring unknown platform '{key}' in pluginBaseDir")
            continue
        if not isinstance(platform_dir, str):
            logger.warning(f"Ignoring non-string pluginBaseDir for '{key}'")
            continue
        result[key] = platform_dir

    return result


@dataclass
class SyncConfig:
    """
    Sync configuration container.

    ``plugin_base_dir`` is either a single directory used on every platform
    or a mapping of ``sys.platform`` values (win32, darwin, linux) to
    directories.
    """

    plugin_base_dir: PluginBaseDir | None = None
    plugins: list[Any] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncConfig":
        """Build a SyncConfig from on-disk (camelCase) keys."""
        extra = dict(data)
        base_dir = _parse_plugin_base_dir(extra.pop("pluginBaseDir", None))

        raw_plugins = extra.pop("plugins", None)
        if raw_plugins is None:
            raw_plugins = extra.pop("plugin", None)

        if raw_plugins is None:
            plugins: list[Any] = []
        elif isinstance(raw_plugins, list):
            plugins = list(raw_plugins)
        else:
            logger.warning("Config has invalid plugins field, using []")
            plugins = []

        return cls(plugin_base_dir=base_dir, plugins=plugins, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to on-disk (camelCase) keys."""
        data: dict[str, Any] = dict(self.extra)
        if self.plugin_base_dir is not None:
            data["pluginBaseDir"] = self.plugin_base_dir
        if self.plugins:
            data["plugins"] = list(self.plugins)
        return data


def _read_config_file(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(f)
        return json.load(f)


def load_sync_config(path: Path | None = None) -> SyncConfig:
    """
    Load the sync configuration from a JSON or YAML file.

    Args:
        path: Config file path. Defaults to get_sync_config_path().

    Returns:
        Parsed SyncConfig, or an empty one if the file doesn't exist or is
        invalid.
    """
    if path is None:
        path = Path(get_sync_config_path())

    if not path.exists():
        logger.debug(f"No sync config at {path}")
        return SyncConfig()

    try:
        data = _read_config_file(path)
    except (json.JSONDecodeError, yaml.YAMLError, OSError) as e:
        logger.warning(f"Failed to load sync config from {path}: {e}")
        return SyncConfig()

    if not isinstance(data, dict):
        logger.warning(f"Sync config at {path} is not a mapping, ignoring")
        return SyncConfig()

    logger.debug(f"Loaded sync config from {path}")
    return SyncConfig.from_dict(data)
