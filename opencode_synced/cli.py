#!/usr/bin/env python3
"""opencode-synced CLI - plugin path rewriting and skills hub management.

Commands:
    opencode-synced plugins base-dir [PLUGIN ...]   Show resolved plugin base dir
    opencode-synced plugins to-repo [PLUGIN ...]    Local paths -> sync:// refs
    opencode-synced plugins to-local [PLUGIN ...]   sync:// refs -> local paths
    opencode-synced plugins classify PLUGIN ...     Show the kind of each entry
    opencode-synced skills link [--hub DIR]         Link tool skill dirs to the hub
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from opencode_synced.logging_config import get_log_level, set_debug_mode, setup_logging
from opencode_synced.paths import expand_home
from opencode_synced.plugin_path import (
    PluginKind,
    classify_plugin,
    prepare_plugins_for_local,
    prepare_plugins_for_repo,
    resolve_plugin_base_dir,
    transform_plugins_for_local,
    transform_plugins_for_repo,
)
from opencode_synced.settings import SyncConfig, load_sync_config
from opencode_synced.skills import SkillsHubError, ensure_skill_symlinks

_KIND_STYLES = {
    PluginKind.LOCAL: "green",
    PluginKind.PORTABLE: "cyan",
    PluginKind.PACKAGE: "white",
    PluginKind.STRUCTURED: "dim",
}

_LEVEL_STYLES = {
    logging.WARNING: "yellow",
    logging.ERROR: "red",
}


def _home_dir() -> str:
    return os.path.expanduser("~")


def _load_config(args) -> SyncConfig:
    config_path = Path(args.config) if args.config else None
    return load_sync_config(config_path)


def _plugin_list(args, config: SyncConfig) -> list:
    """Plugins from the command line, falling back to the config file."""
    if args.plugins:
        return list(args.plugins)
    return list(config.plugins)


def cmd_plugins_base_dir(args):
    """Print the resolved plugin base directory."""
    config = _load_config(args)
    plugins = _plugin_list(args, config)
    base_dir = resolve_plugin_base_dir(config, _home_dir(), args.platform, plugins)

    if base_dir is None:
        print("No plugin base directory resolved")
        sys.exit(1)

    print(base_dir)


def cmd_plugins_to_repo(args):
    """Print the plugin list with local paths made portable."""
    config = _load_config(args)
    plugins = _plugin_list(args, config)

    if args.base_dir:
        base_dir = expand_home(args.base_dir, _home_dir())
        result = transform_plugins_for_repo(plugins, base_dir, args.platform)
    else:
        result = prepare_plugins_for_repo(
            plugins, config, home_dir=_home_dir(), platform=args.platform
        )

    print(json.dumps(result, indent=2, ensure_ascii=False))


def cmd_plugins_to_local(args):
    """Print the plugin list with portable references made local."""
    config = _load_config(args)
    plugins = _plugin_list(args, config)

    if args.base_dir:
        base_dir = expand_home(args.base_dir, _home_dir())
        result = transform_plugins_for_local(plugins, base_dir, args.platform)
    else:
        result = prepare_plugins_for_local(
            plugins, config, home_dir=_home_dir(), platform=args.platform
        )

    print(json.dumps(result, indent=2, ensure_ascii=False))


def cmd_plugins_classify(args):
    """Show how each plugin entry is classified."""
    console = Console()
    table = Table(show_header=True, header_style="bold")
    table.add_column("PLUGIN")
    table.add_column("KIND")

    for plugin in args.plugins:
        kind = classify_plugin(plugin)
        table.add_row(Text(plugin), Text(kind.value, style=_KIND_STYLES[kind]))

    console.print(table)


def cmd_skills_link(args):
    """Link every tool skill directory to the skills hub."""
    console = Console()
    hub_dir = Path(expand_home(args.hub, _home_dir())) if args.hub else None

    try:
        result = ensure_skill_symlinks(hub_dir)
    except SkillsHubError as e:
        console.print(str(e), style="red", soft_wrap=True, markup=False)
        sys.exit(1)

    if not result.messages:
        console.print("All skill directories already link to the hub.")
        return

    for level, message in result.entries:
        console.print(
            message, style=_LEVEL_STYLES.get(level), soft_wrap=True, markup=False
        )

    if not result.ok:
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="opencode-synced - portable plugin paths and shared skills",
        prog="opencode-synced",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config", help="Sync config file (default: ~/.config/opencode/opencode-synced.json)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # plugins
    p_plugins = subparsers.add_parser("plugins", help="Rewrite plugin references")
    p_plugins.set_defaults(func=_print_help(p_plugins))
    plugins_subparsers = p_plugins.add_subparsers(
        dest="plugins_command", help="Plugin commands"
    )

    p_base = plugins_subparsers.add_parser(
        "base-dir", help="Show the resolved plugin base directory"
    )
    p_base.add_argument("plugins", nargs="*", help="Plugin entries (default: from config)")
    p_base.add_argument(
        "--platform", default=sys.platform, help="Platform (win32, darwin, linux)"
    )
    p_base.set_defaults(func=cmd_plugins_base_dir)

    for name, func, help_text in (
        ("to-repo", cmd_plugins_to_repo, "Convert local plugin paths to sync:// refs"),
        ("to-local", cmd_plugins_to_local, "Convert sync:// refs to local plugin paths"),
    ):
        p_convert = plugins_subparsers.add_parser(name, help=help_text)
        p_convert.add_argument(
            "plugins", nargs="*", help="Plugin entries (default: from config)"
        )
        p_convert.add_argument("--base-dir", help="Plugin base directory (default: resolved)")
        p_convert.add_argument(
            "--platform", default=sys.platform, help="Platform (win32, darwin, linux)"
        )
        p_convert.set_defaults(func=func)

    p_classify = plugins_subparsers.add_parser(
        "classify", help="Show the kind of each plugin entry"
    )
    p_classify.add_argument("plugins", nargs="+", help="Plugin entries")
    p_classify.set_defaults(func=cmd_plugins_classify)

    # skills
    p_skills = subparsers.add_parser("skills", help="Manage the shared skills hub")
    p_skills.set_defaults(func=_print_help(p_skills))
    skills_subparsers = p_skills.add_subparsers(dest="skills_command", help="Skill commands")

    p_link = skills_subparsers.add_parser(
        "link", help="Link tool skill directories to the hub"
    )
    p_link.add_argument("--hub", help="Hub directory (default: ~/.config/opencode/skills)")
    p_link.set_defaults(func=cmd_skills_link)

    return parser


def _print_help(parser: argparse.ArgumentParser):
    def _handler(args):
        parser.print_help()
        sys.exit(1)

    return _handler


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Console output already reports every change
    setup_logging(level=get_log_level(default=logging.WARNING))
    if args.debug:
        set_debug_mode()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
