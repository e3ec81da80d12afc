"""Skills hub - one canonical skills directory shared by every coding tool.

Each tool keeps its skills in its own directory (~/.claude/skills,
~/.codex/skills, ...). ensure_skill_symlinks() replaces those directories
with symlinks to the hub, first moving any skill the hub does not have yet
into it. When both sides have an entry of the same name the hub copy wins;
the tool's copy survives only in the timestamped backup directory.
"""

from __future__ import annotations

import logging
import os
import stat
import time
from dataclasses import dataclass, field
from pathlib import Path

from opencode_synced.config import HUB_MARKER_FILENAME, HUB_MARKER_TEXT
from opencode_synced.paths import get_skill_target_dirs, get_skills_hub_dir

logger = logging.getLogger(__name__)


class SkillsHubError(Exception):
    """Raised when the skills hub directory itself cannot be created.

    Per-target failures never raise; they are collected in
    HubSyncResult.errors instead.
    """

    pass


@dataclass
class HubSyncResult:
    """Result of linking tool skill directories to the hub."""

    created: list[str] = field(default_factory=list)
    fixed: list[str] = field(default_factory=list)
    merged: list[str] = field(default_factory=list)
    replaced: list[str] = field(default_factory=list)
    migrated: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    entries: list[tuple[int, str]] = field(default_factory=list)  # [(level, message)]

    @property
    def messages(self) -> list[str]:
        return [message for _, message in self.entries]

    @property
    def ok(self) -> bool:
        return not self.errors


def _emit(result: HubSyncResult, level: int, message: str) -> None:
    result.entries.append((level, message))
    logger.log(level, message)


def _record(result: HubSyncResult, bucket: list[str], item: str, message: str) -> None:
    bucket.append(item)
    _emit(result, logging.INFO, message)


def _backup_path(target: Path) -> Path:
    return target.with_name(f"{target.name}.backup.{int(time.time() * 1000)}")


def _write_marker(hub: Path, result: HubSyncResult) -> None:
    marker_path = hub / HUB_MARKER_FILENAME
    try:
        if not marker_path.exists():
            marker_path.write_text(HUB_MARKER_TEXT, encoding="utf-8")
            _emit(result, logging.INFO, f"Created marker file at {marker_path}")
    except OSError as e:
        message = f"Warning: Failed to create marker file: {e}"
        result.warnings.append(message)
        _emit(result, logging.WARNING, message)


def _absorb_entries(target: Path, hub: Path, result: HubSyncResult) -> None:
    """Move entries the hub lacks from *target* into *hub*."""
    for entry in sorted(os.listdir(target)):
        dest = hub / entry
        if os.path.lexists(dest):
            logger.debug(f"Hub already has '{entry}', leaving {target / entry}")
            continue

        os.rename(target / entry, dest)
        _record(
            result,
            result.migrated,
            entry,
            f"Migrated unique skill '{entry}' from {target} to Hub",
        )


def _link_target(target: Path, hub: Path, result: HubSyncResult) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)

    try:
        mode = os.lstat(target).st_mode
    except OSError:
        os.symlink(hub, target)
        _record(
            result, result.created, str(target), f"Created symlink: {target} -> {hub}"
        )
        return

    if stat.S_ISLNK(mode):
        current = os.readlink(target)
        if current == str(hub):
            logger.debug(f"{target} already links to the hub")
            return
        target.unlink()
        os.symlink(hub, target)
        _record(
            result,
            result.fixed,
            str(target),
            f"Fixed symlink: {target} -> {hub} (was {current})",
        )
    elif stat.S_ISDIR(mode):
        _absorb_entries(target, hub, result)

        # Entries the hub already had stay behind in the backup
        backup = _backup_path(target)
        os.rename(target, backup)
        os.symlink(hub, target)
        _record(
            result,
            result.merged,
            str(target),
            f"Merged and linked: {target} -> {hub} (Duplicates backed up at {backup})",
        )
    else:
        target.unlink()
        os.symlink(hub, target)
        _record(
            result,
            result.replaced,
            str(target),
            f"Replaced file with symlink: {target} -> {hub}",
        )


def ensure_skill_symlinks(
    hub_dir: Path | None = None,
    target_dirs: list[Path] | None = None,
) -> HubSyncResult:
    """Make every tool skill directory a symlink to the skills hub.

    Args:
        hub_dir: Hub directory. Defaults to get_skills_hub_dir(). A relative
            path is taken relative to the current directory.
        target_dirs: Directories to link. Defaults to get_skill_target_dirs().

    Returns:
        HubSyncResult with one message per change. A failure on one target
        is recorded in ``errors`` and the remaining targets are still
        processed.

    Raises:
        SkillsHubError: If the hub directory cannot be created.
    """
    hub = Path(hub_dir if hub_dir is not None else get_skills_hub_dir())
    # Symlink targets are resolved against the link directory, not the cwd
    hub = hub.expanduser().absolute()
    targets = target_dirs if target_dirs is not None else get_skill_target_dirs()
    result = HubSyncResult()

    try:
        hub.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SkillsHubError(f"Failed to create skills hub at {hub}: {e}") from e

    _write_marker(hub, result)

    for target in targets:
        try:
            _link_target(target, hub, result)
        except OSError as e:
            message = f"Error processing {target}: {e}"
            result.errors.append(message)
            _emit(result, logging.ERROR, message)

    return result
