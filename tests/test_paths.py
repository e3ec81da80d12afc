"""Tests for opencode_synced.paths module."""

import ntpath
import os
import posixpath
from pathlib import Path
from unittest.mock import patch

from opencode_synced.paths import (
    expand_home,
    get_opencode_config_dir,
    get_skill_target_dirs,
    get_skills_hub_dir,
    get_sync_config_path,
    normalize_path,
    path_module,
)

# ============================================================
# Home expansion / normalization
# ============================================================


class TestExpandHome:
    """Test expand_home() function."""

    def test_leading_tilde(self):
        assert expand_home("~/plugins", "/home/user") == "/home/user/plugins"

    def test_bare_tilde(self):
        assert expand_home("~", "/home/user") == "/home/user"

    def test_tilde_not_at_start(self):
        assert expand_home("/opt/~/plugins", "/home/user") == "/opt/~/plugins"

    def test_empty_home(self):
        """Empty home turns ~/x into /x."""
        assert expand_home("~/plugins/a", "") == "/plugins/a"


class TestNormalizePath:
    """Test normalize_path() function."""

    def test_posix_converts_backslashes(self):
        assert normalize_path("\\srv\\plugins\\a", "", "linux") == "/srv/plugins/a"

    def test_windows_converts_slashes(self):
        result = normalize_path("C:/Users/u/plugins", "", "win32")
        assert result == "C:\\Users\\u\\plugins"

    def test_expands_home_first(self):
        result = normalize_path("~/plugins", "C:\\Users\\u", "win32")
        assert result == "C:\\Users\\u\\plugins"

    def test_dot_segments_kept(self):
        assert normalize_path("/a/./b/../c", "", "darwin") == "/a/./b/../c"


class TestPathModule:
    def test_flavours(self):
        assert path_module("win32") is ntpath
        assert path_module("linux") is posixpath
        assert path_module("darwin") is posixpath


# ============================================================
# Standard locations
# ============================================================


class TestGetOpencodeConfigDir:
    """Test get_opencode_config_dir() function."""

    def test_default(self):
        """Default should be ~/.config/opencode."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("OPENCODE_SYNCED_CONFIG_DIR", None)
            result = get_opencode_config_dir()
            assert result == str(Path.home() / ".config" / "opencode")

    def test_env_override(self):
        """OPENCODE_SYNCED_CONFIG_DIR should override default."""
        with patch.dict(os.environ, {"OPENCODE_SYNCED_CONFIG_DIR": "/tmp/oc"}):
            assert get_opencode_config_dir() == "/tmp/oc"


class TestGetSkillsHubDir:
    """Test get_skills_hub_dir() function."""

    def test_follows_config_dir(self):
        with patch.dict(os.environ, {"OPENCODE_SYNCED_CONFIG_DIR": "/tmp/oc"}):
            assert get_skills_hub_dir() == "/tmp/oc/skills"

    def test_env_override(self):
        with patch.dict(os.environ, {"OPENCODE_SYNCED_SKILLS_HUB": "/tmp/hub"}):
            assert get_skills_hub_dir() == "/tmp/hub"

    def test_env_override_expands_vars(self):
        with patch.dict(
            os.environ,
            {"OPENCODE_SYNCED_SKILLS_HUB": "$HUB_ROOT/skills", "HUB_ROOT": "/tmp/x"},
        ):
            assert get_skills_hub_dir() == "/tmp/x/skills"


class TestGetSyncConfigPath:
    def test_default(self):
        with patch.dict(os.environ, {"OPENCODE_SYNCED_CONFIG_DIR": "/tmp/oc"}):
            assert get_sync_config_path() == "/tmp/oc/opencode-synced.json"

    def test_env_override(self):
        with patch.dict(os.environ, {"OPENCODE_SYNCED_CONFIG": "/tmp/sync.yaml"}):
            assert get_sync_config_path() == "/tmp/sync.yaml"


class TestGetSkillTargetDirs:
    def test_targets_under_home(self, tmp_path):
        result = get_skill_target_dirs(tmp_path)
        assert result == [
            tmp_path / ".claude" / "skills",
            tmp_path / ".codex" / "skills",
            tmp_path / ".gemini" / "skills",
            tmp_path / ".config" / "github-copilot" / "skills",
            tmp_path / ".cursor" / "skills",
        ]
