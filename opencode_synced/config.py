"""
opencode-synced Configuration Constants

This module centralizes the fixed names, prefixes and directory lists
used throughout the codebase.
"""

# ============================================================
# Portable Plugin References
# ============================================================

# Scheme shared by every portable reference (never a local path)
PORTABLE_SCHEME: str = "sync://"

# Prefix of a portable plugin reference: sync://plugins/<name>
PORTABLE_PREFIX: str = "sync://plugins/"

# Marker for scoped npm packages (@scope/name)
PACKAGE_SCOPE_MARKER: str = "@"

# ============================================================
# Plugin Base Directory Detection
# ============================================================

# Conventional plugin directories, checked in this order
COMMON_PLUGIN_DIRS: tuple[str, ...] = (
    "~/Code/opencode-plugins",
    "~/code/opencode-plugins",
    "~/opencode-plugins",
    "~/Code/plugins",
    "~/code/plugins",
    "~/plugins",
)

# Platform keys accepted in a per-platform pluginBaseDir mapping
# (values of sys.platform)
SUPPORTED_PLATFORMS: frozenset[str] = frozenset(
    {
        "win32",
        "darwin",
        "linux",
    }
)

WINDOWS_PLATFORM: str = "win32"

# ============================================================
# Skills Hub
# ============================================================

# Tool skill directories (relative to the home directory) that are
# replaced by symlinks to the hub
SKILL_TARGET_RELATIVE_DIRS: tuple[tuple[str, ...], ...] = (
    (".claude", "skills"),
    (".codex", "skills"),
    (".gemini", "skills"),
    (".config", "github-copilot", "skills"),
    (".cursor", "skills"),
)

HUB_MARKER_FILENAME: str = "_CENTRAL_HUB_README.txt"

HUB_MARKER_TEXT: str = (
    "This directory is the CENTRAL SKILLS HUB. All changes here reflect across "
    "Opencode, Claude, Codex, Gemini, Copilot, and Cursor.\n"
    "Managed by opencode-synced plugin."
)

# ============================================================
# Files
# ============================================================

CONFIG_FILENAME: str = "opencode-synced.json"

YAML_SUFFIXES: frozenset[str] = frozenset({".yaml", ".yml"})
