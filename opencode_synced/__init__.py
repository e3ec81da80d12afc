"""opencode-synced: portable plugin paths and a shared skills hub."""

__version__ = "0.1.0"
