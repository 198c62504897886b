"""
Configuration for conversation recovery.

Holds the key-matching tables used by the scanner, well-known key and table
names, and OS-specific default locations of Cursor's storage directories.
Scanner settings can be overridden through environment variables.
"""

import os
import platform
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

ITEM_TABLE = "ItemTable"
DISK_KV_TABLE = "cursorDiskKV"

COMPOSER_DATA_KEY = "composer.composerData"
CONVERSATION_KEY = "conversation"
PROMPTS_KEY = "aiService.prompts"
GENERATIONS_KEY = "aiService.generations"

# Lowercased substrings marking an ItemTable key as conversation-relevant
DEFAULT_KEY_SUBSTRINGS: Dict[str, str] = {
    "aiservice.generations": "relevant",
    "aiservice.prompts": "relevant",
    "composer.composerdata": "relevant",
    "composerdata": "relevant",
    "chat": "relevant",
    "conversation": "relevant",
}

# LIKE patterns applied to cursorDiskKV, in priority order
DEFAULT_FALLBACK_PATTERNS: List[str] = [
    "aiService.%",
    "composer%",
    "%chat%",
    "%conversation%",
]

ALLOWED_SUFFIXES = (".vscdb", ".vscdb.backup")

KEY_SUBSTRINGS_ENV = "VSCDB_RECOVER_KEY_SUBSTRINGS"
FALLBACK_PATTERNS_ENV = "VSCDB_RECOVER_FALLBACK_PATTERNS"
MAX_UPLOAD_MB_ENV = "VSCDB_RECOVER_MAX_UPLOAD_MB"
DEFAULT_MAX_UPLOAD_MB = 512


class ScannerSettings(BaseModel):
    """Key-matching configuration handed to the table scanner."""

    key_substrings: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_KEY_SUBSTRINGS)
    )
    fallback_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FALLBACK_PATTERNS)
    )


def _split_env_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_scanner_settings(environ: Optional[Dict[str, str]] = None) -> ScannerSettings:
    """
    Build scanner settings, applying environment overrides.

    Parameters
    ----------
    environ : Dict[str, str], optional
        Environment mapping to read from. Defaults to ``os.environ``.

    Returns
    -------
    ScannerSettings
        Defaults, with ``VSCDB_RECOVER_KEY_SUBSTRINGS`` and
        ``VSCDB_RECOVER_FALLBACK_PATTERNS`` (comma-separated) replacing the
        corresponding tables when set
    """
    if environ is None:
        environ = os.environ

    settings = ScannerSettings()

    substrings = _split_env_list(environ.get(KEY_SUBSTRINGS_ENV, ""))
    if substrings:
        settings.key_substrings = {item.lower(): "relevant" for item in substrings}

    patterns = _split_env_list(environ.get(FALLBACK_PATTERNS_ENV, ""))
    if patterns:
        settings.fallback_patterns = patterns

    return settings


def get_max_upload_bytes() -> int:
    """Upload size limit for the HTTP API, in bytes."""
    try:
        megabytes = int(os.getenv(MAX_UPLOAD_MB_ENV, DEFAULT_MAX_UPLOAD_MB))
    except ValueError:
        megabytes = DEFAULT_MAX_UPLOAD_MB
    return megabytes * 1024 * 1024


def get_cursor_user_path() -> Path:
    """
    Get Cursor's ``User`` directory for the current operating system.

    Returns
    -------
    Path
        ``~/Library/Application Support/Cursor/User`` on macOS,
        ``%APPDATA%/Cursor/User`` on Windows, ``~/.config/Cursor/User`` elsewhere
    """
    system = platform.system()
    home = Path.home()

    if system == "Darwin":
        return home / "Library" / "Application Support" / "Cursor" / "User"
    if system == "Windows":
        appdata = os.environ.get("APPDATA") or str(home / "AppData" / "Roaming")
        return Path(appdata) / "Cursor" / "User"
    return home / ".config" / "Cursor" / "User"


def get_cursor_global_storage_path() -> Path:
    """Path to the global ``state.vscdb`` file."""
    return get_cursor_user_path() / "globalStorage" / "state.vscdb"


def get_cursor_workspace_storage_path() -> Path:
    """Directory holding one ``<hash>/state.vscdb`` per workspace."""
    return get_cursor_user_path() / "workspaceStorage"
