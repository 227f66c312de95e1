"""Config file locations.

Layers, lowest priority first:
- System: /etc/workspacekit/ (%PROGRAMDATA%\\workspacekit on Windows)
- User: $XDG_CONFIG_HOME/workspacekit/, ~/.config/workspacekit/ or ~/.wsk/
  (%APPDATA%\\workspacekit on Windows)
- Project: $project_root/.wsk/
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
APP_NAME = "workspacekit"
SHORT_NAME = ".wsk"


def _windows_dir(env_var: str) -> Path | None:
    base = os.environ.get(env_var)
    if not base:
        return None
    return Path(base) / APP_NAME / CONFIG_FILENAME


def get_system_config_path() -> Path | None:
    """Get system-level config path (may not exist)."""
    if sys.platform == "win32":
        return _windows_dir("PROGRAMDATA")
    return Path("/etc") / APP_NAME / CONFIG_FILENAME


def get_user_config_path() -> Path | None:
    """Get user-level config path (may not exist).

    On Unix, XDG_CONFIG_HOME wins, then ~/.config if that directory exists,
    then ~/.wsk.
    """
    if sys.platform == "win32":
        return _windows_dir("APPDATA")

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME / CONFIG_FILENAME

    home = Path.home()
    if (home / ".config").exists():
        return home / ".config" / APP_NAME / CONFIG_FILENAME
    return home / SHORT_NAME / CONFIG_FILENAME


def get_project_config_path(project_root: str | Path) -> Path:
    """Get project-level config path (may not exist)."""
    return Path(project_root) / SHORT_NAME / CONFIG_FILENAME


def get_config_paths(project_root: str | Path | None = None) -> list[Path]:
    """Get all config paths in merge order: system, user, project."""
    candidates = [get_system_config_path(), get_user_config_path()]
    if project_root:
        candidates.append(get_project_config_path(project_root))
    return [path for path in candidates if path is not None]
