"""Configuration management for workspacekit.

Hierarchical YAML configuration with system, user and project layers plus
WSK_* environment overrides.

Example usage:
    from workspacekit.config import load_config

    config = load_config(project_root="/path/to/project")
    print(config.tree.max_depth)
"""

from workspacekit.config.loader import (
    get_config,
    load_config,
    on_config_reload,
    reload_config,
    reset_config,
)
from workspacekit.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_system_config_path,
    get_user_config_path,
)
from workspacekit.config.schema import (
    Config,
    LoggingConfig,
    MentionConfig,
    SessionConfig,
    TreeConfig,
)

__all__ = [
    "Config",
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    "on_config_reload",
    "LoggingConfig",
    "MentionConfig",
    "SessionConfig",
    "TreeConfig",
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
    "get_project_config_path",
]
