"""Configuration file loading and caching.

Handles:
- YAML file parsing
- Environment variable overrides
- Config caching with reload support
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from workspacekit.config.merge import merge_configs
from workspacekit.config.paths import get_config_paths
from workspacekit.config.schema import (
    Config,
    LoggingConfig,
    MentionConfig,
    SessionConfig,
    TreeConfig,
)

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("workspacekit.config")

_cached_config: Config | None = None

_reload_callbacks: list[Callable[[Config], None]] = []

_KNOWN_SECTIONS = {"tree", "sessions", "mentions", "logging"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build a config layer from WSK_* environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("WSK_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    depth = os.environ.get("WSK_TREE_DEPTH")
    if depth:
        try:
            overrides.setdefault("tree", {})["max_depth"] = int(depth)
        except ValueError:
            _log.warning("Ignoring non-integer WSK_TREE_DEPTH=%r", depth)

    return overrides


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass."""
    tree_data = _section(data, "tree")
    tree = TreeConfig(
        max_depth=int(tree_data.get("max_depth", 3)),
        flatten_depth_limit=int(tree_data.get("flatten_depth_limit", 64)),
    )

    session_data = _section(data, "sessions")
    sessions = SessionConfig(
        placeholder=str(session_data.get("placeholder", "Loading...")),
        start_with_chat=bool(session_data.get("start_with_chat", True)),
        default_chat_title=str(session_data.get("default_chat_title", "new session")),
    )

    mention_data = _section(data, "mentions")
    max_results = mention_data.get("max_results")
    mentions = MentionConfig(
        max_results=int(max_results) if max_results is not None else None,
    )

    log_data = _section(data, "logging")
    verbose = log_data.get("verbose")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=int(verbose) if verbose is not None else None,
        file=log_data.get("file"),
    )

    extra = {k: v for k, v in data.items() if k not in _KNOWN_SECTIONS}

    return Config(
        tree=tree,
        sessions=sessions,
        mentions=mentions,
        logging=logging_config,
        extra=extra,
    )


def load_config(project_root: str | None = None, reload: bool = False) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Project config ($project_root/.wsk/config.yaml)
    3. User config
    4. System config

    Args:
        project_root: Project directory for project-level config.
        reload: Force reload even if cached.

    Returns:
        Merged Config object.
    """
    global _cached_config

    if _cached_config is not None and not reload and project_root is None:
        return _cached_config

    layers: list[dict[str, Any]] = []
    for path in get_config_paths(project_root):
        layer = load_yaml_file(path)
        if layer:
            _log.debug("Loaded config from %s", path)
            layers.append(layer)

    env_layer = env_overrides()
    if env_layer:
        layers.append(env_layer)

    config = dict_to_config(merge_configs(*layers))

    # Cache only global config (no project_root)
    if project_root is None:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it on first use."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config."""
    global _cached_config
    _cached_config = None


def reload_config(project_root: str | None = None) -> Config:
    """Reload config from files and notify callbacks."""
    config = load_config(project_root=project_root, reload=True)

    for callback in _reload_callbacks:
        try:
            callback(config)
        except Exception as e:
            _log.warning("Config reload callback error: %s", e)

    return config


def on_config_reload(callback: Callable[[Config], None]) -> Callable[[], None]:
    """Register a callback to be called when config is reloaded.

    Returns:
        A function to unregister the callback.
    """
    _reload_callbacks.append(callback)

    def unregister() -> None:
        if callback in _reload_callbacks:
            _reload_callbacks.remove(callback)

    return unregister
