"""Configuration schema dataclasses for workspacekit.

Defines the structure of configuration at all levels (system, user, project).
All fields have defaults so partial configs merge together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class TreeConfig:
    """File-tree cache configuration.

    Example config.yaml:
        tree:
          max_depth: 3
          flatten_depth_limit: 64
    """

    max_depth: int = 3  # Depth requested from the tree-fetch collaborator
    flatten_depth_limit: int = 64  # Subtrees deeper than this are not flattened


@dataclass
class SessionConfig:
    """Session/tab registry configuration."""

    placeholder: str = "Loading..."  # Content shown while a file read is pending
    start_with_chat: bool = True  # Open an ephemeral chat tab on startup
    default_chat_title: str = "new session"


@dataclass
class MentionConfig:
    """@-mention lookup configuration."""

    max_results: int | None = None  # None = unlimited


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object.

    Contains all configuration sections with sensible defaults.
    """

    tree: TreeConfig = field(default_factory=TreeConfig)
    sessions: SessionConfig = field(default_factory=SessionConfig)
    mentions: MentionConfig = field(default_factory=MentionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)  # Unknown keys
