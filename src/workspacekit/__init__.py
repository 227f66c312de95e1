"""workspacekit: tabs, cached project file trees and @-mention lookup for a sandbox client."""

__version__ = "0.1.0"

from workspacekit.config import Config, get_config, load_config
from workspacekit.core import SearchResult, binary_search, insert_sorted
from workspacekit.errors import (
    FetchTreeFailed,
    ReadFileFailed,
    SessionCreateFailed,
    SessionListFailed,
    SessionNotFound,
    WorkspaceError,
)
from workspacekit.filetree import (
    FileTreeCache,
    FileTreeNode,
    FlatEntry,
    MentionFile,
    flatten,
    iter_files,
)
from workspacekit.logging import follow_config_reloads, get_logger, reset_logging, setup_logging
from workspacekit.mentions import MentionIndex, MentionPicker, filter_mentions
from workspacekit.protocols import CreatedSession, Project
from workspacekit.session import Session, SessionKind, SessionRegistry
from workspacekit.workspace import Workspace

__all__ = [
    # Main entry point
    "Workspace",
    # Config
    "Config",
    "load_config",
    "get_config",
    # Logging
    "setup_logging",
    "reset_logging",
    "follow_config_reloads",
    "get_logger",
    # Errors
    "WorkspaceError",
    "FetchTreeFailed",
    "ReadFileFailed",
    "SessionCreateFailed",
    "SessionListFailed",
    "SessionNotFound",
    # File trees
    "FileTreeCache",
    "FileTreeNode",
    "FlatEntry",
    "MentionFile",
    "flatten",
    "iter_files",
    # Lookup
    "SearchResult",
    "binary_search",
    "insert_sorted",
    # Mentions
    "MentionIndex",
    "MentionPicker",
    "filter_mentions",
    # Sessions
    "CreatedSession",
    "Project",
    "Session",
    "SessionKind",
    "SessionRegistry",
]
