"""File trees: wire model, flattening and the per-project cache."""

from workspacekit.filetree.cache import FileTreeCache
from workspacekit.filetree.flatten import flatten, iter_files, join_path
from workspacekit.filetree.nodes import FileTreeNode, FlatEntry, MentionFile

__all__ = [
    "FileTreeCache",
    "FileTreeNode",
    "FlatEntry",
    "MentionFile",
    "flatten",
    "iter_files",
    "join_path",
]
