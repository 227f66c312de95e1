"""Core algorithms shared by the workspace components."""

from workspacekit.core.sorted_lookup import SearchResult, binary_search, insert_sorted

__all__ = [
    "SearchResult",
    "binary_search",
    "insert_sorted",
]
