"""Depth-first flattening of file trees into file lists."""

from __future__ import annotations

from collections.abc import Iterator

from workspacekit.filetree.nodes import FileTreeNode, FlatEntry
from workspacekit.logging import get_logger

log = get_logger("filetree")

DEFAULT_DEPTH_LIMIT = 64


def join_path(base: str, path: str) -> str:
    """Qualify a tree path with a base directory using a single '/'."""
    if not base:
        return path
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


def iter_files(
    root: FileTreeNode,
    base_path: str = "",
    *,
    depth_limit: int = DEFAULT_DEPTH_LIMIT,
) -> Iterator[FlatEntry]:
    """Yield every file under ``root`` in pre-order, children in given order.

    Directories produce no entry of their own. A path seen twice is skipped
    and subtrees below ``depth_limit`` are not entered, so malformed input
    (cycles, runaway nesting) terminates.

    Args:
        root: Tree to walk. Not modified.
        base_path: Prefix joined onto every yielded path; "" keeps tree paths.
        depth_limit: Maximum directory nesting to descend into.
    """
    seen: set[str] = set()
    stack: list[tuple[FileTreeNode, int]] = [(root, 0)]

    while stack:
        node, depth = stack.pop()
        if node.path in seen:
            log.warning("Skipping repeated tree path %s", node.path)
            continue
        seen.add(node.path)

        if not node.is_dir:
            yield FlatEntry(path=join_path(base_path, node.path), name=node.name)
            continue

        if depth >= depth_limit:
            log.warning("Tree deeper than %d levels at %s; not descending", depth_limit, node.path)
            continue

        # Reversed so the first child is popped first
        stack.extend((child, depth + 1) for child in reversed(tuple(node.iter_children())))


def flatten(
    root: FileTreeNode,
    base_path: str = "",
    *,
    depth_limit: int = DEFAULT_DEPTH_LIMIT,
) -> list[FlatEntry]:
    """Flatten ``root`` into its ordered list of file entries.

    Pure: flattening the same tree twice gives equal lists.
    """
    return list(iter_files(root, base_path, depth_limit=depth_limit))
