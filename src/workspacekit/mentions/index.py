"""Searchable flat list of files across all cached project trees."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from workspacekit.core.sorted_lookup import binary_search
from workspacekit.filetree.flatten import DEFAULT_DEPTH_LIMIT, iter_files, join_path
from workspacekit.filetree.nodes import MentionFile
from workspacekit.logging import get_logger

if TYPE_CHECKING:
    from workspacekit.filetree.cache import FileTreeCache
    from workspacekit.protocols import Project

log = get_logger("mentions")


def _path_key(file: MentionFile) -> str:
    return file.path


def build_mention_files(
    projects: Iterable[Project],
    cache: FileTreeCache,
    *,
    depth_limit: int = DEFAULT_DEPTH_LIMIT,
) -> list[MentionFile]:
    """Flatten every project's cached tree into mention entries.

    Projects are visited in the given order; projects without a cached
    tree contribute nothing.
    """
    files: list[MentionFile] = []
    for project in projects:
        tree = cache.get_tree(project.id)
        if tree is None:
            continue
        for entry in iter_files(tree, depth_limit=depth_limit):
            files.append(
                MentionFile(
                    id=f"{project.id}:{entry.path}",
                    name=entry.name,
                    path=join_path(project.directory, entry.path),
                    project_id=project.id,
                )
            )
    return files


def filter_mentions(
    files: Sequence[MentionFile],
    query: str,
    *,
    limit: int | None = None,
) -> list[MentionFile]:
    """Keep files whose name or path contains ``query``, ignoring case.

    Relative order is preserved and an empty query keeps everything.
    """
    needle = query.casefold()
    matches = [
        file
        for file in files
        if needle in file.name.casefold() or needle in file.path.casefold()
    ]
    if limit is not None:
        return matches[:limit]
    return matches


class MentionIndex:
    """Derived mention list for a project list and a tree cache.

    The list is rebuilt lazily whenever the project list or the cache
    contents change.
    """

    def __init__(
        self,
        cache: FileTreeCache,
        projects: Iterable[Project] = (),
        *,
        depth_limit: int = DEFAULT_DEPTH_LIMIT,
        max_results: int | None = None,
    ) -> None:
        self._cache = cache
        self._projects: tuple[Project, ...] = tuple(projects)
        self._depth_limit = depth_limit
        self._max_results = max_results
        self._files: list[MentionFile] = []
        self._by_path: list[MentionFile] = []
        self._built_for: tuple[tuple[Project, ...], int] | None = None

    @property
    def projects(self) -> tuple[Project, ...]:
        return self._projects

    def set_projects(self, projects: Iterable[Project]) -> None:
        self._projects = tuple(projects)

    @property
    def files(self) -> list[MentionFile]:
        """All mentionable files in project order, then tree order."""
        self._refresh()
        return list(self._files)

    def search(self, query: str) -> list[MentionFile]:
        self._refresh()
        return filter_mentions(self._files, query, limit=self._max_results)

    def find(self, path: str) -> MentionFile | None:
        """Look up a file by its fully qualified path.

        When projects share a directory, the entry from the project listed
        first is returned.
        """
        self._refresh()
        result = binary_search(self._by_path, path, _path_key)
        return self._by_path[result.index] if result.found else None

    def __len__(self) -> int:
        self._refresh()
        return len(self._files)

    def _refresh(self) -> None:
        stamp = (self._projects, self._cache.version)
        if stamp == self._built_for:
            return
        self._files = build_mention_files(
            self._projects, self._cache, depth_limit=self._depth_limit
        )
        # Stable: for a path shared by two projects the earlier project wins
        self._by_path = sorted(self._files, key=_path_key)
        self._built_for = stamp
        log.debug("Rebuilt mention index: %d files", len(self._files))
