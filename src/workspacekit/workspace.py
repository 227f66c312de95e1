"""Workspace: one explicitly constructed set of tabs, trees and mentions.

Nothing here is a module-level singleton; create as many independent
workspaces as needed, each with its own collaborators.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING

from workspacekit.config.schema import Config
from workspacekit.errors import FetchTreeFailed
from workspacekit.filetree.cache import FileTreeCache
from workspacekit.filetree.nodes import MentionFile
from workspacekit.logging import get_logger
from workspacekit.mentions.index import MentionIndex
from workspacekit.mentions.picker import MentionPicker
from workspacekit.session.registry import SessionRegistry

if TYPE_CHECKING:
    from workspacekit.filetree.nodes import FileTreeNode
    from workspacekit.protocols import (
        FileReader,
        Project,
        SessionCreator,
        SessionLister,
        TreeFetcher,
    )
    from workspacekit.session.types import Session

log = get_logger("workspace")


class Workspace:
    """Ties the tree cache, mention index and session registry together.

    The project list is owned by an external store; ``set_projects`` is
    called whenever it changes and loads or evicts trees accordingly.
    """

    def __init__(
        self,
        fetch_tree: TreeFetcher,
        read_file: FileReader,
        create_session: SessionCreator | None = None,
        *,
        list_sessions: SessionLister | None = None,
        config: Config | None = None,
    ) -> None:
        self._config = config or Config()
        self._projects: list[Project] = []
        self.trees = FileTreeCache(fetch_tree, max_depth=self._config.tree.max_depth)
        self.mentions = MentionIndex(
            self.trees,
            depth_limit=self._config.tree.flatten_depth_limit,
            max_results=self._config.mentions.max_results,
        )
        self.sessions = SessionRegistry(
            read_file,
            create_session,
            list_sessions=list_sessions,
            config=self._config.sessions,
        )

    @property
    def config(self) -> Config:
        return self._config

    @property
    def projects(self) -> list[Project]:
        return list(self._projects)

    async def set_projects(self, projects: Iterable[Project]) -> list[FetchTreeFailed]:
        """Adopt a new project list.

        Trees of projects no longer listed are evicted; uncached projects
        are loaded concurrently. A failed load does not stop the others.

        Returns:
            The failures, in project order.
        """
        self._projects = list(projects)
        listed = {p.id for p in self._projects}
        for project_id in self.trees.known_ids():
            if project_id not in listed:
                self.trees.evict(project_id)
        self.mentions.set_projects(self._projects)

        pending = [p for p in self._projects if p.id not in self.trees]
        if not pending:
            return []
        results = await asyncio.gather(
            *(self.trees.ensure_loaded(p) for p in pending),
            return_exceptions=True,
        )
        failures: list[FetchTreeFailed] = []
        for result in results:
            if isinstance(result, FetchTreeFailed):
                failures.append(result)
            elif isinstance(result, BaseException):
                raise result
        if failures:
            log.warning("%d of %d project trees failed to load", len(failures), len(pending))
        return failures

    def remove_project(self, project_id: str) -> bool:
        """Forget a deleted project and its cached tree."""
        before = len(self._projects)
        self._projects = [p for p in self._projects if p.id != project_id]
        self.trees.evict(project_id)
        self.mentions.set_projects(self._projects)
        return len(self._projects) != before

    async def refresh_project(self, project_id: str) -> FileTreeNode | None:
        """Refetch one listed project's tree."""
        for project in self._projects:
            if project.id == project_id:
                return await self.trees.refresh(project)
        raise KeyError(project_id)

    @property
    def mention_files(self) -> list[MentionFile]:
        return self.mentions.files

    def search_mentions(self, query: str) -> list[MentionFile]:
        return self.mentions.search(query)

    def find_file(self, path: str) -> MentionFile | None:
        return self.mentions.find(path)

    def mention_picker(self) -> MentionPicker:
        """A fresh picker bound to this workspace's mention index."""
        return MentionPicker(self.mentions)

    def open_file(self, file: MentionFile | str) -> Session:
        """Open (or activate) the tab for a file and start loading it."""
        if isinstance(file, MentionFile):
            return self.sessions.open_file(file.path, title=file.name)
        return self.sessions.open_file(file)

    async def load_sessions(self) -> list[Session]:
        """Open the backend's existing chat sessions as tabs."""
        return await self.sessions.load_sessions()

    async def aclose(self) -> None:
        await self.sessions.aclose()
        await self.trees.aclose()
