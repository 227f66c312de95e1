"""Per-project cache of remote file trees.

Each project id maps to the last tree fetched for it. Loads are shared:
while a fetch for a project is in flight, every caller awaits that same
task. Every fetch carries a request token; only the fetch holding the
project's current token may write the entry, so a refetch or eviction
turns any older in-flight fetch into a no-op.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import TYPE_CHECKING

from workspacekit.errors import FetchTreeFailed
from workspacekit.filetree.nodes import FileTreeNode
from workspacekit.logging import VERBOSE, get_logger

if TYPE_CHECKING:
    from workspacekit.protocols import Project, TreeFetcher

log = get_logger("filetree")


class FileTreeCache:
    """Lazily loaded project id -> FileTreeNode mapping.

    Entries are absent until the first successful fetch, are never
    invalidated automatically, and are dropped by ``evict`` when the
    project goes away.
    """

    def __init__(self, fetch_tree: TreeFetcher, *, max_depth: int = 3) -> None:
        self._fetch_tree = fetch_tree
        self._max_depth = max_depth
        self._trees: dict[str, FileTreeNode] = {}
        self._inflight: dict[str, asyncio.Task[FileTreeNode | None]] = {}
        self._tokens = itertools.count(1)
        self._current_token: dict[str, int] = {}
        self._errors: dict[str, FetchTreeFailed] = {}
        self._version = 0

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def version(self) -> int:
        """Counter bumped on every entry write or removal."""
        return self._version

    def get_tree(self, project_id: str) -> FileTreeNode | None:
        """Return the cached tree, or None if never loaded or load failed."""
        return self._trees.get(project_id)

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._trees

    def project_ids(self) -> list[str]:
        return list(self._trees)

    def known_ids(self) -> set[str]:
        """Ids with a cached tree or a fetch in flight."""
        return set(self._trees) | set(self._inflight)

    def is_loading(self, project_id: str) -> bool:
        return project_id in self._inflight

    def last_error(self, project_id: str) -> FetchTreeFailed | None:
        """The failure of the latest fetch for the project, if it failed."""
        return self._errors.get(project_id)

    async def ensure_loaded(self, project: Project) -> FileTreeNode | None:
        """Load the project's tree unless it is cached or already loading.

        Concurrent callers for the same uncached project share one fetch.

        Returns:
            The cached or freshly loaded tree; None if the project was
            evicted while the fetch was in flight.

        Raises:
            FetchTreeFailed: If the fetch failed. The entry stays absent and
                the next call retries.
        """
        tree = self._trees.get(project.id)
        if tree is not None:
            return tree
        task = self._inflight.get(project.id)
        if task is None:
            task = self._start_fetch(project)
        else:
            log.debug("Joining in-flight tree fetch for %s", project.id)
        return await asyncio.shield(task)

    async def refresh(self, project: Project) -> FileTreeNode | None:
        """Force a refetch, superseding any fetch already in flight."""
        return await asyncio.shield(self._start_fetch(project))

    def evict(self, project_id: str) -> bool:
        """Drop the project's entry and invalidate any in-flight fetch.

        Returns:
            True if a cached tree was removed.
        """
        self._current_token.pop(project_id, None)
        self._inflight.pop(project_id, None)
        self._errors.pop(project_id, None)
        if self._trees.pop(project_id, None) is None:
            return False
        self._version += 1
        log.log(VERBOSE, "Evicted file tree for %s", project_id)
        return True

    async def aclose(self) -> None:
        """Cancel in-flight fetches."""
        tasks = list(self._inflight.values())
        self._inflight.clear()
        self._current_token.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _start_fetch(self, project: Project) -> asyncio.Task[FileTreeNode | None]:
        token = next(self._tokens)
        self._current_token[project.id] = token
        task = asyncio.create_task(self._fetch(project, token))
        task.add_done_callback(_consume_exception)
        self._inflight[project.id] = task
        log.debug("Fetching file tree for %s (%s, depth %d)", project.id, project.directory, self._max_depth)
        return task

    def _is_current(self, project_id: str, token: int) -> bool:
        return self._current_token.get(project_id) == token

    async def _fetch(self, project: Project, token: int) -> FileTreeNode | None:
        try:
            payload = await self._fetch_tree(project.directory, self._max_depth)
            tree = FileTreeNode.from_payload(payload)
        except Exception as exc:
            if not self._is_current(project.id, token):
                log.debug("Ignoring failure of superseded tree fetch for %s", project.id)
                return await self._follow(project.id)
            self._inflight.pop(project.id, None)
            error = FetchTreeFailed(project.id, exc)
            self._errors[project.id] = error
            log.warning("Failed to load file tree for project %s: %s", project.id, exc)
            raise error from exc

        if not self._is_current(project.id, token):
            log.debug("Discarding stale file tree for %s", project.id)
            return await self._follow(project.id)

        self._inflight.pop(project.id, None)
        self._errors.pop(project.id, None)
        self._trees[project.id] = tree
        self._version += 1
        log.log(VERBOSE, "Cached file tree for %s", project.id)
        return tree

    async def _follow(self, project_id: str) -> FileTreeNode | None:
        # A superseded fetch hands its awaiters the newer result
        newer = self._inflight.get(project_id)
        if newer is not None:
            return await asyncio.shield(newer)
        return self._trees.get(project_id)


def _consume_exception(task: asyncio.Task[FileTreeNode | None]) -> None:
    # Marks the exception retrieved when no awaiter is left
    if not task.cancelled():
        task.exception()
