"""Collaborator protocols and the project record.

The sandbox transport lives outside this package; the workspace only
depends on these narrow async callables.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from workspacekit.filetree.nodes import FileTreeNode


@dataclass(frozen=True, slots=True)
class Project:
    """A named root directory in the sandbox with its own file tree."""

    id: str
    directory: str


@runtime_checkable
class TreeFetcher(Protocol):
    """Fetches the file tree rooted at ``directory``.

    May return a FileTreeNode or the JSON-derived mapping it came from.
    """

    async def __call__(
        self, directory: str, max_depth: int
    ) -> FileTreeNode | Mapping[str, Any]: ...


@runtime_checkable
class FileReader(Protocol):
    """Reads the text content of the file at ``path``."""

    async def __call__(self, path: str) -> str: ...


@dataclass(frozen=True, slots=True)
class CreatedSession:
    """A chat session as returned by the sandbox backend."""

    id: str
    title: str | None = None


@runtime_checkable
class SessionCreator(Protocol):
    """Creates a chat session on the sandbox backend."""

    async def __call__(self) -> CreatedSession: ...


@runtime_checkable
class SessionLister(Protocol):
    """Lists the chat sessions that already exist on the sandbox backend."""

    async def __call__(self) -> Sequence[CreatedSession]: ...
