"""Exception types raised by the workspace subsystem.

None of these are fatal: callers log them and leave the cache or registry
in its pre-failure state.
"""

from __future__ import annotations


class WorkspaceError(Exception):
    """Base class for workspacekit errors."""


class FetchTreeFailed(WorkspaceError):
    """Loading a project's file tree failed.

    Raised when the tree-fetch collaborator raises, or when it returns a
    payload that does not validate as a file tree.
    """

    def __init__(self, project_id: str, cause: BaseException | None = None) -> None:
        self.project_id = project_id
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to load file tree for project {project_id!r}{detail}")


class ReadFileFailed(WorkspaceError):
    """Reading a file's content failed."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to read file {path!r}{detail}")


class SessionCreateFailed(WorkspaceError):
    """The session-creation collaborator failed."""

    def __init__(self, session_id: str | None, cause: BaseException | None = None) -> None:
        self.session_id = session_id
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to create session{detail}")


class SessionListFailed(WorkspaceError):
    """The session-listing collaborator failed."""

    def __init__(self, cause: BaseException | None = None) -> None:
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to list sessions{detail}")


class SessionNotFound(WorkspaceError, KeyError):
    """No open session has the requested id."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(session_id)

    def __str__(self) -> str:
        return f"No open session with id {self.session_id!r}"
