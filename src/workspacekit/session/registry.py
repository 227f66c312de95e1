"""Ordered registry of open sessions with an active-tab pointer.

File tabs are opened in a pending state and filled in when the file-read
collaborator resolves. Each read carries a token that is stored on the
pending tab; a result is applied only if the tab is still open and still
waiting on that token, so closing or reopening a tab makes any older
read a no-op.
"""

from __future__ import annotations

import asyncio
import itertools
import posixpath
import uuid
from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING

from workspacekit.config.schema import SessionConfig
from workspacekit.errors import (
    ReadFileFailed,
    SessionCreateFailed,
    SessionListFailed,
    SessionNotFound,
    WorkspaceError,
)
from workspacekit.logging import VERBOSE, get_logger
from workspacekit.session.types import Session, SessionKind

if TYPE_CHECKING:
    from workspacekit.protocols import CreatedSession, FileReader, SessionCreator, SessionLister

log = get_logger("session")

ChangeListener = Callable[["SessionRegistry"], None]


class SessionRegistry:
    """Owns the open tabs, their order and which one is active.

    Invariants: at most one session per id, and ``active_id`` is either
    None or the id of an open session. Without a config no initial chat
    tab is opened.
    """

    def __init__(
        self,
        read_file: FileReader | None = None,
        create_session: SessionCreator | None = None,
        *,
        list_sessions: SessionLister | None = None,
        config: SessionConfig | None = None,
    ) -> None:
        self._read_file = read_file
        self._create_session = create_session
        self._list_sessions = list_sessions
        self._config = config or SessionConfig(start_with_chat=False)
        self._sessions: list[Session] = []
        self._active_id: str | None = None
        self._tokens = itertools.count(1)
        self._reads: set[asyncio.Task[None]] = set()
        self._errors: dict[str, ReadFileFailed] = {}
        self._listeners: list[ChangeListener] = []

        if self._config.start_with_chat:
            initial = self._ephemeral_chat()
            self._sessions.append(initial)
            self._active_id = initial.id

    # -- queries -----------------------------------------------------------

    @property
    def sessions(self) -> list[Session]:
        """Open sessions in tab order."""
        return list(self._sessions)

    @property
    def active_id(self) -> str | None:
        return self._active_id

    @property
    def active(self) -> Session | None:
        if self._active_id is None:
            return None
        return self.get(self._active_id)

    @property
    def placeholder(self) -> str:
        return self._config.placeholder

    def get(self, session_id: str) -> Session | None:
        index = self._index_of(session_id)
        return None if index is None else self._sessions[index]

    def __contains__(self, session_id: object) -> bool:
        return any(s.id == session_id for s in self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def last_error(self, path: str) -> ReadFileFailed | None:
        """The failure of the latest read for a still-pending file tab."""
        return self._errors.get(path)

    # -- lifecycle -----------------------------------------------------------

    def open(self, session: Session) -> Session:
        """Open ``session`` as a new last tab, or activate the existing one.

        Returns:
            The session now held by the registry under that id.
        """
        existing = self.get(session.id)
        if existing is not None:
            self.select(existing.id)
            return existing
        self._sessions.append(session)
        self._active_id = session.id
        log.log(VERBOSE, "Opened %s tab %s", session.kind.value, session.id)
        self._notify()
        return session

    def open_file(self, path: str, title: str | None = None) -> Session:
        """Open a tab for the file at ``path`` and start reading it.

        An already-open tab is only activated; its read is not re-issued
        (use ``reload_file`` to retry a failed read).
        """
        existing = self.get(path)
        if existing is not None:
            self.select(existing.id)
            return existing
        if self._read_file is None:
            raise WorkspaceError("No file reader configured")

        token = next(self._tokens)
        session = Session(
            id=path,
            title=title or _basename(path),
            kind=SessionKind.FILE,
            file_content=self._config.placeholder,
            file_path=path,
            read_token=token,
        )
        self.open(session)
        self._start_read(path, token)
        return session

    def reload_file(self, path: str) -> Session:
        """Re-request the content of an open file tab.

        The tab goes back to pending and any earlier read for it is ignored.

        Raises:
            SessionNotFound: If no file tab for ``path`` is open.
        """
        session = self.get(path)
        if session is None or session.kind is not SessionKind.FILE:
            raise SessionNotFound(path)
        if self._read_file is None:
            raise WorkspaceError("No file reader configured")

        token = next(self._tokens)
        pending = replace(session, file_content=self._config.placeholder, read_token=token)
        self._replace(path, pending)
        self._errors.pop(path, None)
        self._notify()
        self._start_read(path, token)
        return pending

    def deliver_file(self, path: str, content: str) -> bool:
        """Apply content that arrived for ``path`` outside a tracked read.

        Only a still-open, still-pending tab is updated.

        Returns:
            True if a tab was updated.
        """
        session = self.get(path)
        if session is None or not session.is_pending:
            log.debug("Dropping delivered content for %s: no pending tab", path)
            return False
        return self._apply(path, session.read_token, content)

    def select(self, session_id: str) -> None:
        """Make ``session_id`` the active tab.

        Raises:
            SessionNotFound: If no such session is open.
        """
        if session_id not in self:
            raise SessionNotFound(session_id)
        if self._active_id == session_id:
            return
        self._active_id = session_id
        self._notify()

    def close(self, session_id: str) -> bool:
        """Close a tab.

        If it was active, the tab that takes its position becomes active
        (the right neighbour), or the new last tab when the closed one was
        last, or nothing when no tabs remain.

        Returns:
            True if a tab was closed, False if none had that id.
        """
        index = self._index_of(session_id)
        if index is None:
            return False
        del self._sessions[index]
        self._errors.pop(session_id, None)
        if self._active_id == session_id:
            if self._sessions:
                self._active_id = self._sessions[min(index, len(self._sessions) - 1)].id
            else:
                self._active_id = None
        log.log(VERBOSE, "Closed tab %s", session_id)
        self._notify()
        return True

    def new_chat(self, title: str | None = None) -> Session:
        """Open a fresh ephemeral chat tab."""
        return self.open(self._ephemeral_chat(title))

    async def create_chat(self) -> Session:
        """Create a chat session on the backend and open it as a tab.

        Raises:
            SessionCreateFailed: If the backend call fails.
        """
        created = await self._create_backend_session(None)
        session = Session(
            id=created.id,
            title=created.title or self._config.default_chat_title,
            kind=SessionKind.CHAT,
        )
        return self.open(session)

    async def load_sessions(self) -> list[Session]:
        """Open the chat sessions that already exist on the backend.

        Listed sessions that are not open yet are appended in backend order;
        open tabs, ephemeral drafts included, are left untouched. The active
        tab is kept, and only when there is none does the first newly opened
        session become active.

        Returns:
            The sessions that were opened.

        Raises:
            SessionListFailed: If the backend call fails; no tab changes.
        """
        if self._list_sessions is None:
            raise WorkspaceError("No session lister configured")
        try:
            listed = await self._list_sessions()
        except Exception as exc:
            log.warning("Failed to list sessions: %s", exc)
            raise SessionListFailed(exc) from exc

        opened: list[Session] = []
        for created in listed:
            if created.id in self:
                continue
            session = Session(
                id=created.id,
                title=created.title or self._config.default_chat_title,
                kind=SessionKind.CHAT,
            )
            self._sessions.append(session)
            opened.append(session)

        if not opened:
            return opened
        if self._active_id is None:
            self._active_id = opened[0].id
        log.log(VERBOSE, "Loaded %d sessions from backend", len(opened))
        self._notify()
        return opened

    async def promote(self, session_id: str) -> Session:
        """Back an ephemeral chat tab with a real sandbox session.

        The tab keeps its position and, if active, stays active under the
        new id. If the tab was closed while the backend call was running,
        the new session is returned without reopening it.

        Raises:
            SessionNotFound: If no such tab is open.
            SessionCreateFailed: If the backend call fails; the ephemeral
                tab is left as it was.
        """
        session = self.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        if not session.ephemeral:
            return session

        created = await self._create_backend_session(session_id)
        promoted = Session(
            id=created.id,
            title=created.title or session.title,
            kind=SessionKind.CHAT,
        )

        index = self._index_of(session_id)
        if index is None:
            log.debug("Ephemeral tab %s closed before promotion finished", session_id)
            return promoted
        if created.id in self:
            # Backend handed back a session that is already open
            was_active = self._active_id == session_id
            self.close(session_id)
            if was_active:
                self.select(created.id)
            return self.get(created.id) or promoted

        self._sessions[index] = promoted
        if self._active_id == session_id:
            self._active_id = promoted.id
        log.log(VERBOSE, "Promoted ephemeral tab %s to session %s", session_id, promoted.id)
        self._notify()
        return promoted

    # -- listeners -----------------------------------------------------------

    def on_change(self, callback: ChangeListener) -> Callable[[], None]:
        """Register a callback invoked after every change.

        Returns:
            A function to unregister the callback.
        """
        self._listeners.append(callback)

        def unregister() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unregister

    # -- reads ---------------------------------------------------------------

    async def wait_for_reads(self) -> None:
        """Wait until no file read is outstanding."""
        while self._reads:
            await asyncio.gather(*list(self._reads), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel outstanding file reads."""
        tasks = list(self._reads)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _start_read(self, path: str, token: int) -> None:
        task = asyncio.create_task(self._read(path, token))
        self._reads.add(task)
        task.add_done_callback(self._reads.discard)

    async def _read(self, path: str, token: int) -> None:
        assert self._read_file is not None
        try:
            content = await self._read_file(path)
        except Exception as exc:
            if not self._waiting_on(path, token):
                log.debug("Ignoring failed read for %s: tab no longer waiting", path)
                return
            error = ReadFileFailed(path, exc)
            self._errors[path] = error
            log.warning("Failed to read file %s: %s", path, exc)
            self._notify()
            return
        self._apply(path, token, content)

    def _apply(self, path: str, token: int | None, content: str) -> bool:
        if token is None or not self._waiting_on(path, token):
            log.debug("Discarding stale content for %s", path)
            return False
        session = self.get(path)
        assert session is not None
        self._replace(path, replace(session, file_content=content, read_token=None))
        self._errors.pop(path, None)
        log.debug("Loaded content for %s", path)
        self._notify()
        return True

    def _waiting_on(self, path: str, token: int) -> bool:
        session = self.get(path)
        return session is not None and session.read_token == token

    # -- helpers ---------------------------------------------------------------

    async def _create_backend_session(self, session_id: str | None) -> CreatedSession:
        if self._create_session is None:
            raise WorkspaceError("No session creator configured")
        try:
            return await self._create_session()
        except Exception as exc:
            log.warning("Failed to create session: %s", exc)
            raise SessionCreateFailed(session_id, exc) from exc

    def _ephemeral_chat(self, title: str | None = None) -> Session:
        return Session(
            id=uuid.uuid4().hex,
            title=title or self._config.default_chat_title,
            kind=SessionKind.CHAT,
            ephemeral=True,
        )

    def _index_of(self, session_id: str) -> int | None:
        for index, session in enumerate(self._sessions):
            if session.id == session_id:
                return index
        return None

    def _replace(self, session_id: str, session: Session) -> None:
        index = self._index_of(session_id)
        if index is not None:
            self._sessions[index] = session

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as e:
                log.warning("Session listener error: %s", e)


def _basename(path: str) -> str:
    return posixpath.basename(path.rstrip("/")) or path
