"""Session (tab) model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SessionKind(Enum):
    """What a tab shows."""

    CHAT = "chat"
    FILE = "file"


@dataclass(frozen=True, slots=True)
class Session:
    """An open tab.

    File tabs use the file path as id. While a read is outstanding,
    ``read_token`` holds the token of the read that may fill
    ``file_content``; it is None once content has arrived.

    Attributes:
        id: Unique id (file path, or an opaque chat session id).
        title: Label shown on the tab.
        kind: Chat or file.
        file_content: Loaded content, or the placeholder while pending.
        file_path: Path of the file for file tabs.
        ephemeral: Chat tab not yet backed by a sandbox session.
        read_token: Token of the outstanding read, if pending.
    """

    id: str
    title: str
    kind: SessionKind = SessionKind.CHAT
    file_content: str | None = None
    file_path: str | None = None
    ephemeral: bool = False
    read_token: int | None = None

    @property
    def is_pending(self) -> bool:
        return self.read_token is not None
