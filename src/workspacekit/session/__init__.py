"""Open sessions (tabs): model and registry."""

from workspacekit.session.registry import SessionRegistry
from workspacekit.session.types import Session, SessionKind

__all__ = [
    "Session",
    "SessionKind",
    "SessionRegistry",
]
