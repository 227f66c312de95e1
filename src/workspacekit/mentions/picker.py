"""State for the "@" file picker shown while composing a message."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from workspacekit.filetree.nodes import MentionFile
    from workspacekit.mentions.index import MentionIndex


def detect_mention_query(text: str, cursor: int) -> str | None:
    """Return the partial mention being typed at ``cursor``, if any.

    A mention starts at the last "@" before the cursor that sits at the
    start of the text or right after a space or newline, and runs to the
    cursor without containing a space.
    """
    before = text[:cursor]
    at = before.rfind("@")
    if at == -1:
        return None
    if at > 0 and before[at - 1] not in (" ", "\n"):
        return None
    query = before[at + 1 :]
    if " " in query:
        return None
    return query


@dataclass(frozen=True, slots=True)
class MentionEdit:
    """Result of accepting a mention: the rewritten text and new cursor."""

    text: str
    cursor: int
    file: MentionFile


class MentionPicker:
    """Tracks query, selection and mentioned files for one input box.

    ``selected_index`` always lies within ``[0, len(results) - 1]`` (0 when
    there are no results) and returns to 0 whenever the query changes or
    the picker closes.
    """

    def __init__(self, index: MentionIndex) -> None:
        self._index = index
        self.is_open = False
        self.query = ""
        self.selected_index = 0
        self._result_count = 0
        self._mentioned: list[MentionFile] = []

    @property
    def results(self) -> list[MentionFile]:
        if not self.is_open:
            return []
        results = self._index.search(self.query)
        if len(results) != self._result_count:
            self._result_count = len(results)
            self._clamp()
        return results

    @property
    def selected(self) -> MentionFile | None:
        results = self.results
        if not results:
            return None
        return results[self.selected_index]

    @property
    def mentioned(self) -> list[MentionFile]:
        return list(self._mentioned)

    def update(self, text: str, cursor: int) -> bool:
        """Re-read the input after an edit; returns whether the picker is open."""
        query = detect_mention_query(text, cursor)
        if query is None:
            self.close()
            return False
        if not self.is_open or query != self.query:
            self.selected_index = 0
        self.is_open = True
        self.query = query
        return True

    def move(self, delta: int) -> None:
        """Move the selection by ``delta``, wrapping at either end."""
        count = len(self.results)
        if count == 0:
            return
        self.selected_index = (self.selected_index + delta) % count

    def close(self) -> None:
        self.is_open = False
        self.query = ""
        self.selected_index = 0
        self._result_count = 0

    def select(
        self, text: str, cursor: int, file: MentionFile | None = None
    ) -> MentionEdit | None:
        """Accept ``file`` (default: the highlighted result).

        Replaces the "@query" before the cursor with "@<name> " and records
        the file as mentioned.

        Returns:
            The edit to apply, or None if there is nothing to select.
        """
        if file is None:
            file = self.selected
        if file is None:
            return None

        before, after = text[:cursor], text[cursor:]
        at = before.rfind("@")
        prefix = before[:at] if at != -1 else before
        inserted = f"@{file.name} "
        self._remember(file)
        self.close()
        return MentionEdit(text=prefix + inserted + after, cursor=len(prefix) + len(inserted), file=file)

    def remove_mentioned(self, path: str) -> None:
        self._mentioned = [f for f in self._mentioned if f.path != path]

    def clear_mentioned(self) -> None:
        self._mentioned.clear()

    def _remember(self, file: MentionFile) -> None:
        self._mentioned = [f for f in self._mentioned if f.path != file.path]
        self._mentioned.append(file)

    def _clamp(self) -> None:
        if self._result_count == 0:
            self.selected_index = 0
        else:
            self.selected_index = min(max(self.selected_index, 0), self._result_count - 1)
