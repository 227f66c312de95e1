"""File-tree wire model and the flat views derived from it."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

NodeType = Literal["file", "directory"]


class FileTreeNode(BaseModel):
    """One node of a project's file tree as served by the sandbox.

    ``path`` is root-relative and '/'-separated. Nodes are frozen: a
    refetch replaces the whole tree instead of mutating it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    type: NodeType
    children: tuple[FileTreeNode, ...] | None = None

    @model_validator(mode="after")
    def check_file_has_no_children(self) -> FileTreeNode:
        if self.type == "file" and self.children:
            raise ValueError(f"file node {self.path!r} cannot have children")
        return self

    @property
    def is_dir(self) -> bool:
        return self.type == "directory"

    def iter_children(self) -> Iterator[FileTreeNode]:
        """Yield children in order; file nodes and bare directories yield none."""
        if self.children:
            yield from self.children

    @classmethod
    def from_payload(cls, payload: FileTreeNode | Mapping[str, Any]) -> FileTreeNode:
        """Coerce a fetch result into a validated node.

        Raises:
            pydantic.ValidationError: If the payload is not a file tree.
        """
        if isinstance(payload, cls):
            return payload
        return cls.model_validate(payload)


FileTreeNode.model_rebuild()


@dataclass(frozen=True, slots=True)
class FlatEntry:
    """A file leaf produced by flattening a tree."""

    path: str
    name: str


@dataclass(frozen=True, slots=True)
class MentionFile:
    """A file that can be referenced with an @-mention.

    ``path`` is fully qualified (project directory + tree path) and ``id``
    combines the project id with the tree path.
    """

    id: str
    name: str
    path: str
    project_id: str
    type: Literal["file"] = "file"
