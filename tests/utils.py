"""Shared test utilities for workspacekit tests."""

from __future__ import annotations

import asyncio
from typing import Any

from workspacekit.filetree.nodes import FileTreeNode

SAMPLE_PAYLOAD: dict[str, Any] = {
    "name": "/",
    "path": "/",
    "type": "directory",
    "children": [
        {"name": "a.ts", "path": "/a.ts", "type": "file"},
        {
            "name": "sub",
            "path": "/sub",
            "type": "directory",
            "children": [{"name": "b.ts", "path": "/sub/b.ts", "type": "file"}],
        },
    ],
}


def make_tree(payload: dict[str, Any]) -> FileTreeNode:
    """Build a validated tree from a JSON-style dict."""
    return FileTreeNode.model_validate(payload)


def file_node(path: str) -> dict[str, Any]:
    return {"name": path.rsplit("/", 1)[-1], "path": path, "type": "file"}


def dir_node(path: str, *children: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": path.rsplit("/", 1)[-1] or "/",
        "path": path,
        "type": "directory",
        "children": list(children),
    }


async def settle(rounds: int = 10) -> None:
    """Let pending tasks run until they block."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class GatedFetcher:
    """Tree fetcher whose calls block until the test resolves them.

    Calls are recorded in order; ``resolve(i, ...)`` / ``fail(i, ...)``
    complete the i-th call.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []
        self._gates: list[asyncio.Future[Any]] = []

    async def __call__(self, directory: str, max_depth: int) -> Any:
        gate: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.calls.append((directory, max_depth))
        self._gates.append(gate)
        return await gate

    def resolve(self, index: int, payload: Any) -> None:
        self._gates[index].set_result(payload)

    def fail(self, index: int, exc: BaseException) -> None:
        self._gates[index].set_exception(exc)


class GatedReader:
    """File reader whose calls block until the test resolves them."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._gates: list[asyncio.Future[str]] = []

    async def __call__(self, path: str) -> str:
        gate: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        self.calls.append(path)
        self._gates.append(gate)
        return await gate

    def resolve(self, index: int, content: str) -> None:
        self._gates[index].set_result(content)

    def fail(self, index: int, exc: BaseException) -> None:
        self._gates[index].set_exception(exc)
