"""Root pytest configuration for all tests."""

from __future__ import annotations

import pytest

from tests.utils import SAMPLE_PAYLOAD, make_tree
from workspacekit.filetree.nodes import FileTreeNode
from workspacekit.protocols import Project

# Configure pytest-asyncio to use auto mode
# This is redundant with pyproject.toml but ensures it's set
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def sample_tree() -> FileTreeNode:
    """Tree with /a.ts at the root and /sub/b.ts one level down."""
    return make_tree(SAMPLE_PAYLOAD)


@pytest.fixture
def project() -> Project:
    return Project(id="P1", directory="/workspace/p1")
