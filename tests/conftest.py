from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.go_tree import GoTree


@pytest.fixture
def go_tree(tmp_path: Path) -> GoTree:
    """Provide a GOPATH-style Go source tree rooted at the pytest tmp_path."""
    return GoTree(tmp_path)
