from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.go_repo import GoRepoBuilder


@pytest.fixture
def go_repo(tmp_path: Path) -> GoRepoBuilder:
    """Provide a reusable Go source tree rooted at the pytest tmp_path."""
    return GoRepoBuilder(tmp_path)
