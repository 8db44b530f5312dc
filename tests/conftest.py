from __future__ import annotations

import pytest

from sitepilot.git_facts.semver import Version
from sitepilot.ui.console import Console, set_console


@pytest.fixture(autouse=True)
def quiet_console():
    set_console(Console(debug=False))
    yield


@pytest.fixture
def releases():
    """Most-recent-first release list with a pre-release on top."""
    return [
        Version(2, 0, 0, "RC1"),
        Version(1, 5, 0),
        Version(1, 4, 0),
    ]


@pytest.fixture
def write_pyproject(tmp_path):
    def _write(text: str):
        (tmp_path / "pyproject.toml").write_text(text, encoding="utf-8")
        return tmp_path
    return _write
