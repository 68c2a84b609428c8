# tests/conftest.py
import logging
from pathlib import Path
from typing import Dict

import pytest
import structlog


@pytest.fixture(autouse=True)
def isolated_git_environment(monkeypatch, tmp_path_factory):
    """Keeps the developer's global git configuration out of every walk."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_CONFIG_GLOBAL", raising=False)
    monkeypatch.delenv("GIT_DIR", raising=False)
    return home


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    structlog.reset_defaults()
    logging.getLogger("amc").handlers.clear()


def make_tree(root: Path, files: Dict[str, str]) -> Path:
    # writes {relative path: content} under root, creating parent directories.
    for rel_path, content in files.items():
        full_path = root / rel_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)
    return root


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """The basic layout: three .rs files, a .txt file and an extensionless file."""
    return make_tree(tmp_path / "project", {
        "a.rs": "fn a() {}",
        "b.rs": "fn b() {}",
        "c.txt": "notes",
        "sub/d.rs": "fn d() {}",
        "e": "no extension",
    })
