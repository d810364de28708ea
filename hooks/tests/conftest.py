import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from memguard.config import SESSIONS_DIR_ENV, clear_config_cache
from memguard.knowledge import KnowledgeStore
from memguard.state import StateStore

from harness import FakeClock, make_project


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep the session registry and $HOME inside tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv(SESSIONS_DIR_ENV, str(tmp_path / "sessions"))
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("USERPROFILE", raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def project(tmp_path):
    root, memory_dir = make_project(tmp_path)
    return root, memory_dir


@pytest.fixture
def stores(project):
    _, memory_dir = project
    return StateStore(memory_dir), KnowledgeStore(memory_dir)


@pytest.fixture
def clock():
    return FakeClock()
