"""Pytest configuration and shared fixtures."""

import os
import pytest
from pathlib import Path

from phonebook.core.filesystem import HomeDirectoryResolver


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point configuration and catalogue at a throwaway directory."""
    for key in list(os.environ):
        if key.startswith("PHONEBOOK_"):
            monkeypatch.delenv(key)

    config_dir = tmp_path / "config"
    monkeypatch.setenv("PHONEBOOK_CONFIG_DIR", str(config_dir))
    yield config_dir


class StubHome(HomeDirectoryResolver):
    """Home directory resolver pinned to a test directory."""

    def __init__(self, home):
        self.home = str(home)

    def home_directory(self) -> str:
        return self.home


@pytest.fixture
def workspace(tmp_path) -> Path:
    """A directory holding a few files and folders to complete against."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def stub_home(tmp_path):
    return StubHome(tmp_path)
