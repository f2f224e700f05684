"""Test configuration and fixtures for projsnap."""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path_factory, monkeypatch):
    """Keep the user's real git configuration and global excludes out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    return home


@pytest.fixture
def make_tree(tmp_path):
    """Create files from a {relative_path: content} mapping and return the root."""

    def _make(files, root=None):
        base = root or tmp_path
        for relative_path, content in files.items():
            path = base / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return base

    return _make
