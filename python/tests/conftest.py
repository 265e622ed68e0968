"""Shared fixtures for botconfig tests."""

import pytest

from botconfig.plugins.loader import clear_plugin_cache


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the state dir and HOME at a temp directory for every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("BOTCONFIG_STATE_DIR", str(home / ".botconfig"))
    monkeypatch.delenv("BOTCONFIG_CONFIG_PATH", raising=False)
    clear_plugin_cache()
    yield home
    clear_plugin_cache()


@pytest.fixture
def state_dir(isolated_home):
    return isolated_home / ".botconfig"


@pytest.fixture
def write_plugin(tmp_path):
    """Write a single-file plugin and return its path."""

    def _write(name, body, directory=None):
        target_dir = directory or (tmp_path / "plugins")
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / f"{name}.py"
        path.write_text(body)
        return path

    return _write
