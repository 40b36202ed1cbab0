"""
Shared fixtures: clean ATEXITREG_* env, isolated home/cwd for config lookup,
and a fresh process-wide registry per test.
"""
import atexit
from pathlib import Path

import pytest

from atexitreg import _hooks
from atexitreg.registry import _reset_test_registry

_ENV_KEYS = [
    "ATEXITREG_IGNORE_DURING_DRAIN",
    "ATEXITREG_ON_ERROR",
]


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """No env vars, no user or project config.yaml leaks into tests."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    fake_home = tmp_path / "fakehome"
    fake_home.mkdir()
    monkeypatch.setattr(Path, "home", staticmethod(lambda: fake_home))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def _fresh_registry():
    """Each test gets a new singleton; hooks installed by the test are removed afterwards."""
    _reset_test_registry()
    yield
    for reg in list(_hooks._installed):
        atexit.unregister(reg.drain)
    _hooks._installed.clear()
    _reset_test_registry()


@pytest.fixture
def calls():
    """List that test callbacks append to, in invocation order."""
    return []
