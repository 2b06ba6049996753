"""Pytest configuration and fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Isolate environment variables and config lookup for each test.

    User and project config files must not leak into tests, so the XDG
    config home points at an empty directory and overrides are cleared.
    """
    original_env = os.environ.copy()

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in ("SITESEARCH_MANIFEST", "SITESEARCH_LIMIT", "SITESEARCH_STEMMER"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    yield

    os.environ.clear()
    os.environ.update(original_env)
