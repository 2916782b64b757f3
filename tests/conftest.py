"""
Shared pytest fixtures for the turtlescope test suite.

Every test runs with configuration isolated from the developer's
machine: the user config directory points into tmp_path and
TURTLESCOPE_* environment variables are cleared.

Usage in tests:
    def test_something(scope_factory):
        store = scope_factory.create_store(TASK_DOC)

    def test_with_store(task_store):
        assert task_store.get_classes() == {EX + "Task"}
"""

import pytest

from turtlescope.config import ConfigManager, ENV_OVERRIDES
from tests.factories import ScopeTestFactory, TASK_DOC, PROV_DOC


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the user config at tmp_path and clear config env vars."""
    user_dir = tmp_path / "home" / ".turtlescope"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", user_dir / "config.yaml")
    for env_key in list(ENV_OVERRIDES) + ["TURTLESCOPE_PROJECT_PATH"]:
        monkeypatch.delenv(env_key, raising=False)
    return user_dir


@pytest.fixture
def scope_factory(tmp_path):
    """Empty ScopeTestFactory rooted at tmp_path."""
    return ScopeTestFactory(tmp_path)


@pytest.fixture
def task_store(scope_factory):
    """Store loaded with TASK_DOC (one class, one instance)."""
    return scope_factory.create_store(TASK_DOC)


@pytest.fixture
def prov_store(scope_factory):
    """Store loaded with PROV_DOC (three provenance events)."""
    return scope_factory.create_store(PROV_DOC)
