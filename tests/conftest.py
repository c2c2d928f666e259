"""
Shared pytest fixtures for recordconfig tests.

Puts ``src/`` on ``sys.path`` so the workspace package is imported, and
provides stores and shutdown hooks that never touch the real process exit.
"""

import os
import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parent.parent

# Put `src/` first so `import recordconfig` uses workspace code.
sys.path.insert(0, str(_REPO_ROOT / "src"))
# Put repo root early so `import tests.*` resolves locally.
sys.path.insert(1, str(_REPO_ROOT))

from recordconfig.core import settings as settings_module  # noqa: E402
from recordconfig.core.registry import set_catalog  # noqa: E402
from recordconfig.core.shutdown import ShutdownHooks  # noqa: E402
from recordconfig.core.storage import JsonFileStore, MemoryStore  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point the default config file at tmp_path and drop cached globals."""
    for key in list(os.environ):
        if key.startswith(settings_module.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("RECORDCONFIG_FILE", str(tmp_path / "default" / "config.json"))
    settings_module.reset_settings()
    set_catalog(None)
    yield
    settings_module.reset_settings()
    set_catalog(None)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def json_store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "config.json")


@pytest.fixture
def hooks() -> ShutdownHooks:
    return ShutdownHooks()


@pytest.fixture
def typer_test_client():
    """Typer's CliRunner for invoking the recordconfig app in-process."""
    from typer.testing import CliRunner

    return CliRunner()
