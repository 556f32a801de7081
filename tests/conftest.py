from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()

from app.config import reset_app_config_cache  # noqa: E402


_LAUNCHER_ENV_VARS = (
    "GAME_LAUNCHER_ROOT",
    "GAME_LAUNCHER_LOCAL_RELEASE_DIR",
    "GAME_LAUNCHER_CONFIG",
    "GAME_LAUNCHER_APP_VERSION",
    "GAME_LAUNCHER_LOG_FILE",
    "GAME_LAUNCHER_LOG_DIR",
)


@pytest.fixture(autouse=True)
def _isolate_launcher_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep developer environment overrides out of every test."""

    for name in _LAUNCHER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_app_config_cache()
    yield
    reset_app_config_cache()
