"""Version of the launcher itself (not of the payload it installs)."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path

_FALLBACK_VERSION = "0.0.0-dev"
_VERSION_ENV = "GAME_LAUNCHER_APP_VERSION"
_VERSION_FILE = Path(__file__).with_name("VERSION")


def _read_version_file() -> str | None:
    try:
        text = _VERSION_FILE.read_text(encoding="utf-8")
    except OSError:
        return None
    version = text.strip()
    return version or None


def _version_from_env() -> str | None:
    env_version = os.environ.get(_VERSION_ENV)
    if not env_version:
        return None
    return _normalize(env_version)


def _normalize(raw_version: str) -> str:
    version = raw_version.strip()
    if version.startswith("v"):
        version = version[1:]
    return version


@lru_cache(maxsize=1)
def get_app_version() -> str:
    """Return the launcher version.

    ``GAME_LAUNCHER_APP_VERSION`` wins over the bundled ``VERSION`` file; a
    development placeholder is used when neither is available.
    """

    for resolver in (_version_from_env, _read_version_file):
        version = resolver()
        if version:
            return version
    return _FALLBACK_VERSION


__all__ = ["get_app_version"]
