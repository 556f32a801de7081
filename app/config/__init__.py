"""Launcher configuration loaded from JSON resources."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from importlib import resources
from math import isfinite
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "app.json"
_CONFIG_PATH_ENV = "GAME_LAUNCHER_CONFIG"
_APP_CONFIG_CACHE: AppConfig | None = None

_DEFAULT_VERSION_URL = "https://example.com/game-launcher/Version.txt"
_DEFAULT_ARCHIVE_URL = "https://example.com/game-launcher/Build.zip"
_DEFAULT_TIMEOUT = 15.0
_DEFAULT_MAX_COMPRESSION_RATIO = 1000
_LOG_VERBOSITIES = {"disabled", "error", "warning", "info", "verbose"}


@dataclass(frozen=True)
class RemoteConfig:
    """Where the release descriptor and archive are published."""

    version_url: str = _DEFAULT_VERSION_URL
    archive_url: str = _DEFAULT_ARCHIVE_URL
    timeout_seconds: float = _DEFAULT_TIMEOUT


@dataclass(frozen=True)
class LayoutConfig:
    """File names, relative to the install root, that the launcher manages."""

    version_file: str = "Version.txt"
    archive_name: str = "Build.zip"
    payload_dir: str = "Build"
    entry_point: str = "Build/Game.exe"


@dataclass(frozen=True)
class LaunchConfig:
    """Behaviour once the payload has been started."""

    close_on_launch: bool = True


@dataclass(frozen=True)
class InstallConfig:
    """Limits applied while unpacking a downloaded archive."""

    max_compression_ratio: int = _DEFAULT_MAX_COMPRESSION_RATIO


@dataclass(frozen=True)
class AppConfig:
    """Structured configuration values for the launcher."""

    remote: RemoteConfig = field(default_factory=RemoteConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    launch: LaunchConfig = field(default_factory=LaunchConfig)
    install: InstallConfig = field(default_factory=InstallConfig)
    log_verbosity: str = "info"


def get_app_config() -> AppConfig:
    """Return the cached application configuration."""

    global _APP_CONFIG_CACHE
    if _APP_CONFIG_CACHE is None:
        _APP_CONFIG_CACHE = load_app_config()
    return _APP_CONFIG_CACHE


def reset_app_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _APP_CONFIG_CACHE
    _APP_CONFIG_CACHE = None


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from ``path``, ``GAME_LAUNCHER_CONFIG`` or the bundled resource."""

    data = _read_config_data(path)
    return AppConfig(
        remote=_parse_remote_section(data.get("remote")),
        layout=_parse_layout_section(data.get("layout")),
        launch=_parse_launch_section(data.get("launch")),
        install=_parse_install_section(data.get("install")),
        log_verbosity=_parse_log_verbosity(data.get("logging")),
    )


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is None:
        override = os.environ.get(_CONFIG_PATH_ENV)
        if override:
            path = override
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_remote_section(section: Any) -> RemoteConfig:
    if not isinstance(section, Mapping):
        return RemoteConfig()
    return RemoteConfig(
        version_url=_coerce_text(section.get("version_url"), default=_DEFAULT_VERSION_URL),
        archive_url=_coerce_text(section.get("archive_url"), default=_DEFAULT_ARCHIVE_URL),
        timeout_seconds=_coerce_positive_float(
            section.get("timeout_seconds"), default=_DEFAULT_TIMEOUT
        ),
    )


def _parse_layout_section(section: Any) -> LayoutConfig:
    defaults = LayoutConfig()
    if not isinstance(section, Mapping):
        return defaults
    return LayoutConfig(
        version_file=_coerce_text(section.get("version_file"), default=defaults.version_file),
        archive_name=_coerce_text(section.get("archive_name"), default=defaults.archive_name),
        payload_dir=_coerce_text(section.get("payload_dir"), default=defaults.payload_dir),
        entry_point=_coerce_text(section.get("entry_point"), default=defaults.entry_point),
    )


def _parse_launch_section(section: Any) -> LaunchConfig:
    if not isinstance(section, Mapping):
        return LaunchConfig()
    close_on_launch = section.get("close_on_launch")
    if not isinstance(close_on_launch, bool):
        close_on_launch = LaunchConfig.close_on_launch
    return LaunchConfig(close_on_launch=close_on_launch)


def _parse_install_section(section: Any) -> InstallConfig:
    if not isinstance(section, Mapping):
        return InstallConfig()
    ratio = section.get("max_compression_ratio")
    if isinstance(ratio, bool) or not isinstance(ratio, int) or ratio <= 0:
        ratio = _DEFAULT_MAX_COMPRESSION_RATIO
    return InstallConfig(max_compression_ratio=ratio)


def _parse_log_verbosity(section: Any) -> str:
    if not isinstance(section, Mapping):
        return "info"
    value = section.get("verbosity")
    if isinstance(value, str) and value.strip().lower() in _LOG_VERBOSITIES:
        return value.strip().lower()
    return "info"


def _coerce_text(value: Any, *, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _coerce_positive_float(value: Any, *, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = float(value)
    elif isinstance(value, str):
        try:
            candidate = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if not isfinite(candidate) or candidate <= 0:
        return default
    return candidate


__all__ = [
    "AppConfig",
    "InstallConfig",
    "LaunchConfig",
    "LayoutConfig",
    "RemoteConfig",
    "get_app_config",
    "load_app_config",
    "reset_app_config_cache",
]
