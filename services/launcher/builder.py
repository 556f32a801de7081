"""Helpers for constructing the launcher from configuration."""

from __future__ import annotations

import logging
import os
from functools import partial
from pathlib import Path

from app.config import AppConfig, get_app_config
from app.version import get_app_version
from services.launcher.archive import extract_archive
from services.launcher.constants import LOCAL_RELEASE_ENV, USER_AGENT_PREFIX
from services.launcher.installer import Installer
from services.launcher.launching import PayloadLauncher, ProcessLauncher
from services.launcher.local_state import LocalState, find_install_root, resolve_paths
from services.launcher.providers import HttpRemoteSource, LocalFolderRemoteSource, RemoteSource
from viewmodels.launcher_state import LauncherStateMachine
from viewmodels.launcher_viewmodel import LauncherViewModel


_LOGGER = logging.getLogger(__name__)


def build_remote_source(config: AppConfig) -> RemoteSource:
    """Return the release source for the current environment."""

    local_dir = os.environ.get(LOCAL_RELEASE_ENV)
    if local_dir:
        folder = Path(local_dir).expanduser()
        if folder.is_dir():
            _LOGGER.info("Using local release source at %s", folder)
            return LocalFolderRemoteSource(folder, config.layout.archive_name)
        _LOGGER.warning("Configured local release directory does not exist: %s", folder)

    return HttpRemoteSource(
        config.remote.version_url,
        config.remote.archive_url,
        timeout=config.remote.timeout_seconds,
        user_agent=f"{USER_AGENT_PREFIX}/{get_app_version()}",
    )


def build_launcher(
    root: str | Path | None = None,
    *,
    config: AppConfig | None = None,
    source: RemoteSource | None = None,
    process_launcher: ProcessLauncher | None = None,
) -> LauncherViewModel:
    """Wire paths, state, installer and launcher into a view-model."""

    config = config or get_app_config()
    install_root = find_install_root(root)
    paths = resolve_paths(install_root, config.layout)
    _LOGGER.debug("Launcher install root resolved to %s", paths.install_root)

    local_state = LocalState(paths)
    state = LauncherStateMachine(local_state.payload_exists)
    extractor = partial(
        extract_archive, max_compression_ratio=config.install.max_compression_ratio
    )
    installer = Installer(
        local_state, source or build_remote_source(config), state, extractor=extractor
    )
    return LauncherViewModel(
        state,
        installer,
        process_launcher or PayloadLauncher(),
        paths,
        close_on_launch=config.launch.close_on_launch,
    )


__all__ = ["build_launcher", "build_remote_source"]
