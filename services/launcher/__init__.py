"""Public API for the launcher service package."""

from __future__ import annotations

from services.launcher.builder import build_launcher, build_remote_source
from services.launcher.constants import INSTALL_ROOT_ENV, LOCAL_RELEASE_ENV
from services.launcher.installer import Installer
from services.launcher.launching import PayloadLauncher, ProcessLauncher
from services.launcher.local_state import LocalState, find_install_root, resolve_paths
from services.launcher.models import (
    InstallError,
    LaunchError,
    LauncherError,
    LauncherPaths,
    TransferResult,
    TransportError,
)
from services.launcher.providers import HttpRemoteSource, LocalFolderRemoteSource, RemoteSource
from services.launcher.versioning import Version, VersionParseError, ZERO_VERSION

__all__ = [
    "INSTALL_ROOT_ENV",
    "LOCAL_RELEASE_ENV",
    "HttpRemoteSource",
    "InstallError",
    "Installer",
    "LaunchError",
    "LauncherError",
    "LauncherPaths",
    "LocalFolderRemoteSource",
    "LocalState",
    "PayloadLauncher",
    "ProcessLauncher",
    "RemoteSource",
    "TransferResult",
    "TransportError",
    "Version",
    "VersionParseError",
    "ZERO_VERSION",
    "build_launcher",
    "build_remote_source",
    "find_install_root",
    "resolve_paths",
]
