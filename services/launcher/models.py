"""Errors and data models used by the launcher service."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from services.launcher.versioning import Version
from shared.result import Result


class LauncherError(RuntimeError):
    """Base class for failures surfaced by the launcher core."""


class TransportError(LauncherError):
    """Raised when the version descriptor or the archive cannot be fetched."""


class InstallError(LauncherError):
    """Raised when the downloaded archive cannot be installed."""


class LaunchError(LauncherError):
    """Raised when the installed payload cannot be started."""


TransferResult = Result[Version, BaseException]
"""Completion value of an archive transfer: the version context or an error."""

TransferCallback = Callable[[TransferResult], None]


@dataclass(frozen=True)
class LauncherPaths:
    """Filesystem locations derived from the install root."""

    install_root: Path
    version_file: Path
    archive_path: Path
    payload_dir: Path
    entry_point: Path


__all__ = [
    "InstallError",
    "LaunchError",
    "LauncherError",
    "LauncherPaths",
    "TransferCallback",
    "TransferResult",
    "TransportError",
]
