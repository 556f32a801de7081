"""Persisted launcher state: the version marker and the install layout."""

from __future__ import annotations

import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path

from app.config import LayoutConfig
from services.launcher.constants import INSTALL_ROOT_ENV
from services.launcher.models import InstallError, LauncherPaths
from services.launcher.versioning import Version, VersionParseError, ZERO_VERSION

_LOGGER = logging.getLogger(__name__)


def resolve_paths(root: str | Path, layout: LayoutConfig | None = None) -> LauncherPaths:
    """Derive every launcher path from ``root`` without touching the disk."""

    layout = layout or LayoutConfig()
    install_root = Path(root)
    return LauncherPaths(
        install_root=install_root,
        version_file=install_root / layout.version_file,
        archive_path=install_root / layout.archive_name,
        payload_dir=install_root / layout.payload_dir,
        entry_point=install_root.joinpath(*_split_relative(layout.entry_point)),
    )


def find_install_root(override: str | Path | None = None) -> Path:
    """Return the directory the launcher manages.

    Precedence: explicit ``override``, the ``GAME_LAUNCHER_ROOT`` environment
    variable, the directory of a frozen executable, the working directory.
    """

    if override is not None:
        return Path(override).expanduser()

    env_root = os.environ.get(INSTALL_ROOT_ENV)
    if env_root:
        return Path(env_root).expanduser()

    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent

    return Path.cwd()


class LocalState:
    """Read and write the on-disk state owned by the launcher."""

    def __init__(self, paths: LauncherPaths) -> None:
        self._paths = paths

    @property
    def paths(self) -> LauncherPaths:
        return self._paths

    def read_installed_version(self) -> Version | None:
        """Return the installed version, or ``None`` when nothing is installed.

        A marker that exists but cannot be parsed reads as :data:`ZERO_VERSION`
        so it always differs from the remote release.
        """

        marker = self._paths.version_file
        if not marker.is_file():
            _LOGGER.debug("Version marker %s not found", marker)
            return None
        try:
            raw = marker.read_bytes()
        except OSError as exc:
            raise InstallError(f"Failed to read version marker {marker}: {exc}") from exc
        try:
            version = Version.parse(raw.decode("utf-8-sig"))
        except (UnicodeDecodeError, VersionParseError):
            _LOGGER.warning("Version marker %s is malformed: %r", marker, raw[:64])
            return ZERO_VERSION
        if version == ZERO_VERSION:
            _LOGGER.debug("Version marker %s parsed as %s", marker, version)
        return version

    def write_installed_version(self, version: Version) -> None:
        """Replace the marker contents with ``version`` in a single step."""

        marker = self._paths.version_file
        marker.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{marker.name}.", suffix=".tmp", dir=marker.parent
        )
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(version.format())
            os.replace(temp_path, marker)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        _LOGGER.info("Recorded installed version %s in %s", version, marker)

    def payload_exists(self) -> bool:
        return self._paths.entry_point.is_file()

    def remove_payload_directory(self) -> None:
        payload_dir = self._paths.payload_dir
        if not payload_dir.exists():
            return
        _LOGGER.info("Removing previous payload at %s", payload_dir)
        shutil.rmtree(payload_dir)

    def remove_staged_archive(self) -> None:
        archive = self._paths.archive_path
        if archive.exists():
            archive.unlink()
            _LOGGER.debug("Deleted staged archive %s", archive)


def _split_relative(entry: str) -> list[str]:
    normalised = entry.strip().replace("\\", "/")
    return [part for part in normalised.split("/") if part and part != "."]


__all__ = ["LocalState", "find_install_root", "resolve_paths"]
