"""Check for, download and install payload releases."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

from services.launcher.archive import extract_archive
from services.launcher.local_state import LocalState
from services.launcher.models import TransferResult
from services.launcher.providers import RemoteSource
from services.launcher.versioning import Version, ZERO_VERSION, describe_change
from viewmodels.launcher_state import LauncherStateMachine, LauncherStatus


_LOGGER = logging.getLogger(__name__)

ArchiveExtractor = Callable[[Path, Path], object]


class Installer:
    """Drive a :class:`LauncherStateMachine` through one update cycle.

    First installs and updates share the same download, extract and finalize
    pipeline; they only differ in the status shown while downloading. Every
    failure ends the cycle in ``failed`` and nothing is rolled back.
    """

    def __init__(
        self,
        local_state: LocalState,
        source: RemoteSource,
        state: LauncherStateMachine,
        *,
        extractor: ArchiveExtractor = extract_archive,
    ) -> None:
        self._local = local_state
        self._source = source
        self._state = state
        self._extract = extractor
        self._transfer: threading.Thread | None = None

    def check_for_updates(self) -> None:
        """Compare the installed version with the remote one and act on it."""

        try:
            local_version = self._local.read_installed_version()
            if local_version is None:
                _LOGGER.info("No installed version found; performing first install")
                remote_version = self._fetch_remote_version()
                self._state.transition(LauncherStatus.DOWNLOADING_GAME)
                self._begin_transfer(remote_version)
                return

            self._state.set_displayed_version(local_version.format())
            remote_version = self._fetch_remote_version()
            if not local_version.differs_from(remote_version):
                _LOGGER.info("Installed version %s is current", local_version)
                self._state.transition(LauncherStatus.READY)
                return

            _LOGGER.info(
                "Remote version %s differs from installed %s (%s)",
                remote_version,
                local_version,
                describe_change(local_version, remote_version),
            )
            self._state.transition(LauncherStatus.DOWNLOADING_UPDATE)
            self._begin_transfer(remote_version)
        except Exception as exc:
            self._fail("Error checking for game updates", exc)

    def on_archive_transfer_complete(self, result: TransferResult) -> None:
        """Finish the cycle once the archive transfer reports back."""

        if result.is_err():
            self._fail("Error downloading game files", result.unwrap_err())
            return

        version = result.unwrap()
        paths = self._local.paths
        try:
            self._local.remove_payload_directory()
            self._state.transition(LauncherStatus.EXTRACTING_GAME)
            self._extract(paths.archive_path, paths.install_root)
            self._local.write_installed_version(version)
            self._state.set_displayed_version(version.format())
            self._state.transition(LauncherStatus.READY)
            self._local.remove_staged_archive()
        except Exception as exc:
            self._fail("Error finishing download", exc)
            return
        _LOGGER.info("Installed version %s", version)

    def wait_for_transfer(self, timeout: float | None = None) -> bool:
        """Block until the running transfer (if any) has completed."""

        transfer = self._transfer
        if transfer is None:
            return True
        transfer.join(timeout)
        return not transfer.is_alive()

    def _fetch_remote_version(self) -> Version:
        text = self._source.fetch_version_descriptor()
        version = Version.parse(text)
        if version == ZERO_VERSION:
            _LOGGER.warning("Remote version descriptor %r did not name a release", text)
        _LOGGER.debug("Remote version descriptor resolved to %s", version)
        return version

    def _begin_transfer(self, remote_version: Version) -> None:
        archive_path = self._local.paths.archive_path
        _LOGGER.info("Fetching archive for version %s into %s", remote_version, archive_path)
        self._transfer = self._source.fetch_archive(
            archive_path, remote_version, self.on_archive_transfer_complete
        )

    def _fail(self, message: str, error: BaseException) -> None:
        _LOGGER.error("%s: %s", message, error, exc_info=error)
        self._state.transition(LauncherStatus.FAILED, error=f"{message}: {error}")


__all__ = ["ArchiveExtractor", "Installer"]
