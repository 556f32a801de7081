"""View-model translating view events into installer and launcher calls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .launcher_state import LauncherStateMachine, LauncherStatus

if TYPE_CHECKING:
    from services.launcher.installer import Installer
    from services.launcher.launching import ProcessLauncher
    from services.launcher.models import LauncherPaths


logger = logging.getLogger(__name__)

STATUS_LABELS: dict[LauncherStatus, str] = {
    LauncherStatus.READY: "Play",
    LauncherStatus.FAILED: "Update Failed - Retry",
    LauncherStatus.DOWNLOADING_GAME: "Downloading Game",
    LauncherStatus.DOWNLOADING_UPDATE: "Downloading Update",
    LauncherStatus.EXTRACTING_GAME: "Extracting Game",
}
PENDING_LABEL = "Checking for Updates"


def label_for_status(status: LauncherStatus | None) -> str:
    if status is None:
        return PENDING_LABEL
    return STATUS_LABELS[status]


class LauncherViewModel:
    """Accept the "view ready" and "launch requested" signals from the view."""

    def __init__(
        self,
        state: LauncherStateMachine,
        installer: Installer,
        process_launcher: ProcessLauncher,
        paths: LauncherPaths,
        *,
        close_on_launch: bool = True,
    ) -> None:
        self.state = state
        self._installer = installer
        self._process_launcher = process_launcher
        self._paths = paths
        self.close_on_launch = close_on_launch

    @property
    def paths(self) -> LauncherPaths:
        return self._paths

    @property
    def installer(self) -> Installer:
        return self._installer

    @property
    def launch_label(self) -> str:
        return label_for_status(self.state.status)

    def on_view_ready(self) -> None:
        logger.debug("View ready; checking for updates")
        self._installer.check_for_updates()

    def on_launch_requested(self) -> bool:
        """Launch the payload or retry a failed check.

        Returns ``True`` only when the payload was started.
        """

        if self.state.can_launch():
            self._process_launcher.launch(self._paths)
            return True
        if self.state.can_retry():
            logger.info("Retrying update check after failure")
            self._installer.check_for_updates()
            return False
        logger.debug(
            "Ignoring launch request while status is %s",
            self.state.status.value if self.state.status is not None else "unset",
        )
        return False


__all__ = ["LauncherViewModel", "PENDING_LABEL", "STATUS_LABELS", "label_for_status"]
