"""Start the installed payload as a separate process."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Any, Protocol

from services.launcher.models import LaunchError, LauncherPaths

_LOGGER = logging.getLogger(__name__)


class ProcessLauncher(Protocol):
    """Protocol describing how the payload entry point is started."""

    def launch(self, paths: LauncherPaths) -> None:
        """Start ``paths.entry_point`` with ``paths.payload_dir`` as working directory."""


class PayloadLauncher:
    """Spawn the payload entry point detached from the launcher."""

    def launch(self, paths: LauncherPaths) -> None:
        _LOGGER.info("Starting %s in %s", paths.entry_point, paths.payload_dir)
        popen_kwargs: dict[str, Any] = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
        }
        if os.name == "nt":  # pragma: no cover - exercised on Windows
            creationflags = getattr(subprocess, "DETACHED_PROCESS", 0)
            if creationflags:
                popen_kwargs["creationflags"] = creationflags
        else:
            popen_kwargs["start_new_session"] = True
        try:
            subprocess.Popen(
                [str(paths.entry_point)],
                cwd=str(paths.payload_dir),
                **popen_kwargs,
            )
        except OSError as exc:
            raise LaunchError(f"Failed to start {paths.entry_point.name}: {exc}") from exc


__all__ = ["PayloadLauncher", "ProcessLauncher"]
