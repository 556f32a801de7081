"""Launcher status lifecycle shared between the installer and the view."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable


logger = logging.getLogger(__name__)


class LauncherStatus(str, Enum):
    """States exposed to the view layer."""

    READY = "ready"
    FAILED = "failed"
    DOWNLOADING_GAME = "downloadingGame"
    DOWNLOADING_UPDATE = "downloadingUpdate"
    EXTRACTING_GAME = "extractingGame"


StatusObserver = Callable[[LauncherStatus], None]
VersionObserver = Callable[[str], None]


class LauncherStateMachine:
    """Hold the current :class:`LauncherStatus` and notify observers of changes.

    Only the installer drives transitions; the view reads the state and the
    launch gating queries. ``payload_exists`` is consulted lazily so
    :meth:`can_launch` always reflects the filesystem.
    """

    def __init__(self, payload_exists: Callable[[], bool]) -> None:
        self._payload_exists = payload_exists
        self._lock = threading.Lock()
        self._status: LauncherStatus | None = None
        self._displayed_version = ""
        self._last_error: str | None = None
        self._status_observers: list[StatusObserver] = []
        self._version_observers: list[VersionObserver] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def add_status_observer(self, observer: StatusObserver) -> None:
        with self._lock:
            self._status_observers.append(observer)

    def add_version_observer(self, observer: VersionObserver) -> None:
        with self._lock:
            self._version_observers.append(observer)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def status(self) -> LauncherStatus | None:
        with self._lock:
            return self._status

    @property
    def displayed_version(self) -> str:
        with self._lock:
            return self._displayed_version

    @property
    def last_error(self) -> str | None:
        with self._lock:
            return self._last_error

    def transition(self, status: LauncherStatus, *, error: str | None = None) -> None:
        with self._lock:
            previous = self._status
            self._status = status
            self._last_error = error if status is LauncherStatus.FAILED else None
            observers = tuple(self._status_observers)
        logger.info(
            "Launcher status %s -> %s",
            previous.value if previous is not None else "unset",
            status.value,
        )
        for observer in observers:
            try:
                observer(status)
            except Exception:
                logger.exception("Launcher status observer failed")

    def set_displayed_version(self, text: str) -> None:
        with self._lock:
            self._displayed_version = text
            observers = tuple(self._version_observers)
        for observer in observers:
            try:
                observer(text)
            except Exception:
                logger.exception("Launcher version observer failed")

    # ------------------------------------------------------------------
    # Gating
    # ------------------------------------------------------------------
    def can_launch(self) -> bool:
        return self.status is LauncherStatus.READY and self._payload_exists()

    def can_retry(self) -> bool:
        return self.status is LauncherStatus.FAILED


__all__ = ["LauncherStateMachine", "LauncherStatus", "StatusObserver", "VersionObserver"]
