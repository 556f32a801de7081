"""Remote release sources: the version descriptor and the payload archive."""

from __future__ import annotations

import logging
import shutil
import threading
from pathlib import Path
from typing import Callable, Protocol
from urllib.request import Request, urlopen

from services.launcher.constants import DOWNLOAD_CHUNK_SIZE, LOCAL_DESCRIPTOR_NAME
from services.launcher.models import TransferCallback, TransportError
from services.launcher.versioning import Version
from shared.result import Result


_LOGGER = logging.getLogger(__name__)


class RemoteSource(Protocol):
    """Protocol describing where releases are fetched from."""

    def fetch_version_descriptor(self) -> str:
        """Return the descriptor text, raising :class:`TransportError` on failure."""

    def fetch_archive(
        self, destination: Path, context: Version, on_complete: TransferCallback
    ) -> threading.Thread | None:
        """Start copying the archive to ``destination`` without blocking.

        ``on_complete`` is invoked exactly once, from the transfer thread, with
        ``Result.ok(context)`` or ``Result.err(error)``.
        """


def _start_transfer(
    name: str,
    work: Callable[[], None],
    context: Version,
    on_complete: TransferCallback,
) -> threading.Thread:
    def _run() -> None:
        try:
            work()
        except TransportError as exc:
            _LOGGER.warning("Archive transfer failed: %s", exc)
            on_complete(Result.err(exc))
            return
        except Exception as exc:  # pragma: no cover - unexpected failure class
            _LOGGER.exception("Unexpected error during archive transfer")
            on_complete(Result.err(exc))
            return
        on_complete(Result.ok(context))

    thread = threading.Thread(target=_run, name=name, daemon=True)
    thread.start()
    return thread


class HttpRemoteSource:
    """Fetch the descriptor and archive over HTTP(S)."""

    def __init__(
        self,
        version_url: str,
        archive_url: str,
        *,
        timeout: float = 15.0,
        user_agent: str | None = None,
    ) -> None:
        self._version_url = version_url
        self._archive_url = archive_url
        self._timeout = timeout
        self._user_agent = user_agent

    def fetch_version_descriptor(self) -> str:
        _LOGGER.debug("Requesting version descriptor from %s", self._version_url)
        try:
            with urlopen(self._request(self._version_url), timeout=self._timeout) as response:  # nosec - configured HTTPS endpoint
                return response.read().decode("utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise TransportError(f"Failed to fetch version descriptor: {exc}") from exc

    def fetch_archive(
        self, destination: Path, context: Version, on_complete: TransferCallback
    ) -> threading.Thread:
        _LOGGER.info("Downloading %s to %s", self._archive_url, destination)

        def _download() -> None:
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                with urlopen(self._request(self._archive_url), timeout=self._timeout) as response, destination.open("wb") as target:  # nosec - configured HTTPS endpoint
                    shutil.copyfileobj(response, target, DOWNLOAD_CHUNK_SIZE)
            except OSError as exc:
                raise TransportError(f"Failed to download archive: {exc}") from exc
            _LOGGER.debug("Downloaded archive to %s", destination)

        return _start_transfer("game-launcher-download", _download, context, on_complete)

    def _request(self, url: str) -> Request:
        headers = {}
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        return Request(url, headers=headers)


class LocalFolderRemoteSource:
    """Serve releases from a local directory, mainly for offline testing.

    The folder holds ``version.txt`` and the archive under ``archive_name``.
    """

    def __init__(self, folder: Path, archive_name: str) -> None:
        self._folder = Path(folder)
        self._archive_name = archive_name

    def fetch_version_descriptor(self) -> str:
        descriptor = self._folder / LOCAL_DESCRIPTOR_NAME
        try:
            return descriptor.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise TransportError(f"Failed to read local version descriptor: {exc}") from exc

    def fetch_archive(
        self, destination: Path, context: Version, on_complete: TransferCallback
    ) -> threading.Thread:
        source = self._folder / self._archive_name
        _LOGGER.info("Copying local release %s to %s", source, destination)

        def _copy() -> None:
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source, destination)
            except OSError as exc:
                raise TransportError(f"Failed to copy local archive: {exc}") from exc

        return _start_transfer("game-launcher-copy", _copy, context, on_complete)


__all__ = ["HttpRemoteSource", "LocalFolderRemoteSource", "RemoteSource"]
