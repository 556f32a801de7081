"""Archive extraction for downloaded payload releases."""

from __future__ import annotations

import logging
import shutil
import zipfile
from pathlib import Path

from services.launcher import constants
from services.launcher.models import InstallError


_LOGGER = logging.getLogger(__name__)

__all__ = ["extract_archive", "extract_zip_safely"]


def extract_archive(
    archive_path: Path,
    destination: Path,
    *,
    max_compression_ratio: int | None = None,
) -> int:
    """Unpack ``archive_path`` directly beneath ``destination``.

    Returns the number of archive members processed. ``max_compression_ratio``
    overrides :data:`constants.MAX_COMPRESSION_RATIO` when given.
    """

    _LOGGER.info("Extracting archive %s into %s", archive_path, destination)
    destination.mkdir(parents=True, exist_ok=True)
    try:
        with zipfile.ZipFile(archive_path) as archive:
            return extract_zip_safely(
                archive, destination, max_compression_ratio=max_compression_ratio
            )
    except (OSError, zipfile.BadZipFile) as exc:
        raise InstallError(f"Failed to extract archive: {exc}") from exc


def extract_zip_safely(
    archive: zipfile.ZipFile,
    target_dir: Path,
    *,
    max_compression_ratio: int | None = None,
) -> int:
    ratio_limit = max_compression_ratio or constants.MAX_COMPRESSION_RATIO
    root = target_dir.resolve()
    total_bytes = 0
    processed_entries = 0
    for member in archive.infolist():
        name = member.filename
        if not name:
            continue
        processed_entries += 1
        if processed_entries > constants.MAX_ARCHIVE_ENTRIES:
            _LOGGER.error(
                "Archive entry count %s exceeded limit %s",
                processed_entries,
                constants.MAX_ARCHIVE_ENTRIES,
            )
            raise InstallError("Archive contained too many entries")
        path = Path(name)
        if path.is_absolute() or name.startswith(("/", "\\")):
            raise InstallError(f"Archive contained an absolute path entry: {name}")
        destination = (root / path).resolve()
        try:
            destination.relative_to(root)
        except ValueError:
            raise InstallError(f"Archive contained an unsafe relative path: {name}") from None
        if member.is_dir():
            destination.mkdir(parents=True, exist_ok=True)
            continue
        if member.file_size > constants.MAX_ARCHIVE_FILE_SIZE:
            _LOGGER.error(
                "Archive member %s exceeded file size limit (%s > %s)",
                name,
                member.file_size,
                constants.MAX_ARCHIVE_FILE_SIZE,
            )
            raise InstallError("Archive contained an oversized file")
        if member.compress_size == 0 and member.file_size > 0:
            _LOGGER.error("Archive member %s reported zero compression size", name)
            raise InstallError("Archive contained a suspiciously compressed file")
        if (
            member.compress_size > 0
            and member.file_size > member.compress_size * ratio_limit
        ):
            _LOGGER.error(
                "Archive member %s exceeded compression ratio limit (%s > %s)",
                name,
                member.file_size,
                member.compress_size * ratio_limit,
            )
            raise InstallError("Archive exceeded safe compression ratio")
        total_bytes += member.file_size
        if total_bytes > constants.MAX_ARCHIVE_TOTAL_BYTES:
            raise InstallError("Archive expanded beyond safe limits")
        destination.parent.mkdir(parents=True, exist_ok=True)
        with archive.open(member) as source, destination.open("wb") as target:
            shutil.copyfileobj(source, target)

    _LOGGER.info(
        "Extracted %s entries totalling %s bytes", processed_entries, total_bytes
    )
    return processed_entries
