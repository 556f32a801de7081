"""Constants shared across the launcher service modules."""

from __future__ import annotations

LOCAL_DESCRIPTOR_NAME = "version.txt"
DOWNLOAD_CHUNK_SIZE = 64 * 1024
USER_AGENT_PREFIX = "GameLauncher"

MAX_ARCHIVE_TOTAL_BYTES = 4 * 1024 * 1024 * 1024  # 4 GiB
MAX_ARCHIVE_FILE_SIZE = 2 * 1024 * 1024 * 1024  # 2 GiB per file
MAX_ARCHIVE_ENTRIES = 50000
MAX_COMPRESSION_RATIO = 1000  # Uncompressed vs compressed bytes

INSTALL_ROOT_ENV = "GAME_LAUNCHER_ROOT"
LOCAL_RELEASE_ENV = "GAME_LAUNCHER_LOCAL_RELEASE_DIR"
