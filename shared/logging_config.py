"""Central logging configuration for the launcher.

Diagnostics from the update cycle end up in a single log file so failed
installs can be investigated after the window is closed. Repeated calls never
register duplicate handlers.

Two environment variables choose where the log file is written:

``GAME_LAUNCHER_LOG_FILE``
    Absolute path to the log file that should be created.

``GAME_LAUNCHER_LOG_DIR``
    Directory where the default log file name will be created.  Ignored when
    ``GAME_LAUNCHER_LOG_FILE`` is present.

The user's home directory is replaced by ``<user_home>`` in every record.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Iterable

_LOG_FILE_ENV = "GAME_LAUNCHER_LOG_FILE"
_LOG_DIR_ENV = "GAME_LAUNCHER_LOG_DIR"
_DEFAULT_DIRNAME = ".game_launcher"
_DEFAULT_LOGNAME = "launcher.log"
_HANDLER_TAG = "_game_launcher_logging_handler"

USER_HOME_PLACEHOLDER = "<user_home>"

_CONFIGURED = False
_LOG_PATH: Path | None = None
_FILE_HANDLER: logging.FileHandler | None = None


class LogVerbosity(str, Enum):
    """Verbosity levels supported by the launcher log file."""

    DISABLED = "disabled"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    VERBOSE = "verbose"


_VERBOSITY_LEVELS: dict[LogVerbosity, int] = {
    LogVerbosity.DISABLED: logging.CRITICAL + 1,
    LogVerbosity.ERROR: logging.ERROR,
    LogVerbosity.WARNING: logging.WARNING,
    LogVerbosity.INFO: logging.INFO,
    LogVerbosity.VERBOSE: logging.DEBUG,
}

_DEFAULT_VERBOSITY = LogVerbosity.INFO
_CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


def _home_patterns() -> tuple[re.Pattern[str], ...]:
    candidates = {str(Path.home())}
    for env_var in ("HOME", "USERPROFILE"):
        value = os.environ.get(env_var)
        if value:
            candidates.add(os.path.expanduser(value))
    flags = re.IGNORECASE if os.name == "nt" else 0
    patterns = []
    # Longest first so nested home paths are replaced whole.
    for candidate in sorted(candidates, key=len, reverse=True):
        normalised = os.path.normpath(candidate)
        if normalised in {os.sep, "", "."}:
            continue
        patterns.append(re.compile(re.escape(normalised), flags))
    return tuple(patterns)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._patterns = _home_patterns()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        for pattern in self._patterns:
            formatted = pattern.sub(USER_HOME_PLACEHOLDER, formatted)
        return formatted


def ensure_app_logging(verbosity: LogVerbosity | str | None = None) -> Path:
    """Configure the root logger for the launcher.

    The first call installs a file handler and, when stderr is interactive, a
    console handler at INFO level. Later calls only return the log path (and
    apply ``verbosity`` when given).
    """

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER

    if not (_CONFIGURED and _LOG_PATH is not None):
        log_path = _resolve_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        root = logging.getLogger()
        root.setLevel(logging.DEBUG)

        formatter = _RedactingFormatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(_VERBOSITY_LEVELS[_CURRENT_VERBOSITY])
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_TAG, True)
        root.addHandler(file_handler)
        _FILE_HANDLER = file_handler

        if _should_log_to_stderr(root.handlers):
            stream_handler = logging.StreamHandler()
            stream_handler.setLevel(logging.INFO)
            stream_handler.setFormatter(formatter)
            setattr(stream_handler, _HANDLER_TAG, True)
            root.addHandler(stream_handler)

        _CONFIGURED = True
        _LOG_PATH = log_path
        logging.getLogger(__name__).info("Writing launcher logs to %s", log_path)

    if verbosity is not None:
        set_file_log_verbosity(verbosity)
    assert _LOG_PATH is not None
    return _LOG_PATH


def set_file_log_verbosity(verbosity: LogVerbosity | str) -> None:
    """Adjust the minimum severity recorded in the log file."""

    global _CURRENT_VERBOSITY

    if isinstance(verbosity, str) and not isinstance(verbosity, LogVerbosity):
        try:
            verbosity = LogVerbosity(verbosity.strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported log verbosity: {verbosity}") from exc

    _CURRENT_VERBOSITY = verbosity
    handler = _FILE_HANDLER
    if handler is not None:
        handler.setLevel(_VERBOSITY_LEVELS[verbosity])
    logging.getLogger(__name__).debug("File log verbosity set to %s", verbosity.value)


def get_file_log_verbosity() -> LogVerbosity:
    return _CURRENT_VERBOSITY


def _resolve_log_path() -> Path:
    env_file = os.environ.get(_LOG_FILE_ENV)
    if env_file:
        return Path(env_file).expanduser()

    env_dir = os.environ.get(_LOG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser() / _DEFAULT_LOGNAME

    return Path.home() / _DEFAULT_DIRNAME / "logs" / _DEFAULT_LOGNAME


def _should_log_to_stderr(handlers: Iterable[logging.Handler]) -> bool:
    stderr = getattr(sys, "stderr", None)
    is_tty = getattr(stderr, "isatty", None)
    if not callable(is_tty):
        return False
    try:
        if not is_tty():
            return False
    except (OSError, ValueError):
        return False

    for handler in handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is stderr:
            return False
    return True


def _reset_for_tests() -> None:
    """Remove handlers installed by :func:`ensure_app_logging`."""

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _CURRENT_VERBOSITY

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    _CONFIGURED = False
    _LOG_PATH = None
    _FILE_HANDLER = None
    _CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


__all__ = [
    "LogVerbosity",
    "USER_HOME_PLACEHOLDER",
    "ensure_app_logging",
    "get_file_log_verbosity",
    "set_file_log_verbosity",
]
