"""Entry point for the game launcher."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from app.config import get_app_config, load_app_config
from app.version import get_app_version
from services.launcher import build_launcher
from shared.logging_config import ensure_app_logging


logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Keep the game up to date and start it.")
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Directory holding the installed game (defaults to GAME_LAUNCHER_ROOT or the working directory).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an alternative app.json configuration file.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = load_app_config(args.config) if args.config is not None else get_app_config()
    ensure_app_logging(config.log_verbosity)
    logger.info("Game launcher %s starting", get_app_version())

    viewmodel = build_launcher(args.root, config=config)

    from ui.launcher_window import LauncherWindow

    window = LauncherWindow(viewmodel)
    window.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
