"""Logging setup."""

import logging
from pathlib import Path
from typing import Optional

LOG_DIR = Path.home() / ".cache" / "satellite-launcher"
_HANDLER_TAG = "_satellite_handler"


def setup_logging(verbose: bool = False, log_dir: Optional[Path] = None) -> Path:
    """Attach the launcher's file and console handlers to the root logger.

    Calling it again replaces the handlers it installed before. Returns the
    log file path.
    """
    log_dir = log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "launcher.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(handler)
        handler.close()

    # File handler
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    for handler in (file_handler, console_handler):
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)

    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    return log_file
