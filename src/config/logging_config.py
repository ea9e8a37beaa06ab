# src/config/logging_config.py

"""Per-run logging for basket_search.

Every launch writes to its own ``logs/run_<timestamp>.log`` file. All
``basket_search.*`` loggers share that file, so a single run (capture,
fan-out, intersection) can be read top to bottom in one place. The
console only shows warnings unless ``verbose`` is requested.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "basket_search"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at DEBUG
_QUIET_LOGGERS = ("asyncio", "curl_cffi")


def setup_logging(verbose: bool = False) -> Path:
    """Attach file and console handlers to the project logger.

    Args:
        verbose: Lower the console threshold from WARNING to DEBUG.

    Returns:
        Path of the log file for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{stamp}.log"

    project_logger = logging.getLogger(ROOT_LOGGER_NAME)
    project_logger.setLevel(logging.DEBUG)

    # Already configured (tests, repeated entry points)
    if project_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(
        logging.DEBUG if verbose else logging.WARNING
    )
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    project_logger.addHandler(file_handler)
    project_logger.addHandler(console_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    project_logger.debug("Logging to %s", log_file)
    return log_file
