"""
Project logger: console plus one rotating file.

The console handler resolves sys.stdout on every record, so redirected or
captured stdout (CLI pipes, test capture) sees log lines in the same stream
as printed output.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOG_NAME = "bloodchain"
LOG_FILE = "app.log"
LOG_DIR_ENV = "BLOODCHAIN_LOG_DIR"

MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

# Format: [TIME] [LEVEL] Message
_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class StdoutHandler(logging.StreamHandler):
    """StreamHandler bound to whatever sys.stdout is at emit time."""

    def __init__(self):
        super().__init__()

    @property
    def stream(self):
        return sys.stdout

    @stream.setter
    def stream(self, value):
        pass


def setup_logger(name=LOG_NAME, log_dir=None, level=logging.INFO):
    log_dir = log_dir or os.getenv(LOG_DIR_ENV, "logs")
    os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)

    for handler in (
        StdoutHandler(),
        RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
        ),
    ):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def set_level(level: str) -> None:
    """Apply a configured level name (DEBUG, INFO, ...) to the project logger."""
    logger.setLevel(logging.getLevelName(level))


# Singleton logger instance
logger = setup_logger()
