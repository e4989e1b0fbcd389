"""
Logging Configuration
Attaches handlers to the 'slideeditor' logger. Library modules only call
logging.getLogger(__name__); a host (the CLI, a Qt shell, a test) decides
where records go.
"""
import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "slideeditor"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configures the 'slideeditor' namespace.

    Args:
        level: Logging level for the package logger and every handler.
        log_file: Optional path; records are also written there (truncated on start).
        stream: Console stream. Defaults to stderr so that JSON written to
            stdout by the CLI stays machine-readable.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    teardown_logging()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # 1. Console
    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 2. File (optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
    return logger


def teardown_logging() -> None:
    """Close and detach every handler previously added by setup_logging()."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
