"""Log setup for the jfifdump command. The dump owns stdout, logs use stderr."""
import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> None:
    """
    Attach stderr (and optionally `log_file`) handlers to the 'jfifdump' logger.

    At DEBUG the reader reports every marker it finds; at WARNING only bytes
    it had to skip between segments.
    """
    logger = logging.getLogger("jfifdump")
    logger.setLevel(level)

    # main() may run more than once in one process (tests)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging to stderr%s", f" and {log_file}" if log_file else "")
