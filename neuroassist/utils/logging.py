"""
Structured Logging Configuration

One line per event: UTC timestamp, level, logger name, message. Everything
under the ``neuroassist`` package logs through here; the application entry
point calls setup_logging once with the configured level.

Log lines carry the classification method, stroke type and eligibility,
never raw patient fields or image data.
"""
import logging
import sys
from typing import Optional
from datetime import datetime, timezone

PACKAGE_LOGGER = "neuroassist"

# Third-party loggers that are chatty at INFO during every image read
NOISY_LOGGERS = ("httpx", "httpcore", "langchain_google_genai", "google_genai")


class StructuredFormatter(logging.Formatter):
    """`[timestamp] LEVEL    [logger] message`, optionally coloured by level."""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        line = f"[{timestamp}] {record.levelname:8} [{record.name}] {record.getMessage()}"

        if self.use_color and record.levelname in self.LEVEL_COLORS:
            line = f"{self.LEVEL_COLORS[record.levelname]}{line}{self.RESET}"

        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger. Safe to call more than once: handlers
    installed by an earlier call are replaced, not duplicated.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path; file output is never coloured

    Returns:
        The configured ``neuroassist`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter(use_color=False))
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass ``__name__``."""
    return logging.getLogger(name)
