"""
Logging configuration for httpsupport.

Console logging for the CLI, optional rotating log files, and a record
of failed requests. Transport failure records carry `method` and `url`
attributes so file logs can be filtered per request.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from httpsupport.exceptions import TransportError

PACKAGE_LOGGER = "httpsupport"

logger = logging.getLogger(__name__)


class RequestFormatter(logging.Formatter):
    """Appends the request of a failure record, when there is one."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        method = getattr(record, "method", None)
        url = getattr(record, "url", None)
        if method or url:
            line += f" | request={method or '-'} {url or '-'}"
        return line


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
    enable_console: bool = True,
) -> logging.Logger:
    """
    Set up the httpsupport logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Rotating log file; no file logging when omitted
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
        enable_console: Log to stderr, keeping command output on stdout clean

    Returns:
        The package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper()))
    package_logger.handlers.clear()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        package_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(RequestFormatter(
            fmt='%(asctime)s | %(levelname)-8s | %(name)-24s | %(lineno)-4d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        package_logger.addHandler(file_handler)

    package_logger.propagate = False
    return package_logger


def configure_logging(debug: bool = False, log_file: str | None = None) -> logging.Logger:
    """CLI logging: warnings only unless debugging or writing a log file."""
    if debug:
        level = "DEBUG"
    elif log_file:
        level = "INFO"
    else:
        level = "WARNING"
    return setup_logging(level=level, log_file=log_file)


def track_error(error: TransportError) -> None:
    """Log a failed request with its method and URL attached to the record."""
    logger.error(
        str(error),
        extra={"method": error.method, "url": error.url},
        exc_info=error.__cause__ if logger.isEnabledFor(logging.DEBUG) else None,
    )
