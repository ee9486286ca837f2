"""Logging configuration for Img2FTPS.

Provides centralized logging with credential redaction so FTPS
passwords never reach the console or log files.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional


APP_LOGGER = "img2ftps"

# Credential patterns to redact from logs
PII_PATTERNS = [
    (re.compile(r'(password["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    (re.compile(r'(passwd["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    (re.compile(r'(pass["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    # FTP/FTPS URLs with credentials
    (re.compile(r'(ftps?)://[^:/@\s]+:[^@\s]+@'), r'\1://[REDACTED]@'),
]


class PIIRedactingFormatter(logging.Formatter):
    """Formatter that redacts credentials from log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, redacting any credentials."""
        message = super().format(record)
        for pattern, replacement in PII_PATTERNS:
            message = pattern.sub(replacement, message)
        return message


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure uploader logging with credential redaction.

    Progress lines ("Start uploading [name]", "[name] uploaded!", ...)
    are emitted at INFO by the img2ftps.* loggers.

    Args:
        level: Logging level (default INFO)
        log_file: Optional file path for log output
        console: Whether to output to console (default True)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level)

    logger.handlers.clear()

    formatter = PIIRedactingFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

