"""Logging utilities for load-report.

This module provides centralized logging configuration with support for:
- Console and file output
- Configurable log levels
- Contextual prefixes (report name, section) on log messages
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that adds contextual information to log messages."""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        """Initialize context logger.

        Args:
            logger: Base logger instance.
            extra: Extra context to add to all log messages.
        """
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Prefix the message with ``[key=value ...]`` context."""
        if self.extra:
            context_parts = [f"{k}={v}" for k, v in self.extra.items()]
            msg = f"[{' '.join(context_parts)}] {msg}"
        return msg, kwargs


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    verbose: bool = False,
    log_to_console: bool = True,
) -> logging.Logger:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for log output.
        verbose: If True, set level to DEBUG.
        log_to_console: If True, log to stderr.

    Returns:
        Configured root logger.
    """
    if verbose:
        level = "DEBUG"

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # stdout is reserved for report output when rendering to "-"
    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger


def get_logger(name: str, context: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """Get a logger instance with optional context.

    Args:
        name: Logger name (typically __name__).
        context: Optional context dictionary to add to all log messages.

    Returns:
        Logger instance (ContextLogger if context provided, else standard Logger).
    """
    logger = logging.getLogger(name)

    if context:
        return ContextLogger(logger, context)

    return logger

