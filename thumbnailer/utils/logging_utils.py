"""
Logging Utilities for the thumbnail generator

This module provides centralized logging configuration for the CLI and the
thumbnail service. Every line carries the run ID so that the progress of one
thumbnail run (read, serve, capture, write, teardown) can be followed even
when several runs share a log stream.
"""
import logging
import uuid
from typing import Optional, Union


DEFAULT_LOGGER_NAME = "thumbnailer"


class RunIdFilter(logging.Filter):
    """Give records logged without an adapter a placeholder run_id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "run_id"):
            record.run_id = "-"
        return True


def setup_logger(
    log_level: Union[int, str] = logging.INFO,
    logger_name: str = DEFAULT_LOGGER_NAME
) -> logging.Logger:
    """
    Configure the thumbnailer logger.

    Args:
        log_level: Logging level constant or level name ("DEBUG", "INFO", ...).
                  Defaults to logging.INFO (20).
        logger_name: Name for the logger instance. Defaults to "thumbnailer".

    Returns:
        Configured Logger instance ready for use with get_run_logger().

    Example:
        >>> logger = setup_logger(log_level="DEBUG")
        >>> run_logger = get_run_logger("3f2a9c1d")
        >>> run_logger.info("Reading video")
        2026-10-17 10:30:45 | INFO | [3f2a9c1d] Reading video
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    log_format = logging.Formatter(
        '%(asctime)s | %(levelname)s | [%(run_id)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)

    # Prevent duplicate handlers if logger already configured
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(log_format)
        console_handler.addFilter(RunIdFilter())
        logger.addHandler(console_handler)

    return logger


def new_run_id() -> str:
    """Short random identifier for one thumbnail run."""
    return uuid.uuid4().hex[:8]


def get_run_logger(
    run_id: Optional[str] = None,
    base_logger: Optional[logging.Logger] = None
) -> logging.LoggerAdapter:
    """
    Create a logger adapter with the run ID for tracing.

    Args:
        run_id: Identifier for the run. A new one is generated if None.
        base_logger: Optional base logger to wrap. If None, uses the
                    "thumbnailer" logger.

    Returns:
        LoggerAdapter configured to inject run_id into all log messages.
    """
    if base_logger is None:
        base_logger = logging.getLogger(DEFAULT_LOGGER_NAME)

    return logging.LoggerAdapter(base_logger, {"run_id": run_id or new_run_id()})
