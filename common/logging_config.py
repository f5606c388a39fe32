import logging
import os
import sys
from typing import Optional, TextIO

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def resolve_log_level(log_level: Optional[str] = None) -> int:
    """
    Turn a level name into a logging level.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR). Defaults to the
            LOG_LEVEL env var, then INFO

    Returns:
        Numeric logging level (INFO for unknown names)
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')
    level = getattr(logging, log_level.upper(), None)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    Modules obtain child loggers with get_logger(__name__), so configuring
    'filler' covers every logger under the filler package.

    Args:
        component_name: Name of the component (e.g., 'filler', 'cli')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO
        stream: Stream for the handler (default: stderr)

    Returns:
        Configured logger instance
    """
    level = resolve_log_level(log_level)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
