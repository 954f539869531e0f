"""Core logging implementation for form-builder."""

import logging
import sys

__all__ = ["get_logger", "setup_logging", "resolve_level"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Request-per-line chatter from the persistence client
QUIET_LOGGERS = ("httpx", "httpcore")


def resolve_level(level: int | str) -> int:
    """Turn a level name ("debug", "INFO") or number into a logging level.

    Unknown names resolve to INFO.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level, numeric or by name. HTTP client loggers
            stay at WARNING unless this is DEBUG.
        stream: Output stream.
    """
    resolved = resolve_level(level)
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        stream=stream,
        force=True,
    )
    quiet_level = logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or "form-builder")
