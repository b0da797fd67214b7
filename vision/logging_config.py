"""Logging configuration for the vision pipeline.

Every record is written to stderr as a single line prefixed with its
level name, e.g. ``[Warning] Capture source reported no frame rate``.
"""
import logging
import sys
from typing import Iterable, Optional, TextIO

LEVEL_PREFIXES = {
    logging.CRITICAL: "Error",
    logging.ERROR: "Error",
    logging.WARNING: "Warning",
    logging.INFO: "Info",
    logging.DEBUG: "Debug",
}

DEFAULT_LOGGERS = ("vision", "pipeline")


class LevelPrefixFormatter(logging.Formatter):
    """Formatter producing ``[Level] message`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = LEVEL_PREFIXES.get(record.levelno, record.levelname.capitalize())
        message = record.getMessage()
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            message = f"{message}\n{record.exc_text}"
        return f"[{prefix}] {message}"


def setup_logging(debug: bool = False,
                  stream: Optional[TextIO] = None,
                  names: Iterable[str] = DEFAULT_LOGGERS) -> logging.Handler:
    """Attach a stderr handler to the pipeline loggers.

    Args:
        debug: Emit DEBUG records when True, otherwise INFO and above
        stream: Output stream, defaults to ``sys.stderr``
        names: Logger names to configure

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(LevelPrefixFormatter())
    level = logging.DEBUG if debug else logging.INFO

    for name in names:
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            if isinstance(getattr(existing, "formatter", None), LevelPrefixFormatter):
                logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.setLevel(level)

    return handler
