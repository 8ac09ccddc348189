"""
Logging configuration for the thai_anki pipeline.

Provides a centralized logging setup with human-readable output and structured context fields.
"""
import logging
import sys
from typing import Optional, TextIO


# Attributes every LogRecord carries; anything else came in through ``extra=``.
_STANDARD_RECORD_ATTRS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'asctime', 'getMessage', 'taskName',
})


class ContextFormatter(logging.Formatter):
    """Formatter that appends structured context fields to log messages.

    Supports extra fields passed via logger.info("msg", extra={...})
    Format: timestamp [LEVEL] logger_name: message | key1=value1 key2=value2
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m',
        'GRAY': '\033[90m',       # Gray for extra fields
    }

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, use_color: bool = True):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        base_msg = super().format(record)

        levelname = record.levelname
        if self.use_color and levelname in self.COLORS:
            colored_level = f"{self.COLORS[levelname]}[{levelname}]{self.COLORS['RESET']}"
            base_msg = base_msg.replace(f"[{levelname}]", colored_level)

        extra_fields = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS and value is not None
        ]

        if not extra_fields:
            return base_msg
        if self.use_color:
            return f"{base_msg}{self.COLORS['GRAY']} | {' '.join(extra_fields)}{self.COLORS['RESET']}"
        return f"{base_msg} | {' '.join(extra_fields)}"


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Configure logging for the whole ``thai_anki`` namespace.

    Log output goes to stderr by default so that stdout only carries the
    completion notice of a run.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               DEBUG prints every resolved definition.
        stream: Optional stream override (mainly for tests).

    Example:
        >>> from thai_anki.common.logging_config import setup_logging
        >>> setup_logging("DEBUG")
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    stream = stream or sys.stderr

    formatter = ContextFormatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        use_color=hasattr(stream, "isatty") and stream.isatty(),
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger('thai_anki')
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Resolved definitions", extra={"resolved": 10, "total": 100})
    """
    return logging.getLogger(name)
