"""
Logging configuration for the reconciler CLI.
Provides consistent logging setup across all commands.
"""

import logging
import sys


class DebugFormatter(logging.Formatter):
    """Formatter with timestamp and logger name, colored on a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        message = f"[{record.created:.3f}] {record.name}: {record.getMessage()}"
        if record.levelno >= logging.WARNING:
            message = f"{message} ({record.levelname})"
        if sys.stderr.isatty():
            cyan = '\033[0;36m'
            reset = '\033[0m'
            return f"{cyan}{message}{reset}"
        return message


def setup_logging(debug: bool = False, level: str = 'INFO') -> None:
    """Setup logging configuration.

    Args:
        debug: Enable debug logging (overrides level)
        level: Log level name used when debug is off
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))

    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(DebugFormatter())
    root_logger.addHandler(console_handler)

    # HTTP client internals stay quiet even in debug mode
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)

    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setFormatter(DebugFormatter())

    return logger
