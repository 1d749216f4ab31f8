"""
Pretty logging utilities for errorspy.
Colored console output with key=value context, aware of structured errors.
"""

import logging
import sys
from typing import Any, Optional, TextIO


class ColorFormatter(logging.Formatter):
    """
    Colored log formatter for console output.
    """

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[95m",  # Magenta
        "INFO": "\033[94m",  # Blue
        "WARNING": "\033[93m",  # Yellow
        "ERROR": "\033[91m",  # Red
        "CRITICAL": "\033[95m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        """
        Initialize the color formatter.

        :param use_colors: Whether to use colors in the output.
        :param include_timestamp: Whether to include timestamps in log messages.
        """
        self.use_colors = use_colors and sys.stdout.isatty()
        self.include_timestamp = include_timestamp

        if include_timestamp:
            fmt = "%(asctime)s %(levelname)s: %(message)s"
        else:
            fmt = "%(levelname)s: %(message)s"

        super().__init__(fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record with colors.

        :param record: The log record to format.
        :returns: The formatted log message string.
        """
        formatted = super().format(record)

        if self.use_colors and record.levelname in self.COLORS:
            color = self.COLORS[record.levelname]
            reset = self.COLORS["RESET"]
            parts = formatted.split(": ", 1)
            if len(parts) == 2:
                level_part, message_part = parts
                formatted = f"{color}{level_part}: {reset}{message_part}"

        return formatted


class ErrorsLogger:
    """
    Logger used by errorspy and by applications reporting its errors.
    Appends keyword context as key=value pairs and can print the captured
    call stack of a structured error below the message.
    """

    def __init__(
        self,
        name: str = "errorspy",
        level: int = logging.INFO,
        use_colors: bool = True,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize the logger.

        :param name: Logger name.
        :param level: Logging level.
        :param use_colors: Whether to use colored output.
        :param stream: Output stream (defaults to sys.stdout).
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Remove existing handlers to avoid duplicates
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        handler = logging.StreamHandler(stream or sys.stdout)
        formatter = ColorFormatter(use_colors=use_colors)
        handler.setFormatter(formatter)

        self.logger.addHandler(handler)
        self.logger.propagate = False

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message with optional context."""
        self.log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message with optional context."""
        self.log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message with optional context."""
        self.log_with_context(logging.WARNING, message, **kwargs)

    def error(
        self,
        message: str,
        error: Optional[BaseException] = None,
        with_stack: bool = False,
        **kwargs: Any,
    ) -> None:
        """
        Log error message with optional exception and context.

        :param message: The log message.
        :param error: Optional exception to include in the log.
        :param with_stack: Append the captured stack if error carries one.
        :param kwargs: Additional context to include in the log.
        """
        self.log_with_context(
            logging.ERROR, _with_error(message, error, with_stack), **kwargs
        )

    def critical(
        self,
        message: str,
        error: Optional[BaseException] = None,
        with_stack: bool = False,
        **kwargs: Any,
    ) -> None:
        """
        Log critical message with optional exception and context.

        :param message: The log message.
        :param error: Optional exception to include in the log.
        :param with_stack: Append the captured stack if error carries one.
        :param kwargs: Additional context to include in the log.
        """
        self.log_with_context(
            logging.CRITICAL, _with_error(message, error, with_stack), **kwargs
        )

    def log_with_context(self, level: int, message: str, **kwargs: Any) -> None:
        """
        Log message with additional context information.

        :param level: Logging level.
        :param message: The log message.
        :param kwargs: Additional context to include in the log.
        """
        if kwargs:
            context_parts = [f"{k}={v}" for k, v in kwargs.items()]
            context_str = " | " + " ".join(context_parts)
            message += context_str

        self.logger.log(level, message)

    def set_level(self, level: int) -> None:
        """Set the logging level."""
        self.logger.setLevel(level)


def _with_error(
    message: str, error: Optional[BaseException], with_stack: bool
) -> str:
    if error is None:
        return message
    message = f"{message}: {error}"
    # Anything exposing format_stack() carries a captured call stack.
    format_stack = getattr(error, "format_stack", None)
    if with_stack and callable(format_stack):
        message += format_stack()
    return message


# Default logger instance
_default_logger: Optional[ErrorsLogger] = None


def get_logger(name: str = "errorspy") -> ErrorsLogger:
    """
    Get or create a logger instance.

    :param name: Logger name.
    :returns: ErrorsLogger instance.
    """
    global _default_logger
    if _default_logger is None or _default_logger.logger.name != name:
        _default_logger = ErrorsLogger(name)
    return _default_logger


def setup_logging(
    level: int = logging.INFO, use_colors: bool = True, name: str = "errorspy"
) -> ErrorsLogger:
    """
    Setup logging for the application.

    :param level: Logging level.
    :param use_colors: Whether to use colors in logs.
    :param name: Logger name.
    :returns: Configured ErrorsLogger instance.
    """
    logger = ErrorsLogger(name, level, use_colors)

    global _default_logger
    _default_logger = logger

    return logger
