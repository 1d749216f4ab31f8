"""
Helper package for errorspy.
Provides string errors, database error helpers, logging and configuration.
"""

from .error import (
    StringError,
    str_error,
    errorf,
)

from .database import (
    NO_ROWS_MESSAGE,
    is_no_rows,
    kind_from_database_error,
)

from .config import (
    StackConfiguration,
    configure_stack,
    get_stack_configuration,
)

from .logging import (
    ErrorsLogger,
    ColorFormatter,
    get_logger,
    setup_logging,
)

__all__ = [
    # String errors
    "StringError",
    "str_error",
    "errorf",
    # Database helpers
    "NO_ROWS_MESSAGE",
    "is_no_rows",
    "kind_from_database_error",
    # Configuration
    "StackConfiguration",
    "configure_stack",
    "get_stack_configuration",
    # Logging utilities
    "ErrorsLogger",
    "ColorFormatter",
    "get_logger",
    "setup_logging",
]
