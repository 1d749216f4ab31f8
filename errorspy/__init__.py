"""
errorsPy - structured errors with classification and call stacks

Annotates errors with:
- The operation that failed
- A business-level kind and a transport-level code
- A lazily rendered call stack captured where the error was created
- Chaining without repeating classification already stated further out
"""

from ._version import __version__


# Core exports
from .errors import (
    StructuredError,
    ErrorBuilder,
    new_error,
    is_kind,
    kind_of,
)

from .model.kind import (
    Kind,
)

from .model.code import (
    Code,
    Op,
    CODE_BAD_REQUEST,
    CODE_SERVER_ERROR,
    CODE_INVALID,
    CODE_UNAUTHORIZED,
    CODE_FORBIDDEN,
    CODE_NOT_FOUND,
)

from .helper.error import (
    StringError,
    str_error,
    errorf,
)

from .helper.database import (
    is_no_rows,
    kind_from_database_error,
)

from .helper.config import (
    StackConfiguration,
    configure_stack,
)

from .helper.logging import (
    ErrorsLogger,
    get_logger,
    setup_logging,
)

from .core.stack import (
    Stack,
    StackCapturer,
    NullStackCapturer,
    set_stack_capturer,
)

# Import submodules for direct access
from . import core
from . import helper
from . import model

__all__ = [
    # Construction
    "StructuredError",
    "ErrorBuilder",
    "new_error",
    "is_kind",
    "kind_of",
    # Classification
    "Kind",
    "Code",
    "Op",
    "CODE_BAD_REQUEST",
    "CODE_SERVER_ERROR",
    "CODE_INVALID",
    "CODE_UNAUTHORIZED",
    "CODE_FORBIDDEN",
    "CODE_NOT_FOUND",
    # String errors
    "StringError",
    "str_error",
    "errorf",
    # Database helpers
    "is_no_rows",
    "kind_from_database_error",
    # Stack capture
    "Stack",
    "StackCapturer",
    "NullStackCapturer",
    "set_stack_capturer",
    "StackConfiguration",
    "configure_stack",
    # Logging
    "ErrorsLogger",
    "get_logger",
    "setup_logging",
    # Submodules
    "core",
    "helper",
    "model",
    # Version info
    "__version__",
]
