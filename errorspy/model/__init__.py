"""
Model package for errorspy.

Contains the classification types attached to structured errors.
"""

from .kind import Kind
from .code import (
    Code,
    Op,
    CODE_BAD_REQUEST,
    CODE_SERVER_ERROR,
    CODE_INVALID,
    CODE_UNAUTHORIZED,
    CODE_FORBIDDEN,
    CODE_NOT_FOUND,
)

__all__ = [
    "Kind",
    "Code",
    "Op",
    # Named codes
    "CODE_BAD_REQUEST",
    "CODE_SERVER_ERROR",
    "CODE_INVALID",
    "CODE_UNAUTHORIZED",
    "CODE_FORBIDDEN",
    "CODE_NOT_FOUND",
]
