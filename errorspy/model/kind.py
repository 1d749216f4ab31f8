"""
Business-level error classification.
"""

from enum import IntEnum


class Kind(IntEnum):
    """
    Closed set of error kinds.

    The integer values are part of the public contract, they are written
    into the JSON form of an error and must stay stable.
    """

    OTHER = 0  # Unclassified error. This value is not printed in the error message.
    INVALID = 1  # Invalid operation, or the request failed a validation.
    PERMISSION = 2  # Permission denied.
    IO = 3  # External I/O error e.g. disk or network.
    EXIST = 4  # Item already exists.
    NOT_EXIST = 5  # Item does not exist.
    TIMEOUT = 6  # Timeout has occured e.g. transient network error.
    DATABASE = 7  # A database error has occured e.g. deadlock.
    ENCODING = 8  # An encoding error e.g. writing an HTTP response.
    DECODING = 9  # A decoding error e.g. decoding an HTTP request body.
    HTTP = 10  # An HTTP error not related to network issues.
    DUPLICATE_KEY = 11  # A duplicate key error from the database.
    CANCELED = 12  # A request was canceled.
    UNIMPLEMENTED = 13  # The feature has not been implemented.
    UNSUPPORTED_SYNTAX = 14  # The syntax is not supported e.g. in a parser.

    @property
    def description(self) -> str:
        """Human-readable text used in error messages."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    Kind.OTHER: "other error",
    Kind.INVALID: "invalid operation",
    Kind.PERMISSION: "permission denied",
    Kind.IO: "I/O error",
    Kind.EXIST: "item already exists",
    Kind.NOT_EXIST: "item does not exist",
    Kind.TIMEOUT: "timeout error",
    Kind.DATABASE: "database error",
    Kind.ENCODING: "encoding error",
    Kind.DECODING: "decoding error",
    Kind.HTTP: "HTTP error",
    Kind.DUPLICATE_KEY: "duplicate key error",
    Kind.CANCELED: "request canceled",
    Kind.UNIMPLEMENTED: "unimplemented",
    Kind.UNSUPPORTED_SYNTAX: "unsupported syntax",
}
