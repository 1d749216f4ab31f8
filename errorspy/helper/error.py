"""
Plain string errors.
Used as the leaf of a structured error chain when only a message is known.
"""

from typing import Any


class StringError(Exception):
    """
    Minimal error carrying nothing but its message.
    """

    def __init__(self, text: str = ""):
        super().__init__(text)
        self.text = text

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"StringError({self.text!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StringError):
            return NotImplemented
        return self.text == other.text

    def __hash__(self) -> int:
        return hash(self.text)


def str_error(text: str) -> StringError:
    """Wrap a plain string into an error value."""
    return StringError(text)


def errorf(format: str, *args: Any) -> StringError:
    """
    Build a string error from a printf-style format.

    errorf("user %d not found", 42)

    A format that does not fit its arguments never raises, the format and
    the arguments are kept side by side instead.
    """
    if not args:
        return StringError(format)
    try:
        return StringError(format % args)
    except (TypeError, ValueError):
        return StringError(f"{format} {args!r}")
