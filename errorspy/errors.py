"""
Structured errors.

A StructuredError annotates an underlying error with what failed (op), how
it is classified (kind, code) and where it was created (a call stack
snapshot). Wrapping one structured error in another keeps the chain but
hoists the classification to the outermost error, so callers can inspect
the top-level error without walking the chain:

    err = new_error(Op("users.Get"), Kind.NOT_EXIST, "user 42")
    err = new_error(Op("api.GetUser"), CODE_NOT_FOUND, err)
    str(err)  # "code : item does not exist: api.GetUser\nusers.Get\nuser 42"
"""

import copy
import io
import json
from typing import Any, Dict, Optional, Union

from .core.stack import Stack, get_stack_capturer
from .helper.error import StringError, errorf
from .helper.logging import get_logger
from .model.code import Code, Op
from .model.kind import Kind

logger = get_logger(__name__)

NO_ERROR = "No error"


class StructuredError(Exception):
    """
    An error with classification, context and a captured call stack.

    Instances are built with new_error() or ErrorBuilder. The wrapped error
    is never None; an empty StringError stands in when nothing was wrapped.
    """

    def __init__(
        self,
        code: int = 0,
        op: str = "",
        kind: Kind = Kind.OTHER,
        wrapped: Optional[BaseException] = None,
        stack: Optional[Stack] = None,
    ):
        super().__init__()
        self.code = Code(code)
        self.op = Op(op)
        self.kind = Kind(kind)
        self.wrapped: BaseException = (
            wrapped if wrapped is not None else StringError("")
        )
        self.stack: Stack = stack if stack is not None else Stack()

    def __str__(self) -> str:
        b = io.StringIO()

        if self.code != 0:
            _pad(b, ": ")
            b.write("code ")

        if self.kind != Kind.OTHER:
            _pad(b, ": ")
            b.write(self.kind.description)

        if self.op:
            _pad(b, ": ")
            b.write(self.op)

        _pad(b, "\n")
        b.write(str(self.wrapped))

        return b.getvalue() or NO_ERROR

    def __repr__(self) -> str:
        return (
            f"StructuredError(code={int(self.code)}, op={str(self.op)!r}, "
            f"kind={self.kind.name}, wrapped={self.wrapped!r})"
        )

    def unwrap(self) -> BaseException:
        """Return the next error in the chain."""
        return self.wrapped

    def format_stack(self) -> str:
        """The captured stack, one "\\n<file>:<line> <source>" per frame."""
        return str(self.stack)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary.

        The wrapped chain is rendered into "err" as a single string.
        """
        return {
            "code": int(self.code),
            "op": str(self.op),
            "kind": int(self.kind),
            "err": str(self.wrapped),
            "stack": self.stack.frames,
        }

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict())


def _pad(b: io.StringIO, separator: str) -> None:
    if b.tell() > 0:
        b.write(separator)


class ErrorBuilder:
    """
    Fluent construction of a StructuredError.

    ErrorBuilder().with_op("db.Insert").with_kind(Kind.DATABASE).with_wrapped(e).build()

    Setters may be called in any order and any subset. with_wrapped(None)
    makes build() return None, so a possibly-None error can be wrapped
    without checking it first.
    """

    def __init__(self):
        self._code = Code(0)
        self._op = Op("")
        self._kind = Kind.OTHER
        self._wrapped: Optional[BaseException] = None
        self._nil = False
        self._unknown: Optional[StringError] = None

    def with_code(self, code: int) -> "ErrorBuilder":
        self._code = Code(code)
        return self

    def with_op(self, op: str) -> "ErrorBuilder":
        self._op = Op(op)
        return self

    def with_kind(self, kind: Kind) -> "ErrorBuilder":
        self._kind = Kind(kind)
        return self

    def with_wrapped(self, wrapped: Union[str, BaseException, None]) -> "ErrorBuilder":
        """
        Set the error to wrap.

        :param wrapped: An exception, a message for a StringError, or None.
        """
        if wrapped is None:
            self._nil = True
        elif isinstance(wrapped, BaseException):
            self._wrapped = wrapped
        elif isinstance(wrapped, str):
            self._wrapped = StringError(wrapped)
        else:
            self._unknown = _unknown_fragment(wrapped)
        return self

    def build(self) -> Optional[Exception]:
        """
        Create the error, capturing the stack of the caller.

        :returns: The StructuredError, None if None was wrapped, or a plain
            StringError if an unsupported value was passed to with_wrapped.
        """
        if self._nil:
            return None
        if self._unknown is not None:
            return self._unknown
        return self._finish(get_stack_capturer().capture(skip=1))

    def _finish(self, stack: Stack) -> StructuredError:
        wrapped = self._wrapped
        if isinstance(wrapped, StructuredError):
            # The caller may still hold the inner error, merge into a copy.
            wrapped = copy.copy(wrapped)

        err = StructuredError(self._code, self._op, self._kind, wrapped, stack)
        _merge(err)
        return err


def _merge(err: StructuredError) -> None:
    prev = err.wrapped
    if not isinstance(prev, StructuredError):
        return

    # Keep only what differs from the outer error.
    if prev.code == err.code:
        prev.code = Code(0)
    if prev.kind == err.kind:
        prev.kind = Kind.OTHER

    # If this error has no kind, pull up the inner one.
    if err.kind == Kind.OTHER:
        err.kind = prev.kind
        prev.kind = Kind.OTHER


def _safe_repr(arg: Any) -> str:
    try:
        return repr(arg)
    except Exception:
        return object.__repr__(arg)


def _unknown_fragment(arg: Any) -> StringError:
    value = _safe_repr(arg)
    logger.warning(
        "unsupported error fragment", type=type(arg).__name__, value=value
    )
    return errorf("unknown type %s, value %s in error call", type(arg).__name__, value)


def new_error(*args: Any) -> Optional[Exception]:
    """
    Build a StructuredError from fragments given in any order.

    Code, Op and Kind values set the matching field. A plain string becomes
    the wrapped StringError, an exception is wrapped as is, and a
    StructuredError is wrapped as a copy with its redundant classification
    removed. The call stack of the caller is captured.

    :param args: At least one fragment.
    :returns: The new error, None if any fragment is None, or a plain
        StringError describing an unsupported fragment.
    :raises ValueError: If no fragment is given.
    """
    if not args:
        raise ValueError("no arguments provided to new_error")

    if any(arg is None for arg in args):
        return None

    builder = ErrorBuilder()
    for arg in args:
        if isinstance(arg, Kind):
            builder.with_kind(arg)
        elif isinstance(arg, Code):
            builder.with_code(arg)
        elif isinstance(arg, Op):
            builder.with_op(arg)
        elif isinstance(arg, (str, BaseException)):
            builder.with_wrapped(arg)
        else:
            return _unknown_fragment(arg)

    return builder._finish(get_stack_capturer().capture(skip=1))


def kind_of(err: Optional[BaseException]) -> Kind:
    """
    Return the first kind set along the chain of structured errors.

    :returns: The kind, or Kind.OTHER if none is set.
    """
    while isinstance(err, StructuredError):
        if err.kind != Kind.OTHER:
            return err.kind
        err = err.wrapped
    return Kind.OTHER


def is_kind(err: Optional[BaseException], kind: Kind) -> bool:
    """Report whether err is a structured error of the given kind."""
    return isinstance(err, StructuredError) and kind_of(err) == kind
