"""
Call stack snapshots attached to structured errors.

Capturing only records where each frame is (file, line, module, function),
which is cheap enough to do for every error. Turning that into readable
trace lines means reading source files, so it is done lazily the first time
the trace is asked for and then kept.
"""

import inspect
import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from ..helper.config import DEFAULT_UNWANTED_FRAMES, get_stack_configuration
from ..helper.logging import get_logger

logger = get_logger(__name__)

SEP = "/"
DUNNO = "?"
LOCALS = ".<locals>."
DOT = "."


class RawFrame(NamedTuple):
    """A captured, unresolved call frame."""

    filename: str
    lineno: int
    module: str
    qualname: str


class Stack:
    """
    A call stack snapshot, rendered once on first access.

    Frames are ordered innermost first. Rendering stops at the first frame
    whose file path contains one of the unwanted names; that frame and
    everything outside it are dropped.
    """

    def __init__(
        self,
        frames: Iterable[RawFrame] = (),
        unwanted_frames: Optional[Iterable[str]] = None,
    ):
        self._raw: Tuple[RawFrame, ...] = tuple(frames)
        self._unwanted: Tuple[str, ...] = (
            tuple(unwanted_frames)
            if unwanted_frames is not None
            else DEFAULT_UNWANTED_FRAMES
        )
        self._formatted: Optional[List[str]] = None
        self._lock = threading.Lock()

    @property
    def raw_frames(self) -> Tuple[RawFrame, ...]:
        return self._raw

    @property
    def frames(self) -> List[str]:
        """
        The rendered trace lines, innermost first.

        :returns: A new list of "<file>:<line> <source>" strings.
        """
        if self._formatted is None:
            with self._lock:
                if self._formatted is None:
                    self._formatted = render_frames(self._raw, self._unwanted)
        return list(self._formatted)

    def __str__(self) -> str:
        return "".join("\n" + frame for frame in self.frames)

    def to_json(self) -> str:
        """Render the trace as a JSON array of strings."""
        return json.dumps(self.frames)

    def __repr__(self) -> str:
        return f"Stack({len(self._raw)} frames)"

    def __getstate__(self) -> Dict[str, Any]:
        # Render before leaving the process, source files may not exist there.
        return {
            "raw": self._raw,
            "unwanted": self._unwanted,
            "formatted": self.frames,
        }

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self._raw = state["raw"]
        self._unwanted = state["unwanted"]
        self._formatted = state["formatted"]
        self._lock = threading.Lock()


def render_frames(
    raw_frames: Iterable[RawFrame], unwanted_frames: Iterable[str]
) -> List[str]:
    """
    Resolve raw frames into trace lines.

    Each distinct source file is read at most once. Frames whose file cannot
    be read show the function name instead of the source line.

    :param raw_frames: Frames ordered innermost first.
    :param unwanted_frames: File path fragments that end the trace.
    :returns: One "<file>:<line> <source-or-function>" string per frame kept.
    """
    unwanted = tuple(unwanted_frames)
    formatted: List[str] = []
    sources: Dict[str, Optional[List[str]]] = {}

    for frame in raw_frames:
        if any(name in frame.filename for name in unwanted):
            # Everything from here outward is framework plumbing.
            break

        prefix = f"{file_name(frame.module, frame.filename)}:{frame.lineno} "

        if frame.filename not in sources:
            sources[frame.filename] = _read_lines(frame.filename)
        lines = sources[frame.filename]

        if lines is None:
            formatted.append(prefix + function_name(frame.qualname))
        else:
            formatted.append(prefix + source(lines, frame.lineno - 1))

    return formatted


def _read_lines(filename: str) -> Optional[List[str]]:
    try:
        data = Path(filename).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"source unavailable for {filename}: {e}")
        return None
    return data.split("\n")


def source(lines: List[str], n: int) -> str:
    """Return the n'th line trimmed of spaces and tabs, or "?"."""
    if n < 0 or n >= len(lines):
        return DUNNO
    return lines[n].strip(" \t\r")


def function_name(qualname: str) -> str:
    """
    Clean up a qualified function name for display.

    Nested functions lose their "<locals>" marker:
    "outer.<locals>.inner" becomes "outer.inner".
    """
    return qualname.replace(LOCALS, DOT)


def file_name(module: str, filename: str) -> str:
    """
    Shorten a source path to the part that matches the module name.

    A module "pkg.sub.mod" lives in ".../pkg/sub/mod.py", so the last three
    path segments are kept, one more than the package "pkg.sub" has. A
    package's "__init__.py" keeps one segment more for the package directory.
    Paths with too few segments are returned unchanged.

    :param module: Dotted name of the module the frame ran in.
    :param filename: Source path as recorded by the interpreter.
    :returns: The module-relative path.
    """
    parts = filename.replace(os.sep, SEP).split(SEP)
    goal = module.count(DOT) + 1
    if parts[-1] == "__init__.py":
        goal += 1
    if goal >= len(parts):
        return filename
    return SEP.join(parts[-goal:])


class StackCapturer:
    """
    Records the current call stack for a new error.

    This is the only stack facility the error builder uses. Replace it with
    set_stack_capturer() where frame introspection is unwanted.
    """

    def capture(self, skip: int = 0) -> Stack:
        """
        Record the frames of the caller.

        :param skip: Frames above capture() to leave out, e.g. 1 to start
            at the caller of the function calling capture().
        :returns: An unrendered Stack.
        """
        config = get_stack_configuration()
        if not config.enabled:
            return Stack(unwanted_frames=config.unwanted_frames)

        raw: List[RawFrame] = []
        frame = inspect.currentframe()
        try:
            for _ in range(skip + 1):
                if frame is None:
                    break
                frame = frame.f_back

            while frame is not None and len(raw) < config.depth:
                code = frame.f_code
                raw.append(
                    RawFrame(
                        filename=code.co_filename,
                        lineno=frame.f_lineno or 0,
                        module=frame.f_globals.get("__name__", ""),
                        qualname=getattr(code, "co_qualname", code.co_name),
                    )
                )
                frame = frame.f_back
        finally:
            del frame

        return Stack(raw, config.unwanted_frames)


class NullStackCapturer(StackCapturer):
    """Capturer that records nothing."""

    def capture(self, skip: int = 0) -> Stack:
        return Stack()


_capturer: StackCapturer = StackCapturer()


def get_stack_capturer() -> StackCapturer:
    return _capturer


def set_stack_capturer(capturer: Optional[StackCapturer] = None) -> StackCapturer:
    """
    Replace the process-wide capturer.

    :param capturer: New capturer, None restores the default one.
    :returns: The capturer now in use.
    """
    global _capturer
    _capturer = capturer if capturer is not None else StackCapturer()
    return _capturer
