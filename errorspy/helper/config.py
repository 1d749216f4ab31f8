"""
Stack capture configuration.
Settings can be given in code or read from ERRORSPY_* environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .logging import get_logger

logger = get_logger(__name__)


DEFAULT_STACK_DEPTH = 6

# Once a frame from one of these is reached, the remaining outer frames are
# framework plumbing and are not rendered.
DEFAULT_UNWANTED_FRAMES: Tuple[str, ...] = (
    "_pytest",
    "pluggy",
    "unittest",
    "asyncio",
    "threading.py",
    "runpy",
    "starlette",
    "uvicorn",
    "werkzeug",
)


@dataclass(frozen=True)
class StackConfiguration:
    """
    Stack capture configuration.

    depth is the maximum number of frames recorded per error, unwanted_frames
    the file path fragments that end a rendered trace, and enabled switches
    capturing off entirely.
    """

    depth: int = DEFAULT_STACK_DEPTH
    unwanted_frames: Tuple[str, ...] = field(default=DEFAULT_UNWANTED_FRAMES)
    enabled: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError for settings that cannot be used."""
        if self.depth <= 0:
            raise ValueError("stack depth must be positive")
        if any(not f for f in self.unwanted_frames):
            raise ValueError("unwanted frame names cannot be empty")

    @classmethod
    def from_env(cls) -> "StackConfiguration":
        """Create configuration from environment variables."""
        depth = _depth_from_env()
        enabled = os.getenv("ERRORSPY_STACK_ENABLED", "true").lower() == "true"

        unwanted_frames = DEFAULT_UNWANTED_FRAMES
        raw = os.getenv("ERRORSPY_STACK_UNWANTED_FRAMES")
        if raw is not None:
            unwanted_frames = tuple(
                part.strip() for part in raw.split(",") if part.strip()
            )

        return cls(depth=depth, unwanted_frames=unwanted_frames, enabled=enabled)


def _depth_from_env() -> int:
    # Read while building errors, so a bad value must not raise.
    raw = os.getenv("ERRORSPY_STACK_DEPTH")
    if raw is None:
        return DEFAULT_STACK_DEPTH
    try:
        depth = int(raw)
    except ValueError:
        depth = 0
    if depth <= 0:
        logger.warning(
            "invalid ERRORSPY_STACK_DEPTH, using default",
            value=raw,
            default=DEFAULT_STACK_DEPTH,
        )
        return DEFAULT_STACK_DEPTH
    return depth


_configuration: Optional[StackConfiguration] = None


def get_stack_configuration() -> StackConfiguration:
    """
    Get the active configuration, reading the environment on first use.

    :returns: The active StackConfiguration.
    """
    global _configuration
    if _configuration is None:
        _configuration = StackConfiguration.from_env()
    return _configuration


def configure_stack(config: Optional[StackConfiguration] = None) -> StackConfiguration:
    """
    Replace the active configuration.

    :param config: New configuration, None re-reads the environment.
    :returns: The configuration now in use.
    """
    global _configuration
    _configuration = config if config is not None else StackConfiguration.from_env()
    return _configuration
