"""
Core components - call stack capture and rendering.
"""

from .stack import (
    NullStackCapturer,
    RawFrame,
    Stack,
    StackCapturer,
    get_stack_capturer,
    set_stack_capturer,
)

__all__ = [
    'NullStackCapturer',
    'RawFrame',
    'Stack',
    'StackCapturer',
    'get_stack_capturer',
    'set_stack_capturer',
]
