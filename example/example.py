"""
Simple example demonstrating structured errors across three layers.
Shows classification bubbling up, JSON output and stack logging.

Prerequisites:
1. Install the errorsPy package: pip install errorsPy

Usage:
    python example.py
"""

import json
from typing import Dict, Optional

from errorspy import (
    CODE_NOT_FOUND,
    Kind,
    Op,
    get_logger,
    is_kind,
    new_error,
)

logger = get_logger("example")

USERS: Dict[int, str] = {1: "ada"}


def load_user(user_id: int) -> str:
    """Storage layer: knows what went wrong."""
    if user_id not in USERS:
        raise new_error(Op("store.LoadUser"), Kind.NOT_EXIST, f"user {user_id}")
    return USERS[user_id]


def get_user(user_id: int) -> str:
    """Service layer: only adds what it was doing."""
    try:
        return load_user(user_id)
    except Exception as e:
        raise new_error(Op("service.GetUser"), e) from e


def handle(user_id: int) -> Optional[str]:
    """Transport layer: maps the error to a response code."""
    try:
        return get_user(user_id)
    except Exception as e:
        err = new_error(Op("api.GetUser"), CODE_NOT_FOUND, e)
        logger.error("request failed", error=err, with_stack=True)

        if is_kind(err, Kind.NOT_EXIST):
            print(json.dumps(err.to_dict(), indent=2))
        return None


def main():
    print(f"found: {handle(1)}")
    handle(7)

    # Wrapping a missing error is a no-op.
    assert new_error(Op("api.Noop"), None) is None


if __name__ == "__main__":
    main()
