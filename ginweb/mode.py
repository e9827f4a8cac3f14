"""Process-wide run mode: debug, release or test."""

from __future__ import annotations

import enum
import os
import threading

ENV_MODE = "GIN_MODE"

DEBUG_MODE = "debug"
RELEASE_MODE = "release"
TEST_MODE = "test"

_TEST_RUN_MARKER = "PYTEST_CURRENT_TEST"


class _ModeCode(enum.Enum):
    DEBUG = 0
    RELEASE = 1
    TEST = 2


_CODES = {
    DEBUG_MODE: _ModeCode.DEBUG,
    RELEASE_MODE: _ModeCode.RELEASE,
    TEST_MODE: _ModeCode.TEST,
}

_lock = threading.Lock()
_state = {"code": _ModeCode.DEBUG, "name": DEBUG_MODE}


def set_mode(value: str) -> None:
    """Set the run mode; an empty value picks test mode under a test run, else debug."""
    if not value:
        value = TEST_MODE if os.environ.get(_TEST_RUN_MARKER) else DEBUG_MODE
    try:
        code = _CODES[value]
    except KeyError:
        raise ValueError(f"mode unknown: {value} (available mode: debug release test)") from None
    with _lock:
        _state["code"] = code
        _state["name"] = value


def mode() -> str:
    """Return the current run mode."""
    with _lock:
        return _state["name"]


def is_debugging() -> bool:
    """Tell whether the current run mode is debug."""
    with _lock:
        return _state["code"] is _ModeCode.DEBUG


set_mode(os.environ.get(ENV_MODE, ""))