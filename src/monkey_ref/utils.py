from __future__ import annotations

import logging
import os as _os
import sys
from typing import Optional, TextIO

DEBUG_PY_TRACE_ENV = "MONKEY_DEBUG_PY_TRACE"
LOG_LEVEL_ENV = "MONKEY_LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}

# e.g. "2024/01/31 12:00:00 hello 42"
_LOG_FORMAT = "%(asctime)s %(message)s"
_LOG_DATEFMT = "%Y/%m/%d %H:%M:%S"


def env_flag(name: str) -> bool:
    """True when the env var is set to a truthy spelling (1/true/yes/on)."""
    return _os.environ.get(name, "").strip().lower() in _TRUTHY


def debug_py_trace_enabled() -> bool:
    return env_flag(DEBUG_PY_TRACE_ENV)


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_ENV, None)


def log_level() -> int:
    """Level for the builtin `log` sink, from MONKEY_LOG_LEVEL (default INFO)."""
    name = _os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def configure_logging(stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a stderr handler to the builtin `log` logger. Idempotent."""
    logger = logging.getLogger("monkey_ref.builtins")
    logger.setLevel(log_level())

    for handler in logger.handlers:
        if getattr(handler, "_monkey_sink", False):
            return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _LOG_DATEFMT))
    handler._monkey_sink = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
