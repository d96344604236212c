"""Centralized logging helpers for discscan.

Detection modules only ever call ``logging.getLogger(__name__)``; the
entry points (CLI, tests) decide how records are rendered through
``configure_logging``.
"""

from __future__ import annotations

import contextvars
import functools
import json
import logging
import os
import sys
import time
import uuid
from typing import Optional


# Correlation ID support for tracing one identification across modules
_cid_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "discscan_correlation_id", default=None
)


def set_correlation_id(cid: str | None = None) -> str:
    """Set or create and set a correlation id for the current context.

    Returns the correlation id string.
    """
    if cid is None:
        cid = uuid.uuid4().hex
    _cid_var.set(cid)
    return cid


def get_correlation_id() -> str | None:
    return _cid_var.get()


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter that includes correlation id when available."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        cid = get_correlation_id()
        if cid:
            payload["correlation_id"] = cid
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def log_call(level: int = logging.DEBUG):
    """Decorator that logs function entry, duration and exit.

    Usage:
        @log_call()
        def identify_path(...):
            ...
    """

    def _decorator(func):
        @functools.wraps(func)
        def _wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__)
            start = time.time()
            logger.debug("Entering %s; args=%s kwargs=%s", func.__qualname__, args, kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception:
                duration = (time.time() - start) * 1000.0
                logger.debug(
                    "Exception in %s after %.2fms", func.__qualname__, duration, exc_info=True
                )
                raise
            duration = (time.time() - start) * 1000.0
            logger.log(
                level,
                "Exited %s; duration_ms=%.2f; return=%s",
                func.__qualname__,
                duration,
                repr(result)[:100],
            )
            return result

        return _wrapper

    return _decorator


def configure_logging(env: Optional[str] = "auto", level: int = logging.INFO):
    """Configure the root logger.

    env: 'auto' (default) | 'json' | 'human'
    - 'auto' chooses human-readable when stderr is a TTY, otherwise JSON.
    - 'json' forces JSON output.
    - 'human' forces a readable formatter.

    Returns the root logger.
    """
    chosen = (env or "auto").lower()
    if chosen == "auto":
        chosen = os.getenv("DISCSCAN_LOG_FORMAT", "auto").lower()
    if chosen in ("json", "human"):
        mode = chosen
    else:
        try:
            mode = "human" if sys.stderr.isatty() else "json"
        except (AttributeError, ValueError):
            mode = "json"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # One console handler, marked by name; a previous one may hold a closed stream
    for h in [h for h in root_logger.handlers if getattr(h, "name", None) == "discscan_console"]:
        root_logger.removeHandler(h)
    sh = logging.StreamHandler()
    sh.name = "discscan_console"
    root_logger.addHandler(sh)

    if mode == "json":
        sh.setFormatter(JsonFormatter())
    else:
        sh.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    return root_logger
