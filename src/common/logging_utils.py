"""Logging helpers shared by all modules.

Provides one-time root configuration, structured ``extra`` payloads for DEBUG
traces, a duration timer and URL/token redaction so credentials never end up
in pipeline logs.
"""
from __future__ import annotations

import logging
import os
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_CONTEXT_FIELDS = "_setupsdl_context"
_TOKEN_PATTERNS = [
    re.compile(r"(gh[pousr]_[A-Za-z0-9]{20,})"),
    re.compile(r"(github_pat_[A-Za-z0-9_]{20,})"),
    re.compile(r"((?:token|bearer)\s+)([A-Za-z0-9._\-]{8,})", re.IGNORECASE),
]


class _ContextFormatter(logging.Formatter):
    """Formatter appending structured context as ``key=value`` pairs at DEBUG."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = getattr(record, _CONTEXT_FIELDS, None)
        if context and record.levelno <= logging.DEBUG:
            pairs = " ".join(f"{k}={v}" for k, v in context.items())
            message = f"{message} [{pairs}]"
        return message


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once.

    The level comes from ``level``, then SETUPSDL_LOG_LEVEL, then INFO.
    Calling this again only adjusts the level.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not any(getattr(h, "_setupsdl", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(_ContextFormatter(Constants.LOG_FORMAT))
        handler._setupsdl = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level_value)


def add_file_handler(path: str) -> None:
    """Mirror log output to a file."""
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(_ContextFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logging.getLogger().addHandler(file_handler)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records."""
    return {_CONTEXT_FIELDS: {k: v for k, v in fields.items() if v is not None}}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records of ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def redact(text: str) -> str:
    """Mask anything that looks like a GitHub token."""
    if not text:
        return text
    redacted = _TOKEN_PATTERNS[0].sub("***", text)
    redacted = _TOKEN_PATTERNS[1].sub("***", redacted)
    return _TOKEN_PATTERNS[2].sub(r"\1***", redacted)


def safe_url(url: str) -> str:
    """Drop credentials and query string from a URL for logging."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
