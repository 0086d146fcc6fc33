"""
Configuration for editor-metrics.

Settings are read from the environment once at import time. Tests and
long-running hosts can pick up changes with ``importlib.reload(config)``.
"""

import contextvars
import logging
import os
import sys
from contextlib import contextmanager
from typing import Optional

logger = logging.getLogger("editor_metrics")

_muted = contextvars.ContextVar("editor_metrics_muted", default=False)


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean environment variable ("true", "1", "yes", "on")."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


def env_float(name: str, default: Optional[float] = None) -> Optional[float]:
    """Parse a float environment variable, falling back on bad input."""
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}: {value!r}")
        return default


# Default dry-run flag for MetricsTracker when TrackingConfig does not set one
DRY_RUN = env_bool("EDITOR_METRICS_DRY_RUN", False)

# Verbose diagnostic logging
DEBUG = env_bool("EDITOR_METRICS_DEBUG", False)

# None means no timeout: a hung request leaves its caller suspended
HTTP_TIMEOUT = env_float("EDITOR_METRICS_HTTP_TIMEOUT", None)

GOOGLE_ENDPOINT = os.getenv(
    "EDITOR_METRICS_GOOGLE_ENDPOINT", "https://www.google-analytics.com/collect"
)
MATOMO_ENDPOINT = os.getenv("EDITOR_METRICS_MATOMO_ENDPOINT", "")


def is_do_not_track() -> bool:
    """True when the DO_NOT_TRACK convention is in effect.

    Checked on every call, not cached, so a host can flip it at runtime.
    """
    return os.getenv("DO_NOT_TRACK") is not None


def setup_logging(debug: Optional[bool] = None) -> logging.Logger:
    """Attach a stderr handler to the package logger (once)."""
    if debug is None:
        debug = DEBUG

    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger


class MutedFilter(logging.Filter):
    """Drop records below WARNING while the current context is muted."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.WARNING or not _muted.get()


@contextmanager
def muted(enabled: bool = True):
    """Silence the package's debug and info logging in the current context.

    The flag lives in a context variable, so each asyncio task sees its own
    value and other trackers keep logging.
    """
    token = _muted.set(enabled)
    try:
        yield
    finally:
        _muted.reset(token)


# Replace the filter left behind by an earlier import (importlib.reload)
for _stale in [f for f in logger.filters if type(f).__name__ == "MutedFilter"]:
    logger.removeFilter(_stale)
logger.addFilter(MutedFilter())
