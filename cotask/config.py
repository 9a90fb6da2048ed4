"""
Environment-driven defaults for cotask.

``COTASK_DEBUG`` turns on debug logging of task transitions and
``COTASK_MAX_RETRIES`` overrides the default retry budget used by
:meth:`cotask.handler.Handler.from_env`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

DEBUG_ENV_KEY = "COTASK_DEBUG"
MAX_RETRIES_ENV_KEY = "COTASK_MAX_RETRIES"

DEFAULT_MAX_RETRIES = 3
DEFAULT_CONTEXT_ID = "task_id"

_TRUTHY = ("1", "true", "yes")


def debug_enabled(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get(DEBUG_ENV_KEY, "").lower() in _TRUTHY


def max_retries_from_env(environ: Mapping[str, str] | None = None) -> int:
    """Return the retry budget configured in the environment.

    Falls back to :data:`DEFAULT_MAX_RETRIES` when the variable is unset or
    blank.

    Raises:
        ValueError: If the variable is set to something other than a
            non-negative integer.
    """

    env = os.environ if environ is None else environ
    raw = env.get(MAX_RETRIES_ENV_KEY, "").strip()
    if not raw:
        return DEFAULT_MAX_RETRIES
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(
            f"{MAX_RETRIES_ENV_KEY} must be a non-negative integer, got {raw!r}"
        ) from exc
    if value < 0:
        raise ValueError(
            f"{MAX_RETRIES_ENV_KEY} must be a non-negative integer, got {raw!r}"
        )
    return value


def configure_logging(environ: Mapping[str, str] | None = None) -> None:
    """Set the ``cotask`` logger to DEBUG when ``COTASK_DEBUG`` is truthy."""

    if debug_enabled(environ):
        logging.getLogger("cotask").setLevel(logging.DEBUG)


__all__ = [
    "DEBUG_ENV_KEY",
    "DEFAULT_CONTEXT_ID",
    "DEFAULT_MAX_RETRIES",
    "MAX_RETRIES_ENV_KEY",
    "configure_logging",
    "debug_enabled",
    "max_retries_from_env",
]
