"""Free-function entry point mirroring ``async(...)`` from promise libraries."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from cotask._validators import ensure_callable
from cotask.errors import TaskConstructionError
from cotask.handler import ErrorHandler
from cotask.helper import AsyncHelper


def async_(
    body: Callable[[], Any],
    error_handler: ErrorHandler | None = None,
) -> AsyncHelper[Any]:
    """Wrap ``body`` in an :class:`AsyncHelper` with a default handler.

    Nothing runs until ``then``/``catch``/``start`` is called on the result.

    Usage:
        async_(lambda: fetch(url)).then(store).catch(report)

    Raises:
        TaskConstructionError: If the helper cannot be built, chained to the
            underlying error.
    """

    try:
        ensure_callable(body, name="body")
        return AsyncHelper(body, error_handler)
    except Exception as exc:
        raise TaskConstructionError(f"Failed to create async task: {exc}") from exc


__all__ = ["async_"]
