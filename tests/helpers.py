"""Test doubles and body builders shared across the cotask tests."""

from __future__ import annotations

from typing import Any


class RecordingHandler:
    """ErrorHandler that only remembers what it was given."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any, BaseException]] = []

    def handle(self, context_id: str, context: Any, error: BaseException) -> None:
        self.calls.append((context_id, context, error))


def suspending(times: int, result: Any = "task result"):
    """Build a generator body that suspends ``times`` times then returns ``result``."""

    def body():
        for _ in range(times):
            yield
        return result

    return body


def failing(error: BaseException):
    """Build a plain body that raises ``error`` every time it runs."""

    def body():
        raise error

    return body
