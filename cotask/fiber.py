"""
Generator-backed suspendable execution primitive.

A :class:`Fiber` runs a zero-argument body on the caller's thread. When the
body is a generator function, each bare ``yield`` parks the fiber and hands
control back to whoever called :meth:`Fiber.start` or :meth:`Fiber.resume`;
``yield from`` lets nested generators suspend the whole stack at once. Any
other callable runs to completion inside ``start``.

Fibers are single use. Once terminated they cannot be restarted; build a new
one from the same body instead.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Generator
from typing import Any, Generic, TypeVar

from cotask._validators import ensure_callable
from cotask.errors import FiberError

T = TypeVar("T")


class Fiber(Generic[T]):
    """A single-use, cooperatively scheduled unit of work."""

    def __init__(self, body: Callable[[], Any]) -> None:
        ensure_callable(body, name="body")
        self._body = body
        self._gen: Generator[Any, Any, T] | None = None
        self._started = False
        self._running = False
        self._terminated = False
        self._return: T | None = None
        self._error: BaseException | None = None

    def __repr__(self) -> str:
        return f"Fiber(body={self._body!r}, state={self._state_name()})"

    def _state_name(self) -> str:
        if not self._started:
            return "init"
        if self._running:
            return "running"
        if self._terminated:
            return "failed" if self._error is not None else "returned"
        return "suspended"

    # -- introspection -------------------------------------------------

    def is_started(self) -> bool:
        return self._started

    def is_running(self) -> bool:
        return self._running

    def is_suspended(self) -> bool:
        return self._started and not self._running and not self._terminated

    def is_terminated(self) -> bool:
        return self._terminated

    def failed(self) -> bool:
        """Whether the body terminated by raising."""

        return self._terminated and self._error is not None

    def get_return(self) -> T:
        if not self._terminated:
            raise FiberError("Cannot get fiber return value: the fiber has not returned")
        if self._error is not None:
            raise FiberError("Cannot get fiber return value: the fiber threw an exception")
        return self._return  # type: ignore[return-value]

    # -- driving -------------------------------------------------------

    def start(self) -> None:
        """Run the body until it first suspends or terminates.

        Errors raised by the body propagate to the caller after the fiber is
        marked terminated.
        """

        if self._started:
            raise FiberError("Cannot start a fiber that has already been started")
        self._started = True

        self._running = True
        try:
            outcome = self._body()
        except BaseException as exc:
            self._fail(exc)
            raise
        finally:
            self._running = False

        if inspect.isgenerator(outcome):
            self._gen = outcome
            self._step(lambda: next(outcome))
        else:
            self._finish(outcome)

    def resume(self, value: Any = None) -> None:
        """Continue a suspended body, sending ``value`` as the ``yield`` result."""

        gen = self._require_suspended("resume")
        self._step(lambda: gen.send(value))

    def throw(self, error: BaseException) -> None:
        """Raise ``error`` inside the body at its current suspension point."""

        gen = self._require_suspended("throw into")
        self._step(lambda: gen.throw(error))

    # -- internals -----------------------------------------------------

    def _require_suspended(self, verb: str) -> Generator[Any, Any, T]:
        if self._running:
            raise FiberError(f"Cannot {verb} a fiber that is already running")
        if not self.is_suspended() or self._gen is None:
            raise FiberError(f"Cannot {verb} a fiber that is not suspended")
        return self._gen

    def _step(self, advance: Callable[[], object]) -> None:
        self._running = True
        try:
            advance()
        except StopIteration as stop:
            self._finish(stop.value)
        except BaseException as exc:
            self._fail(exc)
            raise
        finally:
            self._running = False

    def _finish(self, value: T) -> None:
        self._terminated = True
        self._return = value
        self._gen = None

    def _fail(self, error: BaseException) -> None:
        self._terminated = True
        self._error = error
        self._gen = None


__all__ = ["Fiber"]
