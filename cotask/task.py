"""
Task: the status state machine around one :class:`~cotask.fiber.Fiber`.

State Machine:
    pending → running ⇄ paused → completed | failed | canceled
        ↑                           │          │
        └────────── retry ──────────┴──────────┘

Every guarded operation checks the task status (and, where it matters, the
fiber's own state) before touching the fiber, and raises a
:class:`~cotask.errors.TaskLifecycleError` subclass when the call is illegal.
Errors raised by the body are routed to the bound error handler, or
re-raised to the caller when no handler is bound.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from cotask.config import DEFAULT_CONTEXT_ID
from cotask.errors import (
    TaskAlreadyFinishedError,
    TaskAlreadyStartedError,
    TaskCancelledError,
    TaskNotCompletedError,
    TaskNotPausedError,
    TaskNotRetryableError,
    TaskNotRunningError,
)
from cotask.fiber import Fiber
from cotask.status import TaskStatus

if TYPE_CHECKING:
    from cotask.handler import ErrorHandler

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Task(Generic[T]):
    """One unit of suspendable work driven by an external owner.

    Args:
        body: Zero-argument callable. Generator functions suspend at each
            bare ``yield``; plain callables complete inside :meth:`start`.
        error_handler: Optional policy that receives body errors. Without one,
            body errors propagate to the caller of :meth:`start`/:meth:`resume`.
    """

    def __init__(
        self,
        body: Callable[[], Any],
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self._fiber: Fiber[T] = Fiber(body)
        self._body = body
        self._status = TaskStatus.PENDING
        self._error_handler = error_handler
        self._result: T | None = None

    def __repr__(self) -> str:
        return f"Task(status={self._status.value}, fiber={self._fiber!r})"

    @property
    def body(self) -> Callable[[], Any]:
        return self._body

    @property
    def fiber(self) -> Fiber[T]:
        return self._fiber

    @property
    def error_handler(self) -> ErrorHandler | None:
        return self._error_handler

    @property
    def status(self) -> TaskStatus:
        return self._status

    # ==================== LIFECYCLE ====================

    def start(self) -> None:
        """Run the body until its first suspension point or completion.

        Raises:
            TaskAlreadyStartedError: If the current fiber was started before.
        """
        if self._fiber.is_started():
            raise TaskAlreadyStartedError()

        try:
            self._fiber.start()
        except Exception as e:
            self.handle_error(e)

        self._sync_with_fiber()

    def pause(self) -> None:
        """Mark a running task as paused.

        Raises:
            TaskNotRunningError: If the task is not running.
        """
        if self._status is not TaskStatus.RUNNING:
            raise TaskNotRunningError()

        # A generator fiber is parked at a ``yield`` whenever the owner holds
        # control, so there is nothing left to suspend.
        self.set_status(TaskStatus.PAUSED)

    def resume(self) -> None:
        """Continue a paused task until its next suspension point or completion.

        Raises:
            TaskNotPausedError: If the task is not paused.
        """
        if self._status is not TaskStatus.PAUSED:
            raise TaskNotPausedError()

        try:
            self._fiber.resume()
        except Exception as e:
            self.handle_error(e)

        self._sync_with_fiber()

    def cancel(self) -> None:
        """Cancel the task, notifying a suspended body with ``TaskCancelledError``.

        The body may ignore the notification; the task is canceled either way.

        Raises:
            TaskAlreadyFinishedError: If the task is completed or canceled.
        """
        if self._status in (TaskStatus.COMPLETED, TaskStatus.CANCELED):
            raise TaskAlreadyFinishedError()

        if self._fiber.is_started() and not self._fiber.is_terminated():
            try:
                self._fiber.throw(TaskCancelledError())
            except Exception as e:
                logger.debug("Suppressed %r raised by canceled task body", e)

        self.set_status(TaskStatus.CANCELED)

    def retry(self) -> None:
        """Replace the fiber with a fresh one and return to ``PENDING``.

        The caller must call :meth:`start` again.

        Raises:
            TaskNotRetryableError: Unless the fiber terminated or the task failed.
        """
        if not self._fiber.is_terminated() and self._status is not TaskStatus.FAILED:
            raise TaskNotRetryableError()

        self._fiber = Fiber(self._body)
        self._result = None
        self.set_status(TaskStatus.PENDING)

    # ==================== QUERIES ====================

    def is_started(self) -> bool:
        return self._fiber.is_started() and self._status is TaskStatus.RUNNING

    def is_completed(self) -> bool:
        return self._status is TaskStatus.COMPLETED

    def get_status(self) -> TaskStatus:
        return self._status

    def get_result(self) -> T:
        """Return the body's return value.

        Raises:
            TaskNotCompletedError: If the task is not completed.
        """
        if self._status is not TaskStatus.COMPLETED:
            raise TaskNotCompletedError()
        return self._result  # type: ignore[return-value]

    def set_status(self, status: TaskStatus) -> None:
        if status is not self._status:
            logger.debug("Task %x: %s -> %s", id(self), self._status.value, status.value)
        self._status = status

    # ==================== ERRORS ====================

    def handle_error(self, e: BaseException) -> None:
        """Route a body error to the bound handler, or re-raise it.

        After the handler has run the task is marked ``FAILED``, even if the
        handler scheduled a retry.
        """
        if self._error_handler is None:
            raise e

        self._error_handler.handle(DEFAULT_CONTEXT_ID, self, e)
        self.set_status(TaskStatus.FAILED)

    # ==================== HELPERS ====================

    def _sync_with_fiber(self) -> None:
        if self._fiber.is_suspended():
            self.set_status(TaskStatus.RUNNING)
        elif self._fiber.is_terminated() and not self._fiber.failed():
            self._result = self._fiber.get_return()
            self.set_status(TaskStatus.COMPLETED)


__all__ = ["Task"]
