"""AsyncHelper: then/catch composition over one Task and one ErrorHandler."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from cotask._vendor import Err, Ok, Result
from cotask.handler import ErrorHandler, Handler
from cotask.status import TaskStatus
from cotask.task import Task

T = TypeVar("T")

SuccessCallback = Callable[[Any], Any]
ErrorCallback = Callable[[BaseException], Any]


class AsyncHelper(Generic[T]):
    """Drive a task once and deliver its outcome to ``then``/``catch`` callbacks.

    The task itself carries no error handler; failures are passed to
    ``error_handler`` (a fresh :class:`Handler` by default) under a unique
    context id, then surfaced through the ``catch`` callback or kept in
    :attr:`error` when none is registered.
    """

    def __init__(
        self,
        body: Callable[[], Any],
        error_handler: ErrorHandler | None = None,
    ) -> None:
        if error_handler is None:
            error_handler = Handler()
        self._error_handler: ErrorHandler = error_handler
        self._task: Task[T] = Task(body)
        self._on_success: SuccessCallback | None = None
        self._on_error: ErrorCallback | None = None
        self._error: BaseException | None = None
        self._result: T | None = None
        self._outcome: Result[T] | None = None
        self._task_started = False

    def __repr__(self) -> str:
        return f"AsyncHelper(task={self._task!r}, started={self._task_started})"

    @property
    def error(self) -> BaseException | None:
        return self._error

    @property
    def error_handler(self) -> ErrorHandler:
        return self._error_handler

    def then(self, callback: SuccessCallback) -> AsyncHelper[T]:
        self._on_success = callback
        self.start()
        return self

    def catch(self, callback: ErrorCallback) -> AsyncHelper[T]:
        self._on_error = callback
        self.start()
        return self

    def start(self) -> None:
        """Start the task unless this helper already did.

        A previously captured error is replayed to the error callback instead
        of running the body again.
        """
        if self._error is not None and self._on_error is not None:
            self._on_error(self._error)
            return

        if self._task_started or self._task.is_completed():
            return

        self._task_started = True
        self._drive(self._task.start)

    def pause(self) -> None:
        self._task.pause()

    def resume(self) -> None:
        self._task.resume()

    def cancel(self) -> None:
        self._task.cancel()

    def retry(self) -> None:
        """Reset the task and start it again straight away.

        The previously captured error and result are left in place.
        """
        self._task.retry()
        self._drive(self._task.start)

    def get_status(self) -> TaskStatus:
        return self._task.get_status()

    def get_result(self) -> T:
        return self._task.get_result()

    def get_task(self) -> Task[T]:
        return self._task

    def is_completed(self) -> bool:
        return self._task.is_completed()

    def outcome(self) -> Result[T] | None:
        """The outcome of the latest run, or ``None`` if nothing settled yet."""

        return self._outcome

    def _drive(self, step: Callable[[], None]) -> None:
        failure: BaseException | None = None
        try:
            step()
        except Exception as e:
            self._error_handler.handle(f"task_{uuid.uuid4().hex}", self._task, e)
            failure = e

        if failure is not None:
            self._error = failure
            self._outcome = Err(failure)
            if self._on_error is not None:
                self._on_error(failure)
            return

        if self._task.is_completed():
            self._result = self._task.get_result()
            self._outcome = Ok(self._result)
            if self._on_success is not None:
                self._on_success(self._result)


__all__ = ["AsyncHelper", "ErrorCallback", "SuccessCallback"]
