"""
Error handling and retry policy for tasks.

:class:`ErrorHandler` is the contract every policy satisfies. :class:`Handler`
is the default policy: it logs the failure, marks the task failed, and retries
it when the error kind is recoverable and the context still has budget left.

Retry budgets are keyed by the caller-supplied context id rather than by task
identity, so one logical operation shares a single budget across every task
instance rebuilt for it.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from loguru import logger as loguru_logger

from cotask._validators import (
    ensure_exception_types,
    ensure_non_negative_int,
    ensure_optional_callable,
)
from cotask._vendor import FrozenDict, error_location
from cotask.config import DEFAULT_MAX_RETRIES, max_retries_from_env
from cotask.status import TaskStatus
from cotask.task import Task

loguru_logger = loguru_logger.bind(component="handler")

LogSink = Callable[[str], None]


def _default_sink(message: str) -> None:
    loguru_logger.error(message)


@runtime_checkable
class ErrorHandler(Protocol):
    """Receives errors raised in a context (a Task or anything else)."""

    def handle(self, context_id: str, context: Any, error: BaseException) -> None: ...


class RetryDecision(Enum):
    RETRY = "retry"
    FAIL = "fail"


class Handler:
    """Default retry policy.

    Args:
        max_retries: Retries allowed per context id.
        recoverable: Exception classes eligible for automatic retry. An error
            is recoverable only when its exact class is listed.
        logger: Sink receiving one formatted line per event. Defaults to the
            process error stream.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        recoverable: Iterable[type[BaseException]] = (),
        logger: LogSink | None = None,
    ) -> None:
        ensure_non_negative_int(max_retries, name="max_retries")
        ensure_optional_callable(logger, name="logger")
        self._max_retries = max_retries
        self._recoverable = ensure_exception_types(recoverable, name="recoverable")
        self._logger: LogSink = logger or _default_sink
        self._retry_count: dict[str, int] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_env(
        cls,
        recoverable: Iterable[type[BaseException]] = (),
        logger: LogSink | None = None,
    ) -> Handler:
        """Build a handler whose budget comes from ``COTASK_MAX_RETRIES``."""

        return cls(max_retries_from_env(), recoverable, logger)

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def recoverable(self) -> frozenset[type[BaseException]]:
        return self._recoverable

    def set_recoverable(self, recoverable: Iterable[type[BaseException]]) -> None:
        self._recoverable = ensure_exception_types(recoverable, name="recoverable")

    def retry_count(self, context_id: str) -> int:
        with self._lock:
            return self._retry_count.get(context_id, 0)

    def retry_counts(self) -> FrozenDict:
        """Snapshot of every context's retry counter."""

        with self._lock:
            return FrozenDict(self._retry_count)

    # ==================== ENTRY POINT ====================

    def handle(self, context_id: str, context: Any, error: BaseException) -> None:
        if isinstance(context, Task):
            self.handle_task_error(context_id, context, error)
            return

        self.log_generic_error(context_id, context, error)

    # ==================== TASK PATH ====================

    def handle_task_error(self, context_id: str, task: Task[Any], error: BaseException) -> None:
        self.log_task_error(context_id, task, error)

        task.set_status(TaskStatus.FAILED)

        decision, attempt = self._decide(context_id, error)
        if decision is RetryDecision.RETRY:
            self.retry_task(context_id, task, attempt)
            return

        task.set_status(TaskStatus.FAILED)
        self.handle_final_failure(context_id, task, error)

    def decide(self, context_id: str, error: BaseException) -> RetryDecision:
        """Decide between retrying and failing, consuming budget on retry."""

        decision, _ = self._decide(context_id, error)
        return decision

    def _decide(self, context_id: str, error: BaseException) -> tuple[RetryDecision, int]:
        # Returns the attempt number claimed under the lock alongside the decision.
        if type(error) not in self._recoverable:
            return RetryDecision.FAIL, 0

        with self._lock:
            attempts = self._retry_count.setdefault(context_id, 0)
            if attempts >= self._max_retries:
                return RetryDecision.FAIL, attempts
            self._retry_count[context_id] = attempts + 1
        return RetryDecision.RETRY, attempts + 1

    def retry_task(self, context_id: str, task: Task[Any], attempt: int) -> None:
        self._logger(f"Retrying task {context_id} (attempt {attempt})...")
        task.retry()

    def handle_final_failure(self, context_id: str, task: Task[Any], error: BaseException) -> None:
        """Report a failure that will not be retried.

        Subclasses override this to raise alerts or notifications.
        """

        self._logger(f"Task {context_id} permanently failed: {error}")

    # ==================== LOGGING ====================

    def log_task_error(self, context_id: str, task: Task[Any], error: BaseException) -> None:
        filename, line = error_location(error)
        self._logger(
            f"Task {context_id} (status: {task.get_status().value}) failed with error: "
            f"{error} in {filename} on line {line}"
        )

    def log_generic_error(self, context_id: str, context: Any, error: BaseException) -> None:
        self._logger(
            f"Error in context {context_id} ({type(context).__name__}) "
            f"with message: {error}"
        )


__all__ = ["ErrorHandler", "Handler", "LogSink", "RetryDecision"]
