"""
cotask - cooperative, suspendable tasks with retry-aware error handling.

A task body is a plain callable; generator bodies suspend at each bare
``yield`` and are driven from outside through start/pause/resume/cancel/retry.

    from cotask import Handler, Task, async_

    def body():
        yield            # suspension point
        return "done"

    task = Task(body, Handler(max_retries=2, recoverable=[ConnectionError]))
    task.start()         # runs to the first yield
    task.pause()
    task.resume()        # runs to completion
    task.get_result()    # "done"

    async_(lambda: "value").then(print)
"""

from cotask._vendor import Err, FrozenDict, Ok, Result
from cotask.config import DEFAULT_CONTEXT_ID, DEFAULT_MAX_RETRIES, configure_logging
from cotask.errors import (
    CotaskError,
    FiberError,
    TaskAlreadyFinishedError,
    TaskAlreadyStartedError,
    TaskCancelledError,
    TaskConstructionError,
    TaskLifecycleError,
    TaskNotCompletedError,
    TaskNotPausedError,
    TaskNotRetryableError,
    TaskNotRunningError,
    TaskTimeoutError,
)
from cotask.fiber import Fiber
from cotask.handler import ErrorHandler, Handler, RetryDecision
from cotask.helper import AsyncHelper
from cotask.runner import Scheduler, drive
from cotask.status import TaskStatus
from cotask.support import async_
from cotask.task import Task

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONTEXT_ID",
    "DEFAULT_MAX_RETRIES",
    "AsyncHelper",
    "CotaskError",
    "Err",
    "ErrorHandler",
    "Fiber",
    "FiberError",
    "FrozenDict",
    "Handler",
    "Ok",
    "Result",
    "RetryDecision",
    "Scheduler",
    "Task",
    "TaskAlreadyFinishedError",
    "TaskAlreadyStartedError",
    "TaskCancelledError",
    "TaskConstructionError",
    "TaskLifecycleError",
    "TaskNotCompletedError",
    "TaskNotPausedError",
    "TaskNotRetryableError",
    "TaskNotRunningError",
    "TaskStatus",
    "TaskTimeoutError",
    "async_",
    "configure_logging",
    "drive",
]
