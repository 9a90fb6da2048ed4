from __future__ import annotations


class CotaskError(Exception):
    """Base class for every error raised by cotask itself."""


class FiberError(CotaskError):
    """Raised when a fiber is driven in a way its current state forbids."""


class TaskLifecycleError(CotaskError):
    """Raised when a Task operation is called from a state that forbids it.

    These are contract violations by the caller; the core never retries them.
    """


class TaskAlreadyStartedError(TaskLifecycleError):
    def __init__(self) -> None:
        super().__init__("Task has already started.")


class TaskNotRunningError(TaskLifecycleError):
    def __init__(self) -> None:
        super().__init__("Task can only be paused when running.")


class TaskNotPausedError(TaskLifecycleError):
    def __init__(self) -> None:
        super().__init__("Task can only be resumed if it is paused.")


class TaskAlreadyFinishedError(TaskLifecycleError):
    def __init__(self) -> None:
        super().__init__("Task is already completed or canceled.")


class TaskNotRetryableError(TaskLifecycleError):
    def __init__(self) -> None:
        super().__init__("Task is not in a state that can be retried.")


class TaskNotCompletedError(TaskLifecycleError):
    def __init__(self) -> None:
        super().__init__("Cannot get result of a task that has not completed.")


class TaskCancelledError(CotaskError):
    """Injected into a suspended body when its task is canceled.

    The body may catch it and keep going; cancellation is cooperative.
    """

    def __init__(self, message: str = "Task canceled") -> None:
        super().__init__(message)


class TaskTimeoutError(CotaskError, TimeoutError):
    """Signals that an operation timed out.

    cotask never raises this on its own; collaborators raise it so handlers
    can list it as a recoverable kind.
    """

    def __init__(self, message: str = "Operation timed out") -> None:
        super().__init__(message)


class TaskConstructionError(CotaskError):
    """Raised by :func:`cotask.async_` when the helper cannot be built."""


__all__ = [
    "CotaskError",
    "FiberError",
    "TaskAlreadyFinishedError",
    "TaskAlreadyStartedError",
    "TaskCancelledError",
    "TaskConstructionError",
    "TaskLifecycleError",
    "TaskNotCompletedError",
    "TaskNotPausedError",
    "TaskNotRetryableError",
    "TaskNotRunningError",
    "TaskTimeoutError",
]
