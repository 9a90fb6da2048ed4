"""Task status enumeration."""

from __future__ import annotations

from enum import Enum


class TaskStatus(str, Enum):
    """Life-cycle states of a :class:`~cotask.task.Task`.

    Pending → Running ⇄ Paused → Completed | Failed | Canceled.
    Completed and Failed tasks may return to Pending through ``retry``.
    """

    PENDING = "pending"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.CANCELED)

    @property
    def is_retryable_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)

    def __str__(self) -> str:
        return self.value


__all__ = ["TaskStatus"]
