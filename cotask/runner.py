"""Cooperative scheduler interleaving several tasks on the calling thread.

Each step hands control to one task until it suspends again; tasks that are
still unfinished go to the back of the ready queue. Nothing runs in parallel.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from cotask.status import TaskStatus
from cotask.task import Task

logger = logging.getLogger(__name__)


def _has_work(task: Task[Any]) -> bool:
    status = task.get_status()
    if status in (TaskStatus.PENDING, TaskStatus.RUNNING, TaskStatus.PAUSED):
        return True
    # A handler that scheduled a retry leaves the task failed with a fresh fiber.
    return status is TaskStatus.FAILED and not task.fiber.is_started()


def _advance(task: Task[Any]) -> None:
    status = task.get_status()
    if status is TaskStatus.RUNNING:
        task.pause()
        task.resume()
    elif status is TaskStatus.PAUSED:
        task.resume()
    elif _has_work(task):
        task.start()


def drive(task: Task[Any]) -> TaskStatus:
    """Run ``task`` through pause/resume cycles until it stops making progress.

    Retries scheduled by the task's handler are started as they come, so the
    handler's budget bounds the number of attempts. Returns the status the
    task settled in.
    """

    while _has_work(task):
        _advance(task)
    return task.get_status()


class Scheduler:
    """Round-robin driver for tasks that share one thread."""

    def __init__(self) -> None:
        self._ready: deque[Task[Any]] = deque()
        self._spawned: list[Task[Any]] = []

    def __len__(self) -> int:
        return len(self._ready)

    def spawn(self, task: Task[Any]) -> Task[Any]:
        if any(task is other for other in self._spawned):
            raise ValueError("Cannot schedule a task that is already scheduled")
        if not _has_work(task):
            raise ValueError(f"Cannot schedule a task that is already {task.get_status().value}")
        self._ready.append(task)
        self._spawned.append(task)
        return task

    def step(self) -> bool:
        """Advance the next ready task once. Returns ``False`` when idle.

        Tasks settled from outside while queued (canceled, say) are dropped
        without running.
        """

        if not self._ready:
            return False

        task = self._ready.popleft()
        if _has_work(task):
            _advance(task)

        if _has_work(task):
            self._ready.append(task)
        else:
            logger.debug("Task %x settled with status %s", id(task), task.get_status().value)
        return True

    def run(self) -> list[Task[Any]]:
        """Step until every spawned task has settled; return them in spawn order."""

        while self.step():
            pass
        spawned, self._spawned = self._spawned, []
        return spawned


__all__ = ["Scheduler", "drive"]
