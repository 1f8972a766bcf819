from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from autotask.executor.types import RunResult
    from autotask.graph import Task


class TaskState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.SUCCEEDED, TaskState.FAILED, TaskState.SKIPPED)


class TaskRunner(Protocol):
    def run(self, task: Task) -> RunResult: ...


class RunListener(Protocol):
    def started(self, task_id: str) -> None: ...

    def finished(self, result: RunResult) -> None: ...

    def skipped(self, task_id: str) -> None: ...


class SchedulerError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
