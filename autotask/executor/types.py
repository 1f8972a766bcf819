from dataclasses import dataclass
from pathlib import Path

from autotask.scheduler.types import TaskState


class TaskError(Exception):
    def __init__(self, task_id: str, *args: object) -> None:
        super().__init__(*args)
        self.task_id = task_id


class SpawnError(TaskError):
    def __init__(self, task_id: str, cause: OSError):
        super().__init__(task_id, f"Failed to spawn '{task_id}': {cause}")
        self.cause = cause


class TaskFailure(TaskError):
    def __init__(self, task_id: str, returncode: int):
        super().__init__(task_id, f"Task '{task_id}' exited with code {returncode}")
        self.returncode = returncode


@dataclass(frozen=True)
class RunResult:
    task_id: str
    state: TaskState
    started_at: float
    finished_at: float
    log_path: Path
    returncode: int | None = None
    error: TaskError | None = None

    @property
    def duration_s(self) -> float:
        return self.finished_at - self.started_at

    @property
    def succeeded(self) -> bool:
        return self.state == TaskState.SUCCEEDED
