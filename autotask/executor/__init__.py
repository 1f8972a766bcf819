from .executor import Executor
from .types import RunResult, SpawnError, TaskError, TaskFailure

__all__ = ["Executor", "RunResult", "TaskError", "SpawnError", "TaskFailure"]
