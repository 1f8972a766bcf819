from .scheduler import Scheduler
from .state import StateTable
from .types import RunListener, SchedulerError, TaskRunner, TaskState

__all__ = [
    "Scheduler",
    "StateTable",
    "TaskState",
    "TaskRunner",
    "RunListener",
    "SchedulerError",
]
