from .dag import TaskGraph
from .types import CycleError, DuplicateTaskError, GraphError, Task, UnknownDependency

__all__ = [
    "TaskGraph",
    "Task",
    "GraphError",
    "CycleError",
    "DuplicateTaskError",
    "UnknownDependency",
]
