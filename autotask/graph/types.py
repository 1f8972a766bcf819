from dataclasses import dataclass, field


@dataclass(frozen=True)
class Task:
    id: str
    program: str
    arguments: tuple[str, ...] = ()
    needs: frozenset[str] = field(default_factory=frozenset)

    def argv(self) -> list[str]:
        return [self.program, *self.arguments]


class GraphError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class DuplicateTaskError(GraphError):
    def __init__(self, task_id: str):
        super().__init__(f"Task '{task_id}' is declared more than once")
        self.task_id = task_id


class UnknownDependency(GraphError):
    def __init__(self, task_id: str, dependency: str):
        super().__init__(f"Dependency '{dependency}' of task '{task_id}' is not known")
        self.task_id = task_id
        self.dependency = dependency


class CycleError(GraphError):
    def __init__(self, cycle: list[str]):
        super().__init__("Cycle detected: " + " -> ".join(cycle))
        self.cycle = cycle
