from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Protocol

from autotask.config.types import ProjectConfig

from .types import CycleError, DuplicateTaskError, Task, UnknownDependency

logger = logging.getLogger(__name__)


class Declaration(Protocol):
    id: str
    program: str
    arguments: Iterable[str]
    needs: Iterable[str]


class _Visit(Enum):
    UNVISITED = auto()
    VISITING = auto()
    VISITED = auto()


@dataclass(frozen=True, eq=False)
class TaskGraph:
    """Validated, read-only view of the declared tasks.

    Tasks are kept in declaration order. Dependencies and dependents are
    stored as indices into ``tasks`` so the graph holds no references
    between task objects.
    """

    tasks: tuple[Task, ...]
    _index: Mapping[str, int]
    _needs: tuple[tuple[int, ...], ...]
    _dependents: tuple[tuple[int, ...], ...]

    @classmethod
    def build(cls, declarations: Iterable[Declaration]) -> TaskGraph:
        tasks: list[Task] = []
        index: dict[str, int] = {}

        for decl in declarations:
            if decl.id in index:
                raise DuplicateTaskError(decl.id)
            index[decl.id] = len(tasks)
            tasks.append(
                Task(
                    id=decl.id,
                    program=decl.program,
                    arguments=tuple(decl.arguments),
                    needs=frozenset(decl.needs),
                )
            )

        needs: list[tuple[int, ...]] = []
        dependents: list[list[int]] = [[] for _ in tasks]

        for pos, task in enumerate(tasks):
            for dep in sorted(task.needs):
                if dep not in index:
                    raise UnknownDependency(task.id, dep)
            dep_positions = tuple(sorted(index[dep] for dep in task.needs))
            needs.append(dep_positions)
            for dep_pos in dep_positions:
                dependents[dep_pos].append(pos)

        graph = cls(
            tuple(tasks),
            MappingProxyType(index),
            tuple(needs),
            tuple(tuple(d) for d in dependents),
        )
        graph._check_acyclic()
        logger.debug("Built task graph with %d task(s)", len(tasks))
        return graph

    @classmethod
    def from_project(cls, project: ProjectConfig) -> TaskGraph:
        return cls.build(project)

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._index

    def ids(self) -> list[str]:
        return [task.id for task in self.tasks]

    def index_of(self, task_id: str) -> int:
        if task_id not in self._index:
            raise KeyError(task_id)
        return self._index[task_id]

    def get(self, task_id: str) -> Task:
        return self.tasks[self.index_of(task_id)]

    def needs(self, task_id: str) -> frozenset[str]:
        return self.get(task_id).needs

    def dependents(self, task_id: str) -> tuple[str, ...]:
        return tuple(
            self.tasks[pos].id for pos in self._dependents[self.index_of(task_id)]
        )

    def dependent_positions(self, pos: int) -> tuple[int, ...]:
        """Declaration indices of the tasks needing ``tasks[pos]``, built once."""
        return self._dependents[pos]

    def _check_acyclic(self) -> None:
        state = [_Visit.UNVISITED] * len(self.tasks)
        stack: list[int] = []

        def visit(pos: int) -> None:
            if state[pos] == _Visit.VISITING:
                start = stack.index(pos)
                cycle = [self.tasks[p].id for p in stack[start:]]
                raise CycleError(cycle + [self.tasks[pos].id])
            if state[pos] == _Visit.VISITED:
                return

            state[pos] = _Visit.VISITING
            stack.append(pos)

            for dep_pos in self._needs[pos]:
                visit(dep_pos)

            stack.pop()
            state[pos] = _Visit.VISITED

        for pos in range(len(self.tasks)):
            visit(pos)
