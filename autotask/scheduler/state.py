from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import TYPE_CHECKING

from autotask.graph import TaskGraph

from .types import SchedulerError, TaskState

if TYPE_CHECKING:
    from autotask.executor.types import RunResult

logger = logging.getLogger(__name__)


class StateTable:
    """Per-run task states, owned and mutated by the scheduler only.

    Ready tasks are kept in a heap keyed by declaration index, so the next
    task handed out is always the earliest declared among those eligible.
    """

    def __init__(self, graph: TaskGraph):
        self.graph = graph
        self._states: dict[str, TaskState] = {tid: TaskState.PENDING for tid in graph.ids()}
        self._unresolved: dict[str, int] = {task.id: len(task.needs) for task in graph}
        self._results: dict[str, RunResult] = {}
        self._ready: list[int] = []

        for task in graph:
            if not task.needs:
                self._make_ready(task.id)

    def state(self, task_id: str) -> TaskState:
        return self._states[task_id]

    def states(self) -> dict[str, TaskState]:
        return dict(self._states)

    def result(self, task_id: str) -> RunResult | None:
        if task_id not in self._states:
            raise KeyError(task_id)
        return self._results.get(task_id)

    def results(self) -> dict[str, RunResult]:
        return dict(self._results)

    def count(self, state: TaskState) -> int:
        return sum(1 for s in self._states.values() if s == state)

    def all_terminal(self) -> bool:
        return all(s.is_terminal for s in self._states.values())

    def next_ready(self) -> str | None:
        if not self._ready:
            return None

        task_id = self.graph.tasks[heapq.heappop(self._ready)].id
        self._transition(task_id, TaskState.READY, TaskState.RUNNING)
        return task_id

    def record(self, result: RunResult) -> list[str]:
        """Store the outcome of a running task.

        Returns the ids newly skipped because of it, in cascade order.
        """
        task_id = result.task_id
        if result.state not in (TaskState.SUCCEEDED, TaskState.FAILED):
            raise SchedulerError(f"Task '{task_id}' reported non-final state {result.state.value}")

        self._transition(task_id, TaskState.RUNNING, result.state)
        self._results[task_id] = result

        if result.state == TaskState.FAILED:
            return self._cascade(task_id)

        for pos in self.graph.dependent_positions(self.graph.index_of(task_id)):
            dependent = self.graph.tasks[pos].id
            # Already skipped through another failed need
            if self._states[dependent] != TaskState.PENDING:
                continue
            self._unresolved[dependent] -= 1
            if self._unresolved[dependent] == 0:
                self._make_ready(dependent)
        return []

    def _cascade(self, origin: str) -> list[str]:
        skipped: list[str] = []
        queue = deque([self.graph.index_of(origin)])

        while queue:
            current = queue.popleft()
            for pos in self.graph.dependent_positions(current):
                dependent = self.graph.tasks[pos].id
                if self._states[dependent] != TaskState.PENDING:
                    continue
                self._transition(dependent, TaskState.PENDING, TaskState.SKIPPED)
                skipped.append(dependent)
                queue.append(pos)

        if skipped:
            logger.info("Skipping %s after '%s' failed", ", ".join(skipped), origin)
        return skipped

    def _make_ready(self, task_id: str) -> None:
        self._transition(task_id, TaskState.PENDING, TaskState.READY)
        heapq.heappush(self._ready, self.graph.index_of(task_id))

    def _transition(self, task_id: str, expected: TaskState, new: TaskState) -> None:
        if task_id not in self._states:
            raise SchedulerError(f"Unknown task '{task_id}'")

        current = self._states[task_id]
        if current != expected:
            raise SchedulerError(
                f"Task '{task_id}' cannot move to {new.value} from {current.value}"
            )
        logger.debug("%s: %s -> %s", task_id, current.value, new.value)
        self._states[task_id] = new
