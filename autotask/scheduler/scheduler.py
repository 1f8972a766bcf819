from __future__ import annotations

import logging

from autotask.graph import TaskGraph

from .state import StateTable
from .types import RunListener, SchedulerError, TaskRunner

logger = logging.getLogger(__name__)


class Scheduler:
    """Drives every task of a graph to a terminal state, one at a time.

    Readiness and cascading live in ``StateTable``; running a task is
    delegated to ``runner``. A parallel dispatcher would only need to
    replace the loop in ``run``.
    """

    def __init__(
        self,
        graph: TaskGraph,
        runner: TaskRunner,
        listener: RunListener | None = None,
    ):
        self.graph = graph
        self.runner = runner
        self.listener = listener

    def run(self) -> StateTable:
        table = StateTable(self.graph)

        while (task_id := table.next_ready()) is not None:
            task = self.graph.get(task_id)
            logger.debug("Dispatching %s", task_id)
            if self.listener is not None:
                self.listener.started(task_id)

            result = self.runner.run(task)
            if result.task_id != task_id:
                raise SchedulerError(
                    f"Runner returned a result for '{result.task_id}' while running '{task_id}'"
                )

            if self.listener is not None:
                self.listener.finished(result)

            for skipped in table.record(result):
                if self.listener is not None:
                    self.listener.skipped(skipped)

        if not table.all_terminal():
            raise AssertionError("Unreachable: acyclic graph left tasks unresolved")

        return table
