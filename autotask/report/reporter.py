from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from autotask.executor import RunResult
from autotask.scheduler import StateTable, TaskState


@dataclass(frozen=True)
class RunSummary:
    succeeded: int
    failed: int
    skipped: int

    @property
    def ok(self) -> bool:
        return self.failed == 0 and self.skipped == 0

    def __str__(self) -> str:
        return f"{self.succeeded} successful, {self.failed} failed, {self.skipped} not started"


class Reporter:
    """Prints one line per task transition and the closing summary.

    The wording of every line is stable; scripts parse it.
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stdout

    def planned(self, task_count: int) -> None:
        self._emit(f"Generated plan for {task_count} tasks")

    def log_location(self, path: str | Path) -> None:
        self._emit(f"Logging output to {path}")

    def started(self, task_id: str) -> None:
        self._emit(f"Running {task_id}")

    def finished(self, result: RunResult) -> None:
        verb = "Finished" if result.succeeded else "Failed"
        self._emit(f"{verb} {result.task_id} (took {result.duration_s:.2f}s)")

    def skipped(self, task_id: str) -> None:
        self._emit(f"not running {task_id}")

    def summary(self, table: StateTable) -> RunSummary:
        summary = RunSummary(
            succeeded=table.count(TaskState.SUCCEEDED),
            failed=table.count(TaskState.FAILED),
            skipped=table.count(TaskState.SKIPPED),
        )
        self._emit(str(summary))
        return summary

    def _emit(self, line: str) -> None:
        print(line, file=self.stream, flush=True)
