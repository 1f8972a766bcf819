import io
from pathlib import Path

import pytest

from autotask.executor.types import RunResult, SpawnError, TaskFailure
from autotask.graph import Task, TaskGraph
from autotask.report import Reporter, RunSummary
from autotask.scheduler import Scheduler, TaskState


class ScriptedRunner:
    def __init__(self, outcomes: dict[str, TaskState]):
        self.outcomes = outcomes

    def run(self, task: Task) -> RunResult:
        if self.outcomes.get(task.id, TaskState.SUCCEEDED) == TaskState.FAILED:
            return RunResult(
                task.id, TaskState.FAILED, 10.0, 11.5, Path(f"{task.id}.log"), 1, TaskFailure(task.id, 1)
            )
        return RunResult(task.id, TaskState.SUCCEEDED, 10.0, 13.0, Path(f"{task.id}.log"), 0)


def test_transition_lines():
    out = io.StringIO()
    reporter = Reporter(out)

    reporter.planned(4)
    reporter.log_location("/tmp/autotask-x")
    reporter.started("build")
    reporter.finished(RunResult("build", TaskState.SUCCEEDED, 1.0, 4.256, Path("b.log"), 0))
    reporter.finished(
        RunResult("spawn", TaskState.FAILED, 1.0, 1.0, Path("s.log"), None, SpawnError("spawn", OSError(2, "nope")))
    )
    reporter.skipped("ship")

    assert out.getvalue().splitlines() == [
        "Generated plan for 4 tasks",
        "Logging output to /tmp/autotask-x",
        "Running build",
        "Finished build (took 3.26s)",
        "Failed spawn (took 0.00s)",
        "not running ship",
    ]


def test_scenario_output_and_summary():
    graph = TaskGraph.build(
        [
            Task("build", "true"),
            Task("test", "true", needs=frozenset({"build"})),
            Task("lint", "true"),
            Task("ship", "true", needs=frozenset({"test", "lint"})),
        ]
    )
    out = io.StringIO()
    reporter = Reporter(out)

    table = Scheduler(graph, ScriptedRunner({"test": TaskState.FAILED}), reporter).run()
    summary = reporter.summary(table)

    assert summary == RunSummary(succeeded=2, failed=1, skipped=1)
    assert not summary.ok
    assert out.getvalue().splitlines() == [
        "Running build",
        "Finished build (took 3.00s)",
        "Running test",
        "Failed test (took 1.50s)",
        "not running ship",
        "Running lint",
        "Finished lint (took 3.00s)",
        "2 successful, 1 failed, 1 not started",
    ]


@pytest.mark.parametrize(
    "summary, ok",
    [
        (RunSummary(3, 0, 0), True),
        (RunSummary(3, 1, 0), False),
        (RunSummary(3, 0, 1), False),
    ],
)
def test_summary_ok_only_when_everything_succeeded(summary: RunSummary, ok: bool):
    assert summary.ok is ok


def test_defaults_to_stdout(capsys: pytest.CaptureFixture[str]):
    Reporter().started("x")

    assert capsys.readouterr().out == "Running x\n"
