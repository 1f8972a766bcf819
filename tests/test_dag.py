import pytest

from autotask.config.types import ProjectConfig, TaskConfig
from autotask.graph.dag import TaskGraph
from autotask.graph.types import CycleError, DuplicateTaskError, Task, UnknownDependency


def _proj(spec: dict[str, list[str]]) -> ProjectConfig:
    """
    spec: task_id -> needs list
    """
    tasks: dict[str, TaskConfig] = {}
    for task_id, needs in spec.items():
        tasks[task_id] = TaskConfig(
            id=task_id,
            program="echo",
            arguments=[task_id],
            needs=list(needs),
        )
    return ProjectConfig(tasks=tasks)


def test_tasks_keep_declaration_order():
    g = TaskGraph.from_project(_proj({"b": [], "a": ["b"], "c": []}))

    assert g.ids() == ["b", "a", "c"]
    assert [t.id for t in g] == ["b", "a", "c"]
    assert len(g) == 3
    assert g.index_of("c") == 2


def test_task_is_built_from_declaration():
    g = TaskGraph.from_project(_proj({"a": [], "b": ["a"]}))

    task = g.get("b")
    assert task == Task(id="b", program="echo", arguments=("b",), needs=frozenset({"a"}))
    assert task.argv() == ["echo", "b"]


def test_needs_and_dependents():
    g = TaskGraph.from_project(
        _proj(
            {
                "build": [],
                "test": ["build"],
                "lint": [],
                "ship": ["test", "lint"],
                "docs": ["build"],
            }
        )
    )

    assert g.needs("ship") == frozenset({"test", "lint"})
    assert g.needs("build") == frozenset()
    assert g.dependents("build") == ("test", "docs")
    assert g.dependents("lint") == ("ship",)
    assert g.dependents("ship") == ()


def test_lookup_of_unknown_id_raises_key_error():
    g = TaskGraph.from_project(_proj({"a": []}))

    assert "a" in g
    assert "nope" not in g
    with pytest.raises(KeyError):
        g.get("nope")
    with pytest.raises(KeyError):
        g.dependents("nope")


def test_build_accepts_plain_tasks():
    g = TaskGraph.build(
        [
            Task("a", "true"),
            Task("b", "true", needs=frozenset({"a"})),
        ]
    )

    assert g.dependents("a") == ("b",)


def test_duplicate_id_raises():
    with pytest.raises(DuplicateTaskError) as e:
        TaskGraph.build([Task("a", "true"), Task("a", "false")])

    assert e.value.task_id == "a"


def test_unknown_dependency_raises():
    with pytest.raises(UnknownDependency) as e:
        TaskGraph.from_project(_proj({"a": [], "b": ["a", "ghost"]}))

    assert e.value.task_id == "b"
    assert e.value.dependency == "ghost"
    assert "ghost" in str(e.value)


def test_cycle_detection_two_node_cycle():
    with pytest.raises(CycleError):
        TaskGraph.from_project(_proj({"A": ["B"], "B": ["A"]}))


def test_self_dependency_is_a_cycle():
    with pytest.raises(CycleError) as e:
        TaskGraph.from_project(_proj({"A": ["A"]}))

    assert e.value.cycle == ["A", "A"]


def test_cycle_error_includes_closed_loop_path():
    project = _proj({"A": ["B"], "B": ["C"], "C": ["A"], "D": []})

    with pytest.raises(CycleError) as e:
        TaskGraph.from_project(project)

    cycle = e.value.cycle
    assert cycle[0] == cycle[-1]
    assert set(cycle) == {"A", "B", "C"}
    assert "->" in str(e.value)


def test_cycle_behind_valid_prefix_is_detected():
    project = _proj({"root": [], "x": ["root", "z"], "y": ["x"], "z": ["y"]})

    with pytest.raises(CycleError) as e:
        TaskGraph.from_project(project)

    assert "root" not in e.value.cycle


def test_diamond_is_valid():
    g = TaskGraph.from_project(_proj({"D": [], "B": ["D"], "C": ["D"], "A": ["B", "C"]}))

    assert g.dependents("D") == ("B", "C")
    assert g.needs("A") == frozenset({"B", "C"})


def test_graph_is_hashable_and_index_is_read_only():
    g = TaskGraph.from_project(_proj({"a": [], "b": ["a"]}))

    assert {g: "run"}[g] == "run"
    with pytest.raises(TypeError):
        g._index["c"] = 2


def test_dependent_positions_are_precomputed():
    g = TaskGraph.from_project(_proj({"build": [], "test": ["build"], "docs": ["build"]}))
    pos = g.index_of("build")

    assert g.dependent_positions(pos) == (1, 2)
    assert g.dependent_positions(pos) is g.dependent_positions(pos)
