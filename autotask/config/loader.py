import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import ConfigError, ProjectConfig, TaskConfig, UnsupportedConfigFormatError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAMES = (
    "autotask.toml",
    "autotask.yaml",
    "autotask.yml",
    "autotask.json",
)


def find_default_config(directory: str | Path = ".") -> Path:
    base = Path(directory).expanduser().resolve()

    for name in DEFAULT_CONFIG_NAMES:
        candidate = base / name
        if candidate.is_file():
            logger.debug("Using task file %s", candidate)
            return candidate

    raise ConfigError(
        f"No task file found in {base}\n Expected one of: {', '.join(DEFAULT_CONFIG_NAMES)}"
    )


def load_project(path: str | Path) -> ProjectConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    project = _build_project_config(raw_file)
    logger.debug("Loaded %d task(s) from %s", len(project), pure_path)
    return project


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .toml, .yml/.yaml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    return _expect_mapping(path, "YAML", raw_file)


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc

    return _expect_mapping(path, "TOML", raw_file)


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    return _expect_mapping(path, "JSON", raw_file)


def _expect_mapping(path: Path, kind: str, raw_file: Any) -> Mapping[str, Any]:
    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: {kind} parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_project_config(raw: Mapping[str, Any]) -> ProjectConfig:
    tasks = {}

    if "tasks" not in raw:
        raise ConfigError("Missing 'tasks' field")

    if not isinstance(raw["tasks"], Mapping):
        raise ConfigError(f"'tasks' must be a mapping, got {type(raw['tasks'])}")

    if len(raw["tasks"]) < 1:
        raise ConfigError("There must be at least one task in the config file")

    for task_id, fields in raw["tasks"].items():
        if not isinstance(task_id, str):
            raise ConfigError(f"Task id must be a string, got {type(task_id)}")

        if not isinstance(fields, Mapping):
            raise ConfigError(f"{task_id} must be a mapping")

        task_id_norm = task_id.strip()

        if len(task_id_norm) < 1:
            raise ConfigError("A task id can't be empty")

        if task_id_norm in tasks:
            raise ConfigError(f"Duplicate task id after normalization: {task_id_norm}")

        tasks[task_id_norm] = _build_task_config(task_id_norm, fields)

    # Unknown and circular needs are reported by the task graph
    return ProjectConfig(tasks=tasks)


def _build_task_config(task_id: str, fields: Mapping[str, Any]) -> TaskConfig:
    keys = {"program", "arguments", "needs"}
    arguments = []
    needs = []
    seen = set()

    for field in fields.keys():
        if field not in keys:
            raise ConfigError(f"{task_id}: Can't process: {field}")

    if "program" not in fields:
        raise ConfigError(f"{task_id}: missing 'program'")

    if not isinstance(fields["program"], str):
        raise ConfigError(f"{task_id}: The program should be a string")

    if len(fields["program"].strip()) < 1:
        raise ConfigError(f"{task_id}: Program missing")

    program = fields["program"].strip()

    if "arguments" in fields:
        if not isinstance(fields["arguments"], list):
            raise ConfigError(f"{task_id}: Arguments should be in a list.")

        for item in fields["arguments"]:
            if not isinstance(item, str):
                raise ConfigError(
                    f"{task_id}: {item} should be a string in the argument list"
                )

            # Arguments are passed verbatim, whitespace included
            arguments.append(item)

    if "needs" in fields:
        if not isinstance(fields["needs"], list):
            raise ConfigError(f"{task_id}: Needs should be in a list.")

        for item in fields["needs"]:
            if not isinstance(item, str):
                raise ConfigError(f"{task_id}: {item} should be a string in the needs list")

            need = item.strip()

            if len(need) < 1:
                raise ConfigError(f"{task_id}: A need is empty")

            if need in seen:
                continue

            needs.append(need)
            seen.add(need)

    return TaskConfig(task_id, program, arguments, needs)
