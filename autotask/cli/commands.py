from __future__ import annotations

import argparse
import logging
import sys
import tempfile
from pathlib import Path

from autotask.config import ConfigError, find_default_config, load_project
from autotask.executor import Executor
from autotask.graph import GraphError, TaskGraph
from autotask.report import Reporter
from autotask.scheduler import Scheduler

from .args import build_parser

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        return cmd_run(args)

    except (ConfigError, GraphError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def configure_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def cmd_run(args: argparse.Namespace) -> int:
    config_path = Path(args.config) if args.config else find_default_config()
    project = load_project(config_path)
    graph = TaskGraph.from_project(project)

    reporter = Reporter()
    reporter.planned(len(graph))

    log_dir = _prepare_log_dir(args.log_dir)
    reporter.log_location(log_dir)

    scheduler = Scheduler(graph, Executor(log_dir), reporter)
    table = scheduler.run()
    summary = reporter.summary(table)
    return 0 if summary.ok else 1


def _prepare_log_dir(requested: str | None) -> Path:
    if requested is None:
        return Path(tempfile.mkdtemp(prefix="autotask-"))

    log_dir = Path(requested).expanduser().resolve()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Cannot create log directory {log_dir}: {exc}") from exc
    logger.debug("Writing task logs to %s", log_dir)
    return log_dir
