from __future__ import annotations

import argparse

from autotask.config.loader import DEFAULT_CONFIG_NAMES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autotask",
        description="Run the tasks of a task file in dependency order.",
    )

    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to the task file (default: first of {', '.join(DEFAULT_CONFIG_NAMES)})",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Directory for task output logs (default: a new temporary directory)",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show diagnostic messages, repeat for debug output",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only show errors on stderr",
    )

    return parser
