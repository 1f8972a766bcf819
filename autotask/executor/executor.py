import hashlib
import logging
import re
import subprocess
import time
from pathlib import Path
from typing import BinaryIO

from autotask.graph import Task
from autotask.scheduler.types import TaskState

from .types import RunResult, SpawnError, TaskFailure

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_MAX_STEM = 64


class Executor:
    """Runs one task at a time, sending its combined output to a log file."""

    def __init__(self, log_dir: str | Path):
        self.log_dir = Path(log_dir)

    def log_path(self, task: Task) -> Path:
        # Sanitised, truncated stems can collide; the digest of the raw id cannot
        stem = _UNSAFE_CHARS.sub("_", task.id)[:_MAX_STEM]
        digest = hashlib.sha1(task.id.encode("utf-8")).hexdigest()[:8]
        return self.log_dir / f"{stem}-{digest}.log"

    def run(self, task: Task) -> RunResult:
        log_path = self.log_path(task)
        start = time.monotonic()

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            log_file = log_path.open("wb")
        except OSError as exc:
            return self._spawn_failure(task, start, log_path, exc, None)

        with log_file:
            try:
                proc = subprocess.run(
                    task.argv(),
                    stdin=subprocess.DEVNULL,
                    stdout=log_file,
                    stderr=subprocess.STDOUT,
                    check=False,
                )
            except OSError as exc:
                return self._spawn_failure(task, start, log_path, exc, log_file)
            end = time.monotonic()

        if proc.returncode == 0:
            return RunResult(task.id, TaskState.SUCCEEDED, start, end, log_path, 0)

        error = TaskFailure(task.id, proc.returncode)
        logger.debug("%s, output in %s", error, log_path)
        return RunResult(
            task.id, TaskState.FAILED, start, end, log_path, proc.returncode, error
        )

    def _spawn_failure(
        self,
        task: Task,
        start: float,
        log_path: Path,
        exc: OSError,
        log_file: BinaryIO | None,
    ) -> RunResult:
        end = time.monotonic()
        error = SpawnError(task.id, exc)
        logger.warning("%s", error)
        if log_file is not None:
            log_file.write(f"{error}\n".encode("utf-8"))
        return RunResult(task.id, TaskState.FAILED, start, end, log_path, None, error)
