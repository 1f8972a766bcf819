import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # run_cli reconfigures the root logger against the captured stderr
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
