# conftest.py
import logging
from datetime import datetime, timedelta

import pytest


class FakeClock:
    """Callable clock for DailyRotateFile, advanced by hand."""
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 9, 23, 58, 0))


@pytest.fixture
def root_logger():
    """Restores the root logger after code that calls setup_logging()."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for h in root.handlers:
        if h not in saved_handlers:
            h.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
