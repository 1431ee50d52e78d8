import itertools
from datetime import datetime, timedelta, timezone

import pytest

from votechain import config

CLOCK_START = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_votechain_config():
    """Reset config from the environment between every test."""
    config.reload()
    yield
    config.reload()


@pytest.fixture
def fixed_clock():
    """Deterministic clock: one second per call, starting at 2026-01-01."""
    ticks = itertools.count()

    def _clock() -> str:
        return (CLOCK_START + timedelta(seconds=next(ticks))).isoformat()

    return _clock
