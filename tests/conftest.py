from datetime import datetime, timedelta, timezone

import pytest

from tempclip.database import ClipStore
from tempclip.services import InvalidationNotifier


class FakeClock:
    """Manually advanced clock so expiry can be tested without sleeping."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier(clock) -> InvalidationNotifier:
    return InvalidationNotifier(clock=clock)


@pytest.fixture
def store(clock, notifier) -> ClipStore:
    return ClipStore(notifier, clock=clock)
