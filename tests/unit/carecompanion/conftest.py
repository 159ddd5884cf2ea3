"""Shared fixtures: in-memory storage and a controllable clock."""

from datetime import datetime, timedelta

import pytest

from carecompanion.errors import StorageError
from carecompanion.storage import MemoryLocalStorage


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def storage() -> MemoryLocalStorage:
    return MemoryLocalStorage()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 10, 8, 5))


class FailingStorage(MemoryLocalStorage):
    """In-memory storage whose writes, or removal of one key, can be made to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False
        self.fail_remove: str | None = None

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError("quota exceeded", key=key)
        super().set_item(key, value)

    def remove_item(self, key: str) -> None:
        if key == self.fail_remove:
            raise StorageError("permission denied", key=key)
        super().remove_item(key)


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()
