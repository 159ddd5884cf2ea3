"""Tests for the application container and the display helpers."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from carecompanion.app import CareCompanion
from carecompanion.config import AppConfig, StorageConfig
from carecompanion.errors import StorageError
from carecompanion.formatting import format_relative_timestamp, format_time_12h
from carecompanion.storage import FileLocalStorage, MemoryLocalStorage


@pytest.fixture
def app(storage: MemoryLocalStorage, clock) -> CareCompanion:
    config = AppConfig(storage=StorageConfig(backend="memory"))
    return CareCompanion(config, storage=storage, clock=clock)


def test_stores_share_one_storage(app: CareCompanion, storage: MemoryLocalStorage) -> None:
    app.medications.add({"name": "Aspirin", "schedule": ["08:00"]})
    app.contacts.add({"name": "Mary Smith", "phone": "555-1234"})
    app.community.add_event({"title": "Bingo Night", "date": "2025-01-10T18:00"})
    app.community.add_post({"title": "Hi", "content": "Hello all"})

    assert sorted(storage.keys()) == [
        "carecompanion.emergencyContacts",
        "carecompanion.events",
        "carecompanion.medications",
        "carecompanion.posts",
    ]


def test_clear_all_data_empties_storage_and_stores(
    app: CareCompanion, storage: MemoryLocalStorage
) -> None:
    storage.set_item("another-app.prefs", "{}")
    app.medications.add({"name": "Aspirin", "schedule": ["08:00"]})
    app.contacts.add({"name": "Mary Smith", "phone": "555-1234"})
    app.community.add_post({"title": "Hi", "content": "Hello all"})

    removed = app.clear_all_data()

    assert removed == 3
    assert storage.keys() == ["another-app.prefs"]
    assert app.medications.medications == []
    assert app.contacts.contacts == []
    assert app.community.posts == []
    assert app.dashboard.snapshot().due_medications == []


def test_clear_all_data_on_empty_device(app: CareCompanion) -> None:
    assert app.clear_all_data() == 0


def test_partial_clear_does_not_resurrect_removed_data(failing_storage, clock) -> None:
    config = AppConfig(storage=StorageConfig(backend="memory"))
    app = CareCompanion(config, storage=failing_storage, clock=clock)
    app.medications.add({"name": "Aspirin", "schedule": ["08:00"]})
    app.contacts.add({"name": "Mary Smith", "phone": "555-1234"})
    failing_storage.fail_remove = "carecompanion.emergencyContacts"

    with pytest.raises(StorageError, match="permission denied"):
        app.clear_all_data()

    # Medications were removed before the contacts removal failed
    assert failing_storage.keys() == ["carecompanion.emergencyContacts"]
    assert app.medications.medications == []
    assert [c.name for c in app.contacts.contacts] == ["Mary Smith"]

    app.medications.add({"name": "Ibuprofen"})

    reopened = CareCompanion(config, storage=failing_storage, clock=clock)
    assert [m.name for m in reopened.medications.medications] == ["Ibuprofen"]


def test_file_backend_from_config(tmp_path: Path, clock) -> None:
    config = AppConfig(
        storage=StorageConfig(backend="file", data_dir=str(tmp_path), key_prefix="home")
    )

    app = CareCompanion(config, clock=clock)
    app.contacts.add({"name": "Mary Smith", "phone": "555-1234"})

    assert isinstance(app.storage, FileLocalStorage)
    assert (tmp_path / "home.emergencyContacts.json").exists()
    assert len(CareCompanion(config, clock=clock).contacts.contacts) == 1


def test_community_config_flows_into_store(storage: MemoryLocalStorage, clock) -> None:
    config = AppConfig(
        storage=StorageConfig(backend="memory"),
        community={"current_user_id": "user-7", "default_author": "Grandpa Joe"},
    )
    app = CareCompanion(config, storage=storage, clock=clock)

    event = app.community.add_event({"title": "Bingo Night", "date": "2025-01-10T18:00"})
    app.community.rsvp(event.id)

    assert app.community.is_attending(event.id, "user-7")
    assert app.community.add_post({"title": "Hi", "content": "Hello"}).author == "Grandpa Joe"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("00:15", "12:15 AM"),
        ("08:00", "8:00 AM"),
        ("12:00", "12:00 PM"),
        ("14:30", "2:30 PM"),
        ("", ""),
    ],
)
def test_format_time_12h(value: str, expected: str) -> None:
    assert format_time_12h(value) == expected


@pytest.mark.parametrize(
    "seconds_ago,expected",
    [
        (30, "Just now"),
        (60, "1 minute ago"),
        (59 * 60, "59 minutes ago"),
        (3600, "1 hour ago"),
        (5 * 3600, "5 hours ago"),
        (86400, "1 day ago"),
        (3 * 86400 + 10, "3 days ago"),
    ],
)
def test_format_relative_timestamp(seconds_ago: int, expected: str) -> None:
    now = datetime(2025, 1, 10, 12, 0)
    ts = now - timedelta(seconds=seconds_ago)

    assert format_relative_timestamp(ts, now) == expected
