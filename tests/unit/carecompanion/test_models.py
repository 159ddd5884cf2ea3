"""
Tests for the domain models and the input boundary.

Required fields are enforced by the *Create models, schedules are kept
sorted and unique, and stored documents use camelCase field names.
"""

from datetime import UTC, date, datetime, time

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from carecompanion.domain.models import (
    CommentCreate,
    EmergencyContactCreate,
    Event,
    EventCreate,
    EventUpdate,
    Medication,
    MedicationCreate,
    MedicationUpdate,
    Post,
    PostCreate,
    normalize_time_of_day,
)

times_of_day = st.builds(
    lambda h, m: f"{h:02d}:{m:02d}",
    st.integers(min_value=0, max_value=23),
    st.integers(min_value=0, max_value=59),
)


class TestTimeOfDay:
    @pytest.mark.parametrize(
        "raw,expected", [("8:00", "08:00"), ("08:00", "08:00"), (" 23:59 ", "23:59")]
    )
    def test_normalizes_to_zero_padded(self, raw: str, expected: str) -> None:
        assert normalize_time_of_day(raw) == expected

    @pytest.mark.parametrize("raw", ["24:00", "8am", "", "12:60"])
    def test_rejects_invalid_times(self, raw: str) -> None:
        with pytest.raises(ValueError, match="HH:MM"):
            normalize_time_of_day(raw)


class TestMedicationModels:
    @given(schedule=st.lists(times_of_day, max_size=12))
    def test_schedule_is_unique_and_ascending(self, schedule: list[str]) -> None:
        med = MedicationCreate(name="Aspirin", schedule=schedule)

        assert med.schedule == sorted(set(schedule))

    def test_name_is_required(self) -> None:
        with pytest.raises(ValidationError):
            MedicationCreate(name="   ", dosage="10mg")

        with pytest.raises(ValidationError):
            MedicationCreate.model_validate({"dosage": "10mg"})

    def test_schedule_defaults_to_empty(self) -> None:
        assert MedicationCreate(name="Aspirin").schedule == []

    def test_update_schedule_is_normalized(self) -> None:
        patch = MedicationUpdate(schedule=["20:00", "8:00", "08:00"])
        assert patch.schedule == ["08:00", "20:00"]

    def test_stored_record_uses_camel_case(self) -> None:
        med = Medication(name="Aspirin", last_taken=datetime(2025, 1, 10, 8, 0))

        dumped = med.model_dump(mode="json", by_alias=True)

        assert dumped["lastTaken"] == "2025-01-10T08:00:00"
        assert "last_taken" not in dumped

    def test_aware_timestamps_become_local_naive(self) -> None:
        aware = datetime(2025, 1, 10, 8, 0, tzinfo=UTC)
        med = Medication(name="Aspirin", last_taken=aware)

        assert med.last_taken is not None
        assert med.last_taken.tzinfo is None
        assert med.last_taken == aware.astimezone().replace(tzinfo=None)

    def test_records_are_immutable(self) -> None:
        med = Medication(name="Aspirin")

        with pytest.raises(ValidationError, match="frozen"):
            med.name = "Ibuprofen"  # type: ignore[misc]


class TestContactModels:
    @pytest.mark.parametrize(
        "data",
        [
            {"name": "", "phone": "555-1234"},
            {"name": "Mary", "phone": ""},
            {"name": "Mary"},
            {"phone": "555-1234"},
        ],
    )
    def test_name_and_phone_required(self, data: dict) -> None:
        with pytest.raises(ValidationError):
            EmergencyContactCreate.model_validate(data)

    def test_optional_fields_default_to_empty(self) -> None:
        contact = EmergencyContactCreate(name="Mary", phone="555-1234")
        assert (contact.email, contact.address, contact.notes) == ("", "", "")


class TestEventModels:
    def test_full_datetime_string(self) -> None:
        event = EventCreate.model_validate({"title": "Bingo Night", "date": "2025-01-10T18:00"})
        assert event.date == datetime(2025, 1, 10, 18, 0)

    def test_date_with_separate_time(self) -> None:
        event = EventCreate.model_validate(
            {"title": "Bingo Night", "date": "2025-01-10", "time": "18:30"}
        )
        assert event.date == datetime(2025, 1, 10, 18, 30)

    def test_date_without_time_defaults_to_noon(self) -> None:
        event = EventCreate.model_validate({"title": "Picnic", "date": date(2025, 6, 1)})
        assert event.date == datetime(2025, 6, 1, 12, 0)

    @pytest.mark.parametrize(
        "data",
        [{"title": "", "date": "2025-01-10"}, {"title": "Picnic"}, {"title": "Picnic", "date": ""}],
    )
    def test_title_and_date_required(self, data: dict) -> None:
        with pytest.raises(ValidationError):
            EventCreate.model_validate(data)

    def test_time_may_be_a_time_value(self) -> None:
        event = EventCreate.model_validate(
            {"title": "Bingo Night", "date": "2025-01-10", "time": time(18, 0)}
        )
        assert event.date == datetime(2025, 1, 10, 18, 0)

    @pytest.mark.parametrize("bad_time", ["25:00", 1800, ["18:00"]])
    def test_invalid_time_is_a_validation_error(self, bad_time: object) -> None:
        with pytest.raises(ValidationError, match="HH:MM"):
            EventCreate.model_validate({"title": "Picnic", "date": "2025-06-01", "time": bad_time})

    def test_update_combines_date_and_time(self) -> None:
        patch = EventUpdate.model_validate({"date": "2025-02-02", "time": "18:00"})
        assert patch.date == datetime(2025, 2, 2, 18, 0)

    def test_update_date_only_defaults_to_noon(self) -> None:
        patch = EventUpdate.model_validate({"date": "2025-02-02"})
        assert patch.date == datetime(2025, 2, 2, 12, 0)

    def test_update_without_date_ignores_time(self) -> None:
        patch = EventUpdate.model_validate({"location": "Main Hall", "time": "18:00"})

        assert patch.date is None
        assert patch.model_dump(exclude_unset=True) == {"location": "Main Hall"}

    def test_attendees_deduplicated_in_order(self) -> None:
        event = Event(title="Bingo", date=datetime(2025, 1, 10), attendees=["b", "a", "b"])
        assert event.attendees == ["b", "a"]


class TestPostModels:
    def test_title_and_content_required(self) -> None:
        with pytest.raises(ValidationError):
            PostCreate(title="Hi", content="  ")

        with pytest.raises(ValidationError):
            PostCreate(title="", content="Hello all")

    def test_comment_text_required(self) -> None:
        with pytest.raises(ValidationError):
            CommentCreate(text="   ")

    def test_likes_cannot_be_negative(self) -> None:
        with pytest.raises(ValidationError):
            Post(title="Hi", content="Hello", created_at=datetime(2025, 1, 1), likes=-1)

    def test_post_round_trips_from_stored_json(self) -> None:
        raw = (
            '{"id": "p1", "title": "Hi", "content": "Hello all", "author": "You",'
            ' "createdAt": "2025-01-10T09:00:00", "likes": 2,'
            ' "comments": [{"author": "Alex", "text": "Welcome!",'
            ' "createdAt": "2025-01-10T09:05:00"}]}'
        )

        post = Post.model_validate_json(raw)

        assert post.created_at == datetime(2025, 1, 10, 9, 0)
        assert post.comments[0].author == "Alex"
        assert post.likes == 2
