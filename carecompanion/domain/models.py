"""
Domain models for the care companion.

Stored records (Medication, EmergencyContact, Event, Post) mirror the persisted
document layout, including its camelCase field names. The *Create / *Update
models are the input boundary: required fields are checked there, so stores
can assume every input they receive is valid.
"""

import uuid
from collections.abc import Callable
from datetime import date as date_type
from datetime import datetime, time
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

Clock = Callable[[], datetime]

DEFAULT_EVENT_TIME = "12:00"


def new_id() -> str:
    return str(uuid.uuid4())


def local_now() -> datetime:
    """Current local wall-clock time, naive."""
    return datetime.now()


def to_local_naive(value: datetime) -> datetime:
    """Convert aware datetimes to naive local time; naive ones pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def normalize_time_of_day(value: str) -> str:
    """Parse ``H:MM`` / ``HH:MM`` (24h) and return it zero-padded."""
    try:
        parsed = datetime.strptime(value.strip(), "%H:%M")
    except ValueError as e:
        raise ValueError(f"time of day must be HH:MM (24h), got {value!r}") from e
    return parsed.strftime("%H:%M")


TimeOfDay = Annotated[str, AfterValidator(normalize_time_of_day)]
LocalDateTime = Annotated[datetime, AfterValidator(to_local_naive)]
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _sorted_unique(times: list[str]) -> list[str]:
    return sorted(set(times))


def _unique_in_order(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class DocumentModel(BaseModel):
    """Base for everything that round-trips through a persisted document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredRecord(DocumentModel):
    """Persisted records are replaced, never edited in place."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)


# Medications


class Medication(StoredRecord):
    """A medication and the times of day it should be taken."""

    name: str
    dosage: str = ""
    instructions: str = ""
    schedule: list[TimeOfDay] = Field(default_factory=list)
    last_taken: LocalDateTime | None = None

    @field_validator("schedule")
    def normalize_schedule(cls, v):
        return _sorted_unique(v)


class MedicationCreate(DocumentModel):
    name: RequiredText
    dosage: str = ""
    instructions: str = ""
    schedule: list[TimeOfDay] = Field(default_factory=list)

    @field_validator("schedule")
    def normalize_schedule(cls, v):
        return _sorted_unique(v)


class MedicationUpdate(DocumentModel):
    name: RequiredText | None = None
    dosage: str | None = None
    instructions: str | None = None
    schedule: list[TimeOfDay] | None = None

    @field_validator("schedule")
    def normalize_schedule(cls, v):
        return None if v is None else _sorted_unique(v)


# Emergency contacts


class EmergencyContact(StoredRecord):
    name: str
    relationship: str = ""
    phone: str
    email: str = ""
    address: str = ""
    notes: str = ""


class EmergencyContactCreate(DocumentModel):
    name: RequiredText
    relationship: str = ""
    phone: RequiredText
    email: str = ""
    address: str = ""
    notes: str = ""


class EmergencyContactUpdate(DocumentModel):
    name: RequiredText | None = None
    relationship: str | None = None
    phone: RequiredText | None = None
    email: str | None = None
    address: str | None = None
    notes: str | None = None


# Community


class Event(StoredRecord):
    """A community event. ``attendees`` holds user ids, each at most once."""

    title: str
    description: str = ""
    date: LocalDateTime
    location: str = ""
    organizer: str = ""
    attendees: list[str] = Field(default_factory=list)

    @field_validator("attendees")
    def dedupe_attendees(cls, v):
        return _unique_in_order(v)


def _time_of_day_text(value: Any) -> str:
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if not isinstance(value, str):
        raise ValueError(f"time of day must be HH:MM (24h), got {value!r}")
    return normalize_time_of_day(value)


def combine_event_date(data: Any) -> Any:
    """Fold a separate ``time`` field into a date-only ``date`` (noon by default).

    Full date-times are left alone; without a ``date`` the ``time`` is dropped.
    """
    if not isinstance(data, dict):
        return data
    data = dict(data)
    raw_time = data.pop("time", None) or DEFAULT_EVENT_TIME
    raw_date = data.get("date")

    if raw_date is None or isinstance(raw_date, datetime):
        return data
    if isinstance(raw_date, date_type):
        data["date"] = datetime.combine(
            raw_date, time.fromisoformat(_time_of_day_text(raw_time))
        )
    elif isinstance(raw_date, str) and len(raw_date.strip()) == 10:
        data["date"] = f"{raw_date.strip()}T{_time_of_day_text(raw_time)}"
    return data


class EventCreate(DocumentModel):
    """New event input.

    ``date`` may be a full date-time, or a calendar date combined with the
    optional ``time`` field (noon when no time is given).
    """

    title: RequiredText
    description: str = ""
    date: LocalDateTime
    location: str = ""
    organizer: str | None = None

    @model_validator(mode="before")
    @classmethod
    def combine_date_and_time(cls, data: Any) -> Any:
        return combine_event_date(data)


class EventUpdate(DocumentModel):
    """Event edits; ``date`` and ``time`` follow the same rules as EventCreate."""

    title: RequiredText | None = None
    description: str | None = None
    date: LocalDateTime | None = None
    location: str | None = None
    organizer: str | None = None

    @model_validator(mode="before")
    @classmethod
    def combine_date_and_time(cls, data: Any) -> Any:
        return combine_event_date(data)


class Comment(DocumentModel):
    model_config = ConfigDict(frozen=True)

    author: str
    text: str
    created_at: LocalDateTime


class CommentCreate(DocumentModel):
    text: RequiredText
    author: str | None = None


class Post(StoredRecord):
    """A discussion post. Likes are a plain counter, not tied to any user."""

    title: str
    content: str
    author: str = ""
    created_at: LocalDateTime
    likes: int = Field(default=0, ge=0)
    comments: list[Comment] = Field(default_factory=list)


class PostCreate(DocumentModel):
    title: RequiredText
    content: RequiredText
    author: str | None = None


# Read-only aggregation


class DashboardSnapshot(BaseModel):
    """What the home screen shows at a given moment."""

    generated_at: datetime
    due_medications: list[Medication]
    upcoming_events: list[Event]
    contacts: list[EmergencyContact]
