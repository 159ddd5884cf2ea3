"""
Medication store and due-medication detection.

Due rule: a medication is due when at least one scheduled time of day is at
or before the current time of day, and it has not been marked taken on the
current calendar day. Once taken, it stays off the due list until midnight,
even if later doses are scheduled that day.
"""

from datetime import datetime
from typing import Any

from carecompanion.domain.models import (
    Clock,
    Medication,
    MedicationCreate,
    MedicationUpdate,
    local_now,
    to_local_naive,
)
from carecompanion.services.collection import RecordCollection
from carecompanion.storage import (
    DEFAULT_KEY_PREFIX,
    MEDICATIONS_KEY,
    LocalStorage,
    PersistedDocument,
    storage_key,
)


def was_taken_on(medication: Medication, day: datetime) -> bool:
    return medication.last_taken is not None and medication.last_taken.date() == day.date()


def is_due(medication: Medication, now: datetime) -> bool:
    if was_taken_on(medication, now):
        return False
    # Zero-padded HH:MM strings order the same way as the times they encode
    current = now.strftime("%H:%M")
    return any(scheduled <= current for scheduled in medication.schedule)


class MedicationStore:
    """Owns the persisted medication list."""

    def __init__(
        self,
        storage: LocalStorage,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        clock: Clock = local_now,
    ) -> None:
        document = PersistedDocument(storage, storage_key(key_prefix, MEDICATIONS_KEY), Medication)
        self._collection: RecordCollection[Medication] = RecordCollection(document, "medication")
        self._clock = clock

    def _now(self) -> datetime:
        return to_local_naive(self._clock())

    @property
    def medications(self) -> list[Medication]:
        return self._collection.records

    def get(self, medication_id: str) -> Medication | None:
        return self._collection.get(medication_id)

    def reload(self) -> None:
        self._collection.reload()

    def add(self, data: MedicationCreate | dict[str, Any]) -> Medication:
        data = MedicationCreate.model_validate(data)
        return self._collection.append(Medication(**data.model_dump()))

    def update(
        self, medication_id: str, patch: MedicationUpdate | dict[str, Any]
    ) -> Medication | None:
        patch = MedicationUpdate.model_validate(patch)
        changes = patch.model_dump(exclude_unset=True, exclude_none=True)
        return self._collection.replace(
            medication_id, lambda med: med.model_copy(update=changes)
        )

    def delete(self, medication_id: str) -> bool:
        return self._collection.remove(medication_id)

    def mark_as_taken(self, medication_id: str) -> Medication | None:
        taken_at = self._now()
        return self._collection.replace(
            medication_id,
            lambda med: med.model_copy(update={"last_taken": taken_at}),
            action="taken",
        )

    def was_taken_today(self, medication: Medication, now: datetime | None = None) -> bool:
        return was_taken_on(medication, now or self._now())

    def get_due_medications(self, now: datetime | None = None) -> list[Medication]:
        now = now or self._now()
        return [med for med in self._collection.records if is_due(med, now)]

    def get_todays_medications(self, now: datetime | None = None) -> list[Medication]:
        """Scheduled medications not yet taken today, whatever the time of day."""
        now = now or self._now()
        return [
            med
            for med in self._collection.records
            if med.schedule and not was_taken_on(med, now)
        ]
