"""Emergency contact store: plain CRUD over one persisted document."""

from typing import Any

from carecompanion.domain.models import (
    EmergencyContact,
    EmergencyContactCreate,
    EmergencyContactUpdate,
)
from carecompanion.services.collection import RecordCollection
from carecompanion.storage import (
    DEFAULT_KEY_PREFIX,
    EMERGENCY_CONTACTS_KEY,
    LocalStorage,
    PersistedDocument,
    storage_key,
)


class EmergencyContactStore:
    def __init__(self, storage: LocalStorage, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        document = PersistedDocument(
            storage, storage_key(key_prefix, EMERGENCY_CONTACTS_KEY), EmergencyContact
        )
        self._collection: RecordCollection[EmergencyContact] = RecordCollection(
            document, "emergency_contact"
        )

    @property
    def contacts(self) -> list[EmergencyContact]:
        return self._collection.records

    def get(self, contact_id: str) -> EmergencyContact | None:
        return self._collection.get(contact_id)

    def reload(self) -> None:
        self._collection.reload()

    def add(self, data: EmergencyContactCreate | dict[str, Any]) -> EmergencyContact:
        data = EmergencyContactCreate.model_validate(data)
        return self._collection.append(EmergencyContact(**data.model_dump()))

    def update(
        self, contact_id: str, patch: EmergencyContactUpdate | dict[str, Any]
    ) -> EmergencyContact | None:
        patch = EmergencyContactUpdate.model_validate(patch)
        changes = patch.model_dump(exclude_unset=True, exclude_none=True)
        return self._collection.replace(contact_id, lambda c: c.model_copy(update=changes))

    def delete(self, contact_id: str) -> bool:
        return self._collection.remove(contact_id)
