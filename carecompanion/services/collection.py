"""
In-memory record collection bound to one persisted document.

All three stores are built from this. The invariant it maintains: the
in-memory list only changes after the full document has been written, so a
failed write leaves readers looking at the last persisted state.
"""

from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from carecompanion.errors import StorageError
from carecompanion.log import get_logger
from carecompanion.storage import PersistedDocument


class Identified(Protocol):
    id: str


RecordT = TypeVar("RecordT", bound=Identified)

logger = get_logger(__name__)


class RecordCollection(Generic[RecordT]):
    """Ordered records plus the document they are persisted to."""

    def __init__(self, document: PersistedDocument, record_name: str) -> None:
        self.document = document
        self.record_name = record_name
        self.logger = logger.bind(collection=record_name, key=document.key)
        self._records: list[RecordT] = document.load()
        self.logger.debug("collection_loaded", count=len(self._records))

    @property
    def records(self) -> list[RecordT]:
        """A shallow copy; records themselves are immutable."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def reload(self) -> None:
        self._records = self.document.load()

    def get(self, record_id: str) -> RecordT | None:
        index = self._index(record_id)
        return None if index is None else self._records[index]

    def append(self, record: RecordT) -> RecordT:
        self._commit([*self._records, record])
        self.logger.info(f"{self.record_name}_added", record_id=record.id)
        return record

    def replace(
        self, record_id: str, change: Callable[[RecordT], RecordT], action: str = "updated"
    ) -> RecordT | None:
        """Swap the matching record for ``change(record)`` and persist.

        Returns ``None`` without writing when the id is unknown.
        """
        index = self._index(record_id)
        if index is None:
            self.logger.warning(f"{self.record_name}_not_found", record_id=record_id)
            return None

        updated = change(self._records[index])
        records = list(self._records)
        records[index] = updated
        self._commit(records)
        self.logger.info(f"{self.record_name}_{action}", record_id=record_id)
        return updated

    def remove(self, record_id: str) -> bool:
        """Delete the matching record. Unknown ids are a no-op."""
        index = self._index(record_id)
        if index is None:
            self.logger.debug(f"{self.record_name}_delete_skipped", record_id=record_id)
            return False

        self._commit([r for i, r in enumerate(self._records) if i != index])
        self.logger.info(f"{self.record_name}_deleted", record_id=record_id)
        return True

    def _index(self, record_id: str) -> int | None:
        return next((i for i, r in enumerate(self._records) if r.id == record_id), None)

    def _commit(self, records: list[RecordT]) -> None:
        try:
            self.document.save(records)
        except StorageError as e:
            self.logger.exception(f"{self.record_name}_persist_failed", error=str(e))
            raise
        self._records = records
