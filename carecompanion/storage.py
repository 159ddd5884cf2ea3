"""
Local key-value storage and the persisted-document binding on top of it.

Each collection is one JSON document stored under a stable key. Documents are
read once when a store is built and rewritten in full after every mutation.

Two backends implement the ``LocalStorage`` protocol:
- ``FileLocalStorage``: one ``<key>.json`` file per key, written atomically
  (temp file in the same directory, then ``os.replace``)
- ``MemoryLocalStorage``: a plain dict, for tests and throwaway sessions
"""

import os
import tempfile
from pathlib import Path
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from carecompanion.config import StorageConfig
from carecompanion.errors import StorageError
from carecompanion.log import get_logger

logger = get_logger(__name__)

DEFAULT_KEY_PREFIX = "carecompanion"

MEDICATIONS_KEY = "medications"
EMERGENCY_CONTACTS_KEY = "emergencyContacts"
EVENTS_KEY = "events"
POSTS_KEY = "posts"

COLLECTION_KEYS = (MEDICATIONS_KEY, EMERGENCY_CONTACTS_KEY, EVENTS_KEY, POSTS_KEY)


def storage_key(prefix: str, name: str) -> str:
    return f"{prefix}.{name}"


class LocalStorage(Protocol):
    """The browser-style key/value surface the stores persist through."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryLocalStorage:
    """Dict-backed storage. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileLocalStorage:
    """One JSON file per key inside ``data_dir``."""

    suffix = ".json"

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)
        self.logger = logger.bind(data_dir=str(self.data_dir))

    def _path(self, key: str) -> Path:
        if not key or any(sep in key for sep in ("/", "\\", os.sep)) or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}", key=key)
        return self.data_dir / f"{key}{self.suffix}"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}", key=key) from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_name: str | None = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.data_dir, prefix=f".{key}.", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write {key}: {e}", key=key) from e

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {key}: {e}", key=key) from e

    def keys(self) -> list[str]:
        if not self.data_dir.is_dir():
            return []
        return sorted(p.stem for p in self.data_dir.glob(f"*{self.suffix}"))


def build_storage(config: StorageConfig) -> LocalStorage:
    """Create the storage backend named in the configuration."""
    if config.backend == "memory":
        return MemoryLocalStorage()
    return FileLocalStorage(config.data_dir)


def clear_local_storage(storage: LocalStorage, prefix: str = DEFAULT_KEY_PREFIX) -> int:
    """Remove every key owned by this application. Returns how many were removed."""
    owned = [key for key in storage.keys() if key.startswith(f"{prefix}.")]
    for key in owned:
        storage.remove_item(key)
    logger.info("local_storage_cleared", prefix=prefix, removed=len(owned))
    return len(owned)


RecordT = TypeVar("RecordT", bound=BaseModel)


class PersistedDocument(Generic[RecordT]):
    """A list of records serialized as a single JSON document under one key."""

    def __init__(self, storage: LocalStorage, key: str, model: type[RecordT]) -> None:
        self.storage = storage
        self.key = key
        self._adapter = TypeAdapter(list[model])  # type: ignore[valid-type]

    def load(self) -> list[RecordT]:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            raise StorageError(
                f"Stored document {self.key} is corrupt: {e.error_count()} error(s)", key=self.key
            ) from e

    def save(self, records: list[RecordT]) -> None:
        payload = self._adapter.dump_json(records, by_alias=True).decode("utf-8")
        self.storage.set_item(self.key, payload)

    def clear(self) -> None:
        self.storage.remove_item(self.key)
