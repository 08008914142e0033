"""File-backed record collection, one JSON file per entity kind."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Generic, TypeVar

from agentpack.errors import ConflictError, NotFoundError, StorageError, entity_label
from agentpack.models import StoredRecord
from agentpack.utils.identifiers import generate_id, utc_timestamp

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=StoredRecord)


def read_json(path: Path) -> Any:
    """Load a JSON document, returning ``None`` if the file does not exist."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise StorageError(f"Failed to read {path}: {exc}") from exc
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise StorageError(f"Corrupt JSON in {path}: {exc}") from exc


def write_json_atomic(path: Path, payload: Any) -> None:
    """Replace ``path`` with ``payload`` in one step.

    The document is written to a temp file in the same directory, synced,
    then renamed over the target, so readers see the old or the new file
    and never a partial one.
    """
    try:
        text = json.dumps(payload, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Failed to serialize {path.name}: {exc}") from exc

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as exc:
        raise StorageError(f"Failed to write {path}: {exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except OSError as exc:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError(f"Failed to write {path}: {exc}") from exc


class JsonCollection(Generic[RecordT]):
    """All records of one kind, stored as ``{"<key>": [records...]}``.

    Records keep insertion order. Writers hold ``lock`` for the whole
    read-modify-write cycle; readers take no lock and rely on the atomic
    replace. The lock is reentrant so the store can hold it across a
    check and the write that depends on it.
    """

    def __init__(self, path: Path, model: type[RecordT], kind: str, key: str | None = None):
        self.path = path
        self.model = model
        self.kind = kind
        self.key = key or path.stem
        self.lock = threading.RLock()

    def _load(self) -> list[RecordT]:
        data = read_json(self.path)
        if data is None:
            return []
        items = data.get(self.key) if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise StorageError(f"Unexpected layout in {self.path}: missing '{self.key}' list")
        try:
            return [self.model.model_validate(item) for item in items]
        except ValueError as exc:
            raise StorageError(f"Invalid {self.kind} record in {self.path}: {exc}") from exc

    def _save(self, records: list[RecordT]) -> None:
        write_json_atomic(self.path, {self.key: [record.to_payload() for record in records]})

    def list_all(self) -> list[RecordT]:
        return self._load()

    def find(self, entity_id: str) -> RecordT | None:
        for record in self._load():
            if record.id == entity_id:
                return record
        return None

    def get(self, entity_id: str) -> RecordT:
        record = self.find(entity_id)
        if record is None:
            raise NotFoundError(self.kind, entity_id)
        return record

    def exists(self, entity_id: str) -> bool:
        return self.find(entity_id) is not None

    def create(self, fields: dict) -> RecordT:
        """Persist a new record built from snake_case ``fields``.

        A fresh id is assigned unless ``fields`` carries one; a supplied id
        that is already taken raises ``ConflictError``.
        """
        with self.lock:
            records = self._load()
            entity_id = fields.get("id") or generate_id()
            if any(record.id == entity_id for record in records):
                raise ConflictError(f"{entity_label(self.kind)} already exists: {entity_id}")
            now = utc_timestamp()
            record = self.model.model_validate(
                {**fields, "id": entity_id, "created_at": now, "updated_at": now}
            )
            records.append(record)
            self._save(records)
        logger.info("Created %s %s", self.kind, record.id)
        return record

    def update(self, entity_id: str, partial: dict) -> RecordT:
        """Merge snake_case ``partial`` onto a record and refresh ``updated_at``."""
        with self.lock:
            records = self._load()
            for index, record in enumerate(records):
                if record.id == entity_id:
                    break
            else:
                raise NotFoundError(self.kind, entity_id)

            data = record.model_dump()
            data.update({k: v for k, v in partial.items() if k not in ("id", "created_at")})
            data["updated_at"] = utc_timestamp()
            updated = self.model.model_validate(data)
            records[index] = updated
            self._save(records)
        logger.info("Updated %s %s", self.kind, entity_id)
        return updated

    def delete(self, entity_id: str) -> None:
        with self.lock:
            records = self._load()
            remaining = [record for record in records if record.id != entity_id]
            if len(remaining) == len(records):
                raise NotFoundError(self.kind, entity_id)
            self._save(remaining)
        logger.info("Deleted %s %s", self.kind, entity_id)

    def seed(self, records: list[RecordT]) -> int:
        """Insert the given records whose ids are not stored yet."""
        with self.lock:
            stored = self._load()
            known = {record.id for record in stored}
            missing = [record for record in records if record.id not in known]
            if missing:
                self._save(stored + missing)
        if missing:
            logger.info("Seeded %d %s record(s)", len(missing), self.kind)
        return len(missing)
