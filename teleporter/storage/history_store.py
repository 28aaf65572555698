"""History of completed reconstructions.

Purpose of this abstraction:
    Persist one immutable record per successful reconstruction in
    `history.json`, ordered most-recent first, so past runs can be listed,
    reopened in the console, deleted or cleared.

Record lifecycle:
    Records are created by `HistoryRecord.create` (new id + timestamp) and
    prepended by `append`. They are never edited afterwards; only `remove` and
    `clear` change the stored list.

Failure behavior:
    A missing, unreadable or non-list file is treated as an empty history.
    Individual malformed entries are skipped on load.
"""

import time
import uuid
import threading
import logging
from dataclasses import asdict, dataclass

from teleporter.config import HISTORY_PATH
from teleporter.storage.json_store import atomic_json_save, load_json


logger = logging.getLogger(__name__)

STATUS_COMPLETED = "completed"


@dataclass(frozen=True)
class HistoryRecord:
    """One completed run.

    Attributes:
        id: Unique record id (uuid4 hex).
        timestamp: Creation time in epoch milliseconds.
        original_file_type: MIME type of the source file.
        original_file_preview: Data URL of the source file, if kept.
        prompt: Blueprint text used for the reconstruction.
        output_url: Locator of the produced artifact.
        status: Always `completed`; failed runs are never recorded.
    """

    id: str
    timestamp: int
    original_file_type: str
    original_file_preview: str | None
    prompt: str
    output_url: str | None
    status: str = STATUS_COMPLETED

    @classmethod
    def create(
        cls,
        original_file_type: str,
        original_file_preview: str | None,
        prompt: str,
        output_url: str | None,
        status: str = STATUS_COMPLETED,
    ) -> "HistoryRecord":
        return cls(
            id=uuid.uuid4().hex,
            timestamp=int(time.time() * 1000),
            original_file_type=original_file_type,
            original_file_preview=original_file_preview,
            prompt=prompt,
            output_url=output_url,
            status=status,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryRecord":
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            original_file_type=str(data.get("original_file_type", "")),
            original_file_preview=data.get("original_file_preview"),
            prompt=str(data.get("prompt", "")),
            output_url=data.get("output_url"),
            status=str(data.get("status", STATUS_COMPLETED)),
        )

    def to_dict(self) -> dict:
        return asdict(self)


class HistoryStore:
    """JSON-file backed history list, most-recent first."""

    def __init__(self, path: str = HISTORY_PATH):
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> list[HistoryRecord]:
        data = load_json(self.path, [])
        if not isinstance(data, list):
            logger.warning("History file %s is not a list; treating as empty", self.path)
            return []

        records = []
        for item in data:
            try:
                records.append(HistoryRecord.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed history entry in %s", self.path)
        return records

    def _save(self, records: list[HistoryRecord]):
        atomic_json_save(self.path, [r.to_dict() for r in records])

    def list_all(self) -> list[HistoryRecord]:
        return self._load()

    def get(self, record_id: str) -> HistoryRecord | None:
        for record in self._load():
            if record.id == record_id:
                return record
        return None

    def append(self, record: HistoryRecord) -> HistoryRecord:
        with self._lock:
            records = self._load()
            records.insert(0, record)
            self._save(records)
        return record

    def remove(self, record_id: str) -> bool:
        """Delete one record; returns whether it existed."""
        with self._lock:
            records = self._load()
            kept = [r for r in records if r.id != record_id]
            if len(kept) == len(records):
                return False
            self._save(kept)
            return True

    def clear(self):
        with self._lock:
            self._save([])
