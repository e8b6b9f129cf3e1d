"""
Pending queue storage.

The dashboard keeps analyzed entries in a queue until the live-fusion step
picks them up. Storage is an injected collaborator so the engine and its
tests never depend on a storage technology.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Optional

from src.emotion.errors import RecordNotFoundError
from src.emotion.models.schemas import QueueRecord, QueueStatus


class QueueRepository(ABC):
    """
    Abstract queue store keyed by record id.

    Implementations must return records newest first from list().
    """

    @abstractmethod
    def save(self, record: QueueRecord) -> QueueRecord:
        """Insert or replace a record."""
        pass

    @abstractmethod
    def get(self, record_id: str) -> QueueRecord:
        """Get a record. Raises RecordNotFoundError."""
        pass

    @abstractmethod
    def list(self, status: Optional[QueueStatus] = None) -> list[QueueRecord]:
        """List records, optionally filtered by status."""
        pass

    @abstractmethod
    def update_status(self, record_id: str, status: QueueStatus) -> QueueRecord:
        """Set a record's status. Raises RecordNotFoundError."""
        pass

    @abstractmethod
    def delete(self, record_id: str) -> None:
        """Delete a record. Raises RecordNotFoundError."""
        pass

    @abstractmethod
    def clear(self) -> int:
        """Delete all records, returning how many were removed."""
        pass


class InMemoryQueueRepository(QueueRepository):
    """
    Dict-backed queue store.

    Records are ordered by created_at, newest first; ties keep insertion
    order with the later insert first.
    """

    def __init__(self):
        self._records: dict[str, QueueRecord] = {}
        self._sequence: dict[str, int] = {}
        self._next_seq = 0

    def save(self, record: QueueRecord) -> QueueRecord:
        if record.record_id not in self._sequence:
            self._sequence[record.record_id] = self._next_seq
            self._next_seq += 1
        self._records[record.record_id] = record
        return record

    def get(self, record_id: str) -> QueueRecord:
        try:
            return self._records[record_id]
        except KeyError:
            raise RecordNotFoundError(record_id) from None

    def list(self, status: Optional[QueueStatus] = None) -> list[QueueRecord]:
        records = [
            r for r in self._records.values()
            if status is None or r.status == status
        ]
        records.sort(
            key=lambda r: (r.created_at, self._sequence[r.record_id]),
            reverse=True,
        )
        return records

    def update_status(self, record_id: str, status: QueueStatus) -> QueueRecord:
        updated = replace(self.get(record_id), status=status)
        self._records[record_id] = updated
        return updated

    def delete(self, record_id: str) -> None:
        self.get(record_id)
        del self._records[record_id]
        del self._sequence[record_id]

    def clear(self) -> int:
        count = len(self._records)
        self._records.clear()
        self._sequence.clear()
        return count

    def __len__(self) -> int:
        return len(self._records)
