"""
Pending queue service.

Analyze-and-enqueue plus the record lifecycle:

    PENDING -> MERGED   (live fusion consumed the record)
    PENDING -> EXPIRED  (game window passed before fusion)

MERGED and EXPIRED are terminal.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional
from uuid import uuid4

import structlog

from config.settings import QueueSettings, settings
from src.emotion.engine.analyzer import Analyzer, get_analyzer
from src.emotion.errors import InvalidStatusTransition
from src.emotion.models.schemas import MarketEntry, QueueRecord, QueueStatus
from src.emotion.queue.repository import QueueRepository

logger = structlog.get_logger()

ALLOWED_TRANSITIONS: dict[QueueStatus, frozenset[QueueStatus]] = {
    QueueStatus.PENDING: frozenset({QueueStatus.MERGED, QueueStatus.EXPIRED}),
    QueueStatus.MERGED: frozenset(),
    QueueStatus.EXPIRED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OddsQueue:
    """
    Front door for the upload surface.

    Runs the analyzer on each submitted entry and stores the result in the
    injected repository as a PENDING record.
    """

    def __init__(
        self,
        repository: QueueRepository,
        analyzer: Optional[Analyzer] = None,
        clock: Optional[Callable[[], datetime]] = None,
        queue_settings: Optional[QueueSettings] = None,
    ):
        self.repository = repository
        self.analyzer = analyzer or get_analyzer()
        self.clock = clock or _utcnow
        self.queue_settings = queue_settings or settings.queue
        self.logger = logger.bind(component="odds_queue")

    # =========================================================================
    # Submission
    # =========================================================================

    def submit(self, entry: MarketEntry) -> QueueRecord:
        """Analyze one entry and queue it."""
        result = self.analyzer.analyze(entry)
        record = QueueRecord(
            record_id=uuid4().hex,
            entry=entry,
            result=result,
            created_at=self.clock(),
        )
        self.repository.save(record)

        self.logger.info(
            "📥 Queued market entry",
            record_id=record.record_id[:8],
            matchup=entry.get_display_name(),
            score=result.overall_score,
            signals=len(result.signals),
            recommendation=result.recommendation,
        )
        return record

    def submit_all(self, entries: Iterable[MarketEntry]) -> list[QueueRecord]:
        """Analyze and queue several entries, in order."""
        return [self.submit(entry) for entry in entries]

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _transition(self, record_id: str, status: QueueStatus) -> QueueRecord:
        record = self.repository.get(record_id)
        if status not in ALLOWED_TRANSITIONS[record.status]:
            raise InvalidStatusTransition(record_id, record.status.value, status.value)

        updated = self.repository.update_status(record_id, status)
        self.logger.info(
            "Queue record status changed",
            record_id=record_id[:8],
            old=record.status.value,
            new=status.value,
        )
        return updated

    def mark_merged(self, record_id: str) -> QueueRecord:
        """Mark a pending record as consumed by live fusion."""
        return self._transition(record_id, QueueStatus.MERGED)

    def expire(self, record_id: str) -> QueueRecord:
        """Expire a pending record."""
        return self._transition(record_id, QueueStatus.EXPIRED)

    def expire_stale(self, max_age: Optional[timedelta] = None) -> list[QueueRecord]:
        """
        Expire pending records older than max_age.

        Args:
            max_age: Age limit (default: settings.queue.pending_ttl_hours)

        Returns:
            The records that were expired
        """
        if max_age is None:
            max_age = timedelta(hours=self.queue_settings.pending_ttl_hours)
        cutoff = self.clock() - max_age

        expired = [
            self.expire(record.record_id)
            for record in self.repository.list(QueueStatus.PENDING)
            if record.created_at < cutoff
        ]
        if expired:
            self.logger.info("Expired stale queue records", count=len(expired))
        return expired

    # =========================================================================
    # Queries and removal
    # =========================================================================

    def pending(self) -> list[QueueRecord]:
        """Pending records, newest first."""
        return self.repository.list(QueueStatus.PENDING)

    def records(self, status: Optional[QueueStatus] = None) -> list[QueueRecord]:
        return self.repository.list(status)

    def delete(self, record_id: str) -> None:
        self.repository.delete(record_id)
        self.logger.info("Deleted queue record", record_id=record_id[:8])

    def clear(self) -> int:
        count = self.repository.clear()
        self.logger.info("Cleared queue", count=count)
        return count

    def get_metrics(self) -> dict:
        """Queue counts by status."""
        records = self.repository.list()
        by_status = {status.value: 0 for status in QueueStatus}
        for record in records:
            by_status[record.status.value] += 1
        return {
            "total": len(records),
            "by_status": by_status,
        }
