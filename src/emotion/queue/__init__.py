"""Pending queue: storage interface and lifecycle service."""

from src.emotion.queue.repository import QueueRepository, InMemoryQueueRepository
from src.emotion.queue.service import OddsQueue, ALLOWED_TRANSITIONS

__all__ = [
    "QueueRepository",
    "InMemoryQueueRepository",
    "OddsQueue",
    "ALLOWED_TRANSITIONS",
]
