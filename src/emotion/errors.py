"""Exceptions raised around the engine (ingestion and queue layers)."""


class EmotionEngineError(Exception):
    """Base class for emotion arbitrage errors."""


class UploadParseError(EmotionEngineError):
    """Upload payload could not be turned into market entries."""


class RecordNotFoundError(EmotionEngineError):
    """No queue record with the given id."""

    def __init__(self, record_id: str):
        super().__init__(f"Queue record not found: {record_id}")
        self.record_id = record_id


class InvalidStatusTransition(EmotionEngineError):
    """Status change not allowed by the queue lifecycle."""

    def __init__(self, record_id: str, current: str, requested: str):
        super().__init__(
            f"Record {record_id}: cannot move from {current} to {requested}"
        )
        self.record_id = record_id
        self.current = current
        self.requested = requested
