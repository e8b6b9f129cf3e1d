"""Emotion arbitrage data models and schemas."""

from src.emotion.models.schemas import (
    Direction,
    Category,
    StreakPolarity,
    QueueStatus,
    MarketEntry,
    MarketNumbers,
    Signal,
    AnalysisResult,
    QueueRecord,
    QueueRecordLog,
    parse_number,
    format_spread,
)

__all__ = [
    "Direction",
    "Category",
    "StreakPolarity",
    "QueueStatus",
    "MarketEntry",
    "MarketNumbers",
    "Signal",
    "AnalysisResult",
    "QueueRecord",
    "QueueRecordLog",
    "parse_number",
    "format_spread",
]
