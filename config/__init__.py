"""Configuration module."""

from config.settings import (
    settings,
    Settings,
    RuleThresholds,
    ScoringSettings,
    RecommendationSettings,
    QueueSettings,
)

__all__ = [
    "settings",
    "Settings",
    "RuleThresholds",
    "ScoringSettings",
    "RecommendationSettings",
    "QueueSettings",
]
