"""
Configuration settings for the emotion arbitrage signal engine.
Uses pydantic-settings for validation and environment variable loading.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuleThresholds(BaseSettings):
    """Trigger thresholds for the rule table."""

    # Public betting share (percent of tickets on one side)
    public_fade_pct: float = 70.0
    public_fade_strong_pct: float = 80.0  # Heavier lean = stronger fade

    # Point spread
    big_spread: float = 8.0
    close_game_min_spread: float = 1.5
    close_game_max_spread: float = 3.0

    # Line drift since open (percent)
    line_move_pct: float = 10.0
    line_move_strong_pct: float = 20.0


class ScoringSettings(BaseSettings):
    """Overall score aggregation."""

    corroboration_bonus: float = 1.0  # Added when more than one rule fires
    max_score: float = 10.0
    min_nonempty_score: float = 0.1   # Floor for a non-empty signal list


class RecommendationSettings(BaseSettings):
    """Recommendation synthesis policy."""

    high_confidence_threshold: float = 6.5
    # Screenshot flow used 1, manual flow used 2. One policy: 1.
    min_high_confidence_signals: int = 1


class QueueSettings(BaseSettings):
    """Pending queue lifecycle."""

    pending_ttl_hours: float = 12.0  # PENDING records older than this expire


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMOTION_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Sub-settings
    rules: RuleThresholds = Field(default_factory=RuleThresholds)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    recommendation: RecommendationSettings = Field(default_factory=RecommendationSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)


# Global settings instance
settings = Settings()
