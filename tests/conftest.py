"""Shared fixtures for engine tests."""

import pytest

from config.settings import RecommendationSettings, RuleThresholds, ScoringSettings
from src.emotion.engine.analyzer import Analyzer
from src.emotion.engine.confidence import ScoreAggregator
from src.emotion.engine.recommendation import RecommendationSynthesizer
from src.emotion.engine.rules import RuleEvaluator
from src.emotion.models.schemas import Direction, MarketEntry, Signal


@pytest.fixture
def make_entry():
    """Build a MarketEntry with sensible team names."""
    def _make(**fields) -> MarketEntry:
        fields.setdefault("team_a", "Lakers")
        fields.setdefault("team_b", "Celtics")
        return MarketEntry(**fields)
    return _make


@pytest.fixture
def make_signal():
    """Build a bare Signal for aggregation/recommendation tests."""
    def _make(
        confidence: float,
        direction: Direction = Direction.LONG,
        rule_id: str = "TEST_RULE",
        label: str = "Test Rule",
    ) -> Signal:
        return Signal(
            rule_id=rule_id,
            label=label,
            direction=direction,
            confidence=confidence,
            reason="test",
        )
    return _make


@pytest.fixture
def evaluator():
    """Rule evaluator pinned to default thresholds."""
    return RuleEvaluator(thresholds=RuleThresholds())


@pytest.fixture
def aggregator():
    return ScoreAggregator(ScoringSettings())


@pytest.fixture
def synthesizer():
    return RecommendationSynthesizer(RecommendationSettings())


@pytest.fixture
def analyzer(evaluator, aggregator, synthesizer):
    """Analyzer pinned to default settings, independent of the environment."""
    return Analyzer(
        evaluator=evaluator,
        aggregator=aggregator,
        synthesizer=synthesizer,
    )
