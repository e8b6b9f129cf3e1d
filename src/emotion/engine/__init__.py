"""
Signal detection and scoring engine.

Implements the emotion arbitrage pre-analysis:
1. Classify operator notes into narrative categories
2. Fire rules over market numbers and narratives
3. Score the fired signals and derive a recommendation
"""

from src.emotion.engine.analyzer import Analyzer, analyze
from src.emotion.engine.confidence import ScoreAggregator
from src.emotion.engine.narrative import NarrativeClassifier, classify
from src.emotion.engine.recommendation import (
    RecommendationSynthesizer,
    HOLD_MESSAGE,
    NO_SIGNAL_MESSAGE,
)
from src.emotion.engine.rules import RuleEvaluator, Rule, RULE_TABLE

__all__ = [
    "Analyzer",
    "analyze",
    "ScoreAggregator",
    "NarrativeClassifier",
    "classify",
    "RecommendationSynthesizer",
    "HOLD_MESSAGE",
    "NO_SIGNAL_MESSAGE",
    "RuleEvaluator",
    "Rule",
    "RULE_TABLE",
]
