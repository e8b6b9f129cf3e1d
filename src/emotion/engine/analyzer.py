"""
Analysis Facade.

The single entry point the upload surface and the queue consume:

    analyze(entry) -> AnalysisResult

Pipeline:
1. Classify the notes once (narrative categories)
2. Evaluate the rule table
3. Aggregate the fired signals into an overall score
4. Synthesize the recommendation

Pure and synchronous. The same entry always produces an equal result,
and analyze() never raises for any MarketEntry.
"""

from typing import Optional

import structlog

from src.emotion.engine.confidence import ScoreAggregator
from src.emotion.engine.narrative import NarrativeClassifier
from src.emotion.engine.recommendation import RecommendationSynthesizer
from src.emotion.engine.rules import RuleEvaluator
from src.emotion.models.schemas import AnalysisResult, MarketEntry

logger = structlog.get_logger()


class Analyzer:
    """Composes classifier, evaluator, aggregator and synthesizer."""

    def __init__(
        self,
        classifier: Optional[NarrativeClassifier] = None,
        evaluator: Optional[RuleEvaluator] = None,
        aggregator: Optional[ScoreAggregator] = None,
        synthesizer: Optional[RecommendationSynthesizer] = None,
    ):
        self.classifier = classifier or NarrativeClassifier()
        self.evaluator = evaluator or RuleEvaluator()
        self.aggregator = aggregator or ScoreAggregator()
        self.synthesizer = synthesizer or RecommendationSynthesizer()
        self.logger = logger.bind(component="analyzer")

    def analyze(self, entry: MarketEntry) -> AnalysisResult:
        """
        Analyze one market entry.

        Args:
            entry: Normalized market entry from the upload surface

        Returns:
            Immutable AnalysisResult
        """
        categories = self.classifier.classify(entry.free_text_notes)
        signals = self.evaluator.evaluate(entry, categories)
        score = self.aggregator.aggregate(signals)
        recommendation = self.synthesizer.synthesize(entry, signals)

        result = AnalysisResult(
            signals=tuple(signals),
            overall_score=score,
            recommendation=recommendation,
            categories=tuple(sorted(categories, key=lambda c: c.value)),
        )

        self.logger.debug(
            "Analyzed market entry",
            matchup=entry.get_display_name(),
            signals=len(result.signals),
            score=result.overall_score,
            tier=self.aggregator.tier(result.overall_score),
            recommendation=result.recommendation,
        )

        return result


_default_analyzer: Optional[Analyzer] = None


def get_analyzer() -> Analyzer:
    """Get the shared default analyzer."""
    global _default_analyzer
    if _default_analyzer is None:
        _default_analyzer = Analyzer()
    return _default_analyzer


def analyze(entry: MarketEntry) -> AnalysisResult:
    """Analyze an entry with the default analyzer."""
    return get_analyzer().analyze(entry)
