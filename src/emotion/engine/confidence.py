"""
Score Aggregator.

Reduces the fired signals of one entry to a single 0-10 score.

    score = min(10, mean(confidence) + corroboration_bonus)

The bonus applies whenever more than one rule fired, whatever their
directions: independent rules agreeing that "something is going on" is
worth more than one strong rule alone.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from config.settings import ScoringSettings, settings
from src.emotion.models.schemas import Signal


def round_half_up(value: float, places: int = 1) -> float:
    """Round like a dashboard would (6.25 -> 6.3), not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class ScoreAggregator:
    """
    Aggregates signal confidences into the overall score.

    Stateless apart from its settings.
    """

    # Display tiers (score thresholds, highest first)
    TIERS = {
        8.5: "★★★★★ EXCELLENT",
        7.5: "★★★★☆ VERY GOOD",
        6.5: "★★★☆☆ GOOD",
        5.5: "★★☆☆☆ MODERATE",
        0.0: "★☆☆☆☆ LOW",
    }

    def __init__(self, scoring: Optional[ScoringSettings] = None):
        self.scoring = scoring or settings.scoring

    def aggregate(self, signals: Sequence[Signal]) -> float:
        """
        Calculate the overall score.

        Args:
            signals: Fired signals (any order)

        Returns:
            Score in [0, max_score], one decimal. 0 only for no signals.
        """
        if not signals:
            return 0.0

        mean = sum(s.confidence for s in signals) / len(signals)
        bonus = self.scoring.corroboration_bonus if len(signals) > 1 else 0.0

        raw_score = min(self.scoring.max_score, mean + bonus)
        score = round_half_up(max(0.0, raw_score))

        # A non-empty list never reads as "no signal"
        return max(score, self.scoring.min_nonempty_score)

    def tier(self, score: float) -> str:
        """Display tier for a score."""
        for threshold, tier_name in sorted(self.TIERS.items(), reverse=True):
            if score >= threshold:
                return tier_name
        return "★☆☆☆☆ LOW"
