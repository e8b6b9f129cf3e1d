"""
Recommendation Synthesizer.

Turns high-confidence signals into one directional call:
- LONG majority  -> take the receiving side (positive spread)
- SHORT majority -> take the favored side (negative spread)
- Tie            -> explicit hold
- Nothing strong -> provisional "await live-market fusion"

Sides always come from spread sign, never from team order, so the call
stays correct however the upstream source ordered the teams.
"""

from typing import Optional, Sequence

from config.settings import RecommendationSettings, settings
from src.emotion.models.schemas import Direction, MarketEntry, Signal

NO_SIGNAL_MESSAGE = "No clear signal: await live-market fusion before acting"
HOLD_MESSAGE = "Conflicting signals: hold"


class RecommendationSynthesizer:
    """Derives the recommendation string for an analysis."""

    def __init__(self, policy: Optional[RecommendationSettings] = None):
        self.policy = policy or settings.recommendation

    def high_confidence(self, signals: Sequence[Signal]) -> list[Signal]:
        threshold = self.policy.high_confidence_threshold
        return [s for s in signals if s.confidence >= threshold]

    def synthesize(self, entry: MarketEntry, signals: Sequence[Signal]) -> str:
        """
        Build the recommendation.

        Args:
            entry: The analyzed market entry (for team names and spreads)
            signals: All fired signals

        Returns:
            Non-empty recommendation text
        """
        strong = self.high_confidence(signals)
        if len(strong) < max(1, self.policy.min_high_confidence_signals):
            return NO_SIGNAL_MESSAGE

        longs = [s for s in strong if s.direction == Direction.LONG]
        shorts = [s for s in strong if s.direction == Direction.SHORT]

        if not longs and not shorts:
            return NO_SIGNAL_MESSAGE
        if len(longs) == len(shorts):
            return HOLD_MESSAGE

        if len(longs) > len(shorts):
            return self._pick(entry, Direction.LONG, longs)
        return self._pick(entry, Direction.SHORT, shorts)

    def _pick(self, entry: MarketEntry, direction: Direction, contributors: list[Signal]) -> str:
        labels = "+".join(s.label for s in contributors)
        numbers = entry.numbers()
        spread = numbers.spread_a

        if spread is None or spread == 0:
            role = "underdog" if direction == Direction.LONG else "favorite"
            return f"Lean {direction.value} ({role} side undetermined without a spread; {labels})"

        favored = "a" if spread < 0 else "b"
        receiving = "b" if favored == "a" else "a"

        if direction == Direction.LONG:
            side, role = receiving, "underdog"
        else:
            side, role = favored, "favorite"

        team_spread = f"{entry.team(side)} {entry.side_spread(side, numbers)}".strip()
        return f"Take {team_spread} ({role}, {labels})"
