"""
Rule Evaluator.

One canonical rule table, shared by the screenshot and manual upload flows.

Each rule is an independent predicate + signal factory:
    check(context, thresholds) -> Firing | None

Rules never raise on malformed input. Unusable numeric fields arrive as
None in MarketNumbers and simply keep the rules that need them quiet.
Table order is display order only; the score does not depend on it.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence
import math

import structlog

from config.settings import RuleThresholds, settings
from src.emotion.engine.narrative import mentions_star, streak_polarity
from src.emotion.models.schemas import (
    Category,
    Direction,
    MarketEntry,
    MarketNumbers,
    Signal,
    StreakPolarity,
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may look at for one entry."""
    entry: MarketEntry
    numbers: MarketNumbers
    categories: frozenset[Category]

    @property
    def notes(self) -> str:
        return self.entry.free_text_notes or ""

    @property
    def favored_side(self) -> Optional[str]:
        """Side laying points ("a"/"b"), None for pick'em or no spread."""
        spread = self.numbers.spread_a
        if spread is None or spread == 0:
            return None
        return "a" if spread < 0 else "b"

    @property
    def receiving_side(self) -> Optional[str]:
        favored = self.favored_side
        if favored is None:
            return None
        return "b" if favored == "a" else "a"

    def describe(self, side: str) -> str:
        """Team name plus spread, e.g. "Celtics +9"."""
        spread = self.entry.side_spread(side, self.numbers)
        return f"{self.entry.team(side)} {spread}".strip()


@dataclass(frozen=True)
class Firing:
    """A rule's decision to fire."""
    direction: Direction
    reason: str
    strong: bool = False


RuleCheck = Callable[[RuleContext, RuleThresholds], Optional[Firing]]


@dataclass(frozen=True)
class Rule:
    """
    A rule table row.

    strong_confidence replaces base_confidence when the firing is strong.
    Confidences outside [0, 10] are rejected when the table is built.
    """
    rule_id: str
    label: str
    base_confidence: float
    check: RuleCheck
    strong_confidence: Optional[float] = None

    def __post_init__(self) -> None:
        for value in (self.base_confidence, self.strong_confidence):
            if value is None:
                continue
            if math.isnan(value) or not MIN_CONFIDENCE <= value <= MAX_CONFIDENCE:
                raise ValueError(
                    f"Rule {self.rule_id}: confidence {value} outside "
                    f"[{MIN_CONFIDENCE}, {MAX_CONFIDENCE}]"
                )

    def confidence_for(self, firing: Firing) -> float:
        if firing.strong and self.strong_confidence is not None:
            return self.strong_confidence
        return self.base_confidence


# =============================================================================
# Market Rules
# =============================================================================

def _other(side: str) -> str:
    return "b" if side == "a" else "a"


def check_public_fade(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    """Heavy public lean on one side: take the other side."""
    n = ctx.numbers
    if n.bets_a is None or n.bets_b is None:
        return None

    max_bets = max(n.bets_a, n.bets_b)
    if max_bets < t.public_fade_pct:
        return None

    public_side = "a" if n.bets_a >= n.bets_b else "b"
    faded_side = _other(public_side)

    return Firing(
        direction=Direction.LONG,
        reason=(
            f"{max_bets:g}% of public tickets on {ctx.entry.team(public_side)}; "
            f"market is overextended, value on {ctx.describe(faded_side)}"
        ),
        strong=max_bets >= t.public_fade_strong_pct,
    )


def _majority(a: Optional[float], b: Optional[float]) -> Optional[str]:
    if a is None or b is None or a == b:
        return None
    return "a" if a > b else "b"


def check_sharp_money(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    """Money and tickets favor different sides: follow the money."""
    n = ctx.numbers
    bets_side = _majority(n.bets_a, n.bets_b)
    money_side = _majority(n.money_a, n.money_b)
    if bets_side is None or money_side is None or bets_side == money_side:
        return None

    money_pct = n.money_a if money_side == "a" else n.money_b
    tickets_pct = n.bets_a if money_side == "a" else n.bets_b

    return Firing(
        direction=Direction.LONG,
        reason=(
            f"{money_pct:g}% of money on {ctx.entry.team(money_side)} against only "
            f"{tickets_pct:g}% of tickets; sharp action on {ctx.describe(money_side)}"
        ),
    )


def check_big_spread_fade(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    """Large spread: the favorite is likely overvalued."""
    size = ctx.numbers.spread_size
    if size is None or size < t.big_spread:
        return None

    favored = ctx.favored_side
    receiving = ctx.receiving_side

    return Firing(
        direction=Direction.LONG,
        reason=(
            f"{ctx.entry.team(favored)} laying {size:g} points looks inflated; "
            f"take {ctx.describe(receiving)} (mean reversion)"
        ),
    )


def check_line_move(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    """Significant line drift since open."""
    move = ctx.numbers.line_move
    if move is None or abs(move) < t.line_move_pct:
        return None

    shown = ctx.entry.line_move_pct.strip() or f"{move:+g}%"
    return Firing(
        direction=Direction.LONG if move > 0 else Direction.SHORT,
        reason=f"Line moved {shown} since open; drift this size is usually information-driven",
        strong=abs(move) >= t.line_move_strong_pct,
    )


def check_close_game(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    """Near pick'em spread: informational."""
    size = ctx.numbers.spread_size
    if size is None:
        return None
    if not t.close_game_min_spread <= size <= t.close_game_max_spread:
        return None

    return Firing(
        direction=Direction.NEUTRAL,
        reason=f"Spread of {size:g} points; close game, no side edge from the number alone",
    )


# =============================================================================
# Narrative Rules
# =============================================================================

def check_injury_panic(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    if Category.INJURY not in ctx.categories:
        return None

    if mentions_star(ctx.notes):
        return Firing(
            direction=Direction.LONG,
            reason="Star/starter injury in notes; public overreacts and the line likely overstates the impact",
            strong=True,
        )
    return Firing(
        direction=Direction.LONG,
        reason="Injury news in notes; public tends to overreact",
    )


def check_trade_shock(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    if Category.TRADE not in ctx.categories:
        return None
    return Firing(
        direction=Direction.SHORT,
        reason="Trade rumors in notes unsettle the roster",
    )


def check_revenge_game(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    if Category.REVENGE not in ctx.categories:
        return None
    return Firing(
        direction=Direction.LONG,
        reason="Revenge spot; the motivated side tends to outperform the number",
    )


def check_b2b_fatigue(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    if Category.FATIGUE not in ctx.categories:
        return None
    return Firing(
        direction=Direction.SHORT,
        reason="Back-to-back schedule; the tired side tends to fade late",
    )


STREAK_CATEGORIES = frozenset({Category.STREAK, Category.COMEBACK, Category.BLOWOUT})


def check_streak_reversion(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    """
    Momentum narratives revert.

    HOT: a hot-streak favorite is overpriced, fade it.
    COLD: a cold-streak underdog is underpriced, take the value.
    """
    matched = ctx.categories & STREAK_CATEGORIES
    if not matched:
        return None

    polarity = streak_polarity(ctx.notes)
    if polarity == StreakPolarity.HOT:
        return Firing(
            direction=Direction.LONG,
            reason="Hot-streak narrative inflates the favorite; fade it",
            strong=True,
        )
    if polarity == StreakPolarity.COLD:
        return Firing(
            direction=Direction.LONG,
            reason="Cold-streak narrative depresses the underdog; value on the points",
        )

    names = ", ".join(sorted(c.value.lower() for c in matched))
    return Firing(
        direction=Direction.LONG,
        reason=f"Momentum narrative ({names}); expect reversion toward the number",
    )


def check_suspension_panic(ctx: RuleContext, t: RuleThresholds) -> Optional[Firing]:
    if Category.SUSPENSION not in ctx.categories:
        return None
    return Firing(
        direction=Direction.LONG,
        reason="Suspension news in notes; public overreacts to the absence",
    )


# =============================================================================
# Rule Table
# =============================================================================

RULE_TABLE: tuple[Rule, ...] = (
    Rule("PUBLIC_FADE", "Public Fade", 6.5, check_public_fade, strong_confidence=7.5),
    Rule("SHARP_MONEY", "Sharp Money", 7.0, check_sharp_money),
    Rule("BIG_SPREAD_FADE", "Big Spread Fade", 6.5, check_big_spread_fade),
    Rule("LINE_MOVE", "Line Move", 6.0, check_line_move, strong_confidence=7.0),
    Rule("INJURY_PANIC", "Injury Panic", 5.5, check_injury_panic, strong_confidence=7.5),
    Rule("TRADE_SHOCK", "Trade Shock", 6.0, check_trade_shock),
    Rule("REVENGE_GAME", "Revenge Game", 7.0, check_revenge_game),
    Rule("B2B_FATIGUE", "B2B Fatigue", 5.5, check_b2b_fatigue),
    Rule("CLOSE_GAME", "Close Game", 5.0, check_close_game),
    Rule("STREAK_REVERSION", "Streak Reversion", 5.5, check_streak_reversion, strong_confidence=6.0),
    Rule("SUSPENSION_PANIC", "Suspension Panic", 5.5, check_suspension_panic),
)


class RuleEvaluator:
    """
    Runs every rule in the table against one market entry.

    Holds only the (immutable) table and thresholds, so a single instance
    can be shared between callers.
    """

    def __init__(
        self,
        rules: Optional[Sequence[Rule]] = None,
        thresholds: Optional[RuleThresholds] = None,
    ):
        self.rules: tuple[Rule, ...] = tuple(rules) if rules is not None else RULE_TABLE
        self.thresholds = thresholds or settings.rules
        self.logger = logger.bind(component="rule_evaluator")

        seen: set[str] = set()
        for rule in self.rules:
            if rule.rule_id in seen:
                raise ValueError(f"Duplicate rule id: {rule.rule_id}")
            seen.add(rule.rule_id)

    def evaluate(
        self,
        entry: MarketEntry,
        categories: Iterable[Category],
    ) -> list[Signal]:
        """
        Evaluate all rules.

        Args:
            entry: The market entry to evaluate
            categories: Narrative categories already found in its notes

        Returns:
            Fired signals in table order (possibly empty)
        """
        ctx = RuleContext(
            entry=entry,
            numbers=entry.numbers(),
            categories=frozenset(categories),
        )

        signals = []
        for rule in self.rules:
            firing = rule.check(ctx, self.thresholds)
            if firing is None:
                continue
            signals.append(
                Signal(
                    rule_id=rule.rule_id,
                    label=rule.label,
                    direction=firing.direction,
                    confidence=rule.confidence_for(firing),
                    reason=firing.reason,
                )
            )

        self.logger.debug(
            "Rules evaluated",
            matchup=entry.get_display_name(),
            fired=[s.rule_id for s in signals],
        )
        return signals
