"""Tests for the rule table: thresholds, directions and confidences."""

import math

import pytest

from src.emotion.engine.narrative import classify
from src.emotion.engine.rules import (
    RULE_TABLE,
    Rule,
    RuleEvaluator,
    check_trade_shock,
)
from src.emotion.models.schemas import Category, Direction


@pytest.fixture
def fired(evaluator):
    """Evaluate an entry and index the signals by rule id."""
    def _fired(entry, categories=None):
        if categories is None:
            categories = classify(entry.free_text_notes)
        return {s.rule_id: s for s in evaluator.evaluate(entry, categories)}
    return _fired


class TestPublicFade:

    def test_below_threshold_does_not_fire(self, make_entry, fired):
        entry = make_entry(bets_share_pct_a="69%", bets_share_pct_b="31%")
        assert "PUBLIC_FADE" not in fired(entry)

    def test_fires_at_threshold(self, make_entry, fired):
        entry = make_entry(bets_share_pct_a="70%", bets_share_pct_b="30%")
        signal = fired(entry)["PUBLIC_FADE"]

        assert signal.direction == Direction.LONG
        assert signal.confidence == 6.5
        assert "70% of public tickets on Lakers" in signal.reason

    def test_strong_fade_at_eighty(self, make_entry, fired):
        entry = make_entry(bets_share_pct_a="20", bets_share_pct_b="80")
        signal = fired(entry)["PUBLIC_FADE"]

        assert signal.confidence == 7.5
        assert "on Celtics" in signal.reason

    def test_missing_side_is_inferred(self, make_entry, fired):
        entry = make_entry(bets_share_pct_b="75%")
        signal = fired(entry)["PUBLIC_FADE"]
        assert "75% of public tickets on Celtics" in signal.reason

    @pytest.mark.parametrize("raw", ["abc", "150%", "-5", "nan", ""])
    def test_unusable_share_is_ignored(self, make_entry, fired, raw):
        entry = make_entry(bets_share_pct_a=raw)
        assert "PUBLIC_FADE" not in fired(entry)


class TestSharpMoney:

    def test_money_diverges_from_tickets(self, make_entry, fired):
        entry = make_entry(
            bets_share_pct_a="67%", bets_share_pct_b="33%",
            money_share_pct_a="43%", money_share_pct_b="57%",
        )
        signals = fired(entry)
        signal = signals["SHARP_MONEY"]

        assert signal.direction == Direction.LONG
        assert signal.confidence == 7.0
        assert "57% of money on Celtics" in signal.reason
        assert "33% of tickets" in signal.reason
        assert "PUBLIC_FADE" not in signals

    def test_same_side_does_not_fire(self, make_entry, fired):
        entry = make_entry(bets_share_pct_a="60", money_share_pct_a="65")
        assert "SHARP_MONEY" not in fired(entry)

    def test_even_tickets_do_not_fire(self, make_entry, fired):
        entry = make_entry(bets_share_pct_a="50", money_share_pct_a="30")
        assert "SHARP_MONEY" not in fired(entry)

    def test_missing_money_does_not_fire(self, make_entry, fired):
        entry = make_entry(bets_share_pct_a="60", bets_share_pct_b="40")
        assert "SHARP_MONEY" not in fired(entry)


class TestBigSpreadFade:

    def test_fires_on_large_spread(self, make_entry, fired):
        entry = make_entry(spread_a="-9", spread_b="+9")
        signal = fired(entry)["BIG_SPREAD_FADE"]

        assert signal.direction == Direction.LONG
        assert signal.confidence == 6.5
        assert "take Celtics +9" in signal.reason
        assert "Lakers laying 9 points" in signal.reason

    def test_fires_at_threshold_from_one_side(self, make_entry, fired):
        entry = make_entry(spread_b="+8")
        signal = fired(entry)["BIG_SPREAD_FADE"]
        assert "take Celtics +8" in signal.reason

    def test_favorite_listed_second(self, make_entry, fired):
        entry = make_entry(spread_a="+10", spread_b="-10")
        signal = fired(entry)["BIG_SPREAD_FADE"]

        assert "Celtics laying 10 points" in signal.reason
        assert "take Lakers +10" in signal.reason

    def test_below_threshold(self, make_entry, fired):
        entry = make_entry(spread_a="-7.5", spread_b="+7.5")
        assert "BIG_SPREAD_FADE" not in fired(entry)


class TestLineMove:

    @pytest.mark.parametrize("raw,direction,confidence", [
        ("+10%", Direction.LONG, 6.0),
        ("+24%", Direction.LONG, 7.0),
        ("20", Direction.LONG, 7.0),
        ("-12%", Direction.SHORT, 6.0),
        ("-20%", Direction.SHORT, 7.0),
    ])
    def test_direction_and_strength(self, make_entry, fired, raw, direction, confidence):
        signal = fired(make_entry(line_move_pct=raw))["LINE_MOVE"]

        assert signal.direction == direction
        assert signal.confidence == confidence

    @pytest.mark.parametrize("raw", ["+9.9%", "-9.9", "0", "n/a", ""])
    def test_small_or_unusable_move(self, make_entry, fired, raw):
        assert "LINE_MOVE" not in fired(make_entry(line_move_pct=raw))

    def test_reason_shows_entered_move(self, make_entry, fired):
        signal = fired(make_entry(line_move_pct="+24%"))["LINE_MOVE"]
        assert "+24%" in signal.reason


class TestCloseGame:

    @pytest.mark.parametrize("spread", ["-1.5", "-2.5", "-3", "+3"])
    def test_fires_in_band(self, make_entry, fired, spread):
        signal = fired(make_entry(spread_a=spread))["CLOSE_GAME"]

        assert signal.direction == Direction.NEUTRAL
        assert signal.confidence == 5.0

    @pytest.mark.parametrize("spread", ["-1", "-3.5", "PK", "-9"])
    def test_outside_band(self, make_entry, fired, spread):
        assert "CLOSE_GAME" not in fired(make_entry(spread_a=spread))


class TestNarrativeRules:

    def test_injury_panic(self, make_entry, fired):
        signal = fired(make_entry(free_text_notes="Injury report is long"))["INJURY_PANIC"]

        assert signal.direction == Direction.LONG
        assert signal.confidence == 5.5

    @pytest.mark.parametrize("notes", ["star player injury", "主力伤病"])
    def test_star_injury_is_strong(self, make_entry, fired, notes):
        signal = fired(make_entry(free_text_notes=notes))["INJURY_PANIC"]
        assert signal.confidence == 7.5

    def test_trade_shock(self, make_entry, fired):
        signal = fired(make_entry(free_text_notes="交易传言"))["TRADE_SHOCK"]

        assert signal.direction == Direction.SHORT
        assert signal.confidence == 6.0

    def test_revenge_game(self, make_entry, fired):
        signal = fired(make_entry(free_text_notes="revenge game"))["REVENGE_GAME"]

        assert signal.direction == Direction.LONG
        assert signal.confidence == 7.0

    def test_b2b_fatigue(self, make_entry, fired):
        signal = fired(make_entry(free_text_notes="second night of a back-to-back"))["B2B_FATIGUE"]

        assert signal.direction == Direction.SHORT
        assert signal.confidence == 5.5

    @pytest.mark.parametrize("notes,confidence", [
        ("5-game winning streak", 6.0),
        ("三连败", 5.5),
        ("big comeback", 5.5),
    ])
    def test_streak_reversion(self, make_entry, fired, notes, confidence):
        signal = fired(make_entry(free_text_notes=notes))["STREAK_REVERSION"]

        assert signal.direction == Direction.LONG
        assert signal.confidence == confidence

    def test_suspension_panic(self, make_entry, fired):
        signal = fired(make_entry(free_text_notes="PG suspended one game"))["SUSPENSION_PANIC"]

        assert signal.direction == Direction.LONG
        assert signal.confidence == 5.5

    def test_categories_drive_rules(self, make_entry, fired):
        # Categories are taken as given; notes text is not re-classified
        signals = fired(make_entry(), categories={Category.REVENGE})
        assert list(signals) == ["REVENGE_GAME"]


class TestRuleEvaluator:

    def test_empty_entry_fires_nothing(self, make_entry, evaluator):
        assert evaluator.evaluate(make_entry(), frozenset()) == []

    def test_garbage_fields_never_raise(self, make_entry, evaluator):
        entry = make_entry(
            spread_a="abc", spread_b="--",
            bets_share_pct_a="%%", bets_share_pct_b="1e999",
            money_share_pct_a="NaN", money_share_pct_b="x",
            line_move_pct="inf",
        )
        assert evaluator.evaluate(entry, frozenset()) == []

    def test_signals_follow_table_order(self, make_entry, fired):
        entry = make_entry(
            spread_a="-9",
            line_move_pct="+15%",
            free_text_notes="revenge, b2b",
        )
        order = [r.rule_id for r in RULE_TABLE]
        ids = list(fired(entry))

        assert ids == sorted(ids, key=order.index)
        assert ids == ["BIG_SPREAD_FADE", "LINE_MOVE", "REVENGE_GAME", "B2B_FATIGUE"]

    def test_rule_ids_are_unique(self):
        ids = [r.rule_id for r in RULE_TABLE]
        assert len(ids) == len(set(ids))

    def test_duplicate_rule_ids_rejected(self):
        rule = Rule("TRADE_SHOCK", "Trade Shock", 6.0, check_trade_shock)
        with pytest.raises(ValueError, match="Duplicate rule id"):
            RuleEvaluator(rules=[rule, rule])

    def test_custom_rule_table(self, make_entry):
        evaluator = RuleEvaluator(rules=[Rule("T", "T", 9.0, check_trade_shock)])
        signals = evaluator.evaluate(make_entry(), {Category.TRADE})

        assert [s.confidence for s in signals] == [9.0]


class TestRuleValidation:

    @pytest.mark.parametrize("base,strong", [
        (11.0, None),
        (-0.5, None),
        (6.0, 10.5),
        (math.nan, None),
    ])
    def test_out_of_range_confidence_rejected(self, base, strong):
        with pytest.raises(ValueError):
            Rule("BAD", "Bad", base, check_trade_shock, strong_confidence=strong)

    def test_boundaries_accepted(self):
        rule = Rule("EDGE", "Edge", 0.0, check_trade_shock, strong_confidence=10.0)
        assert rule.base_confidence == 0.0
        assert rule.strong_confidence == 10.0
