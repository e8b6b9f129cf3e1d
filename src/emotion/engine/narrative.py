"""
Narrative Classifier.

Scans operator notes and headlines for narrative categories (injury, trade,
suspension, streak, comeback, blowout, revenge, fatigue).

Matching is driven by explicit phrase tables rather than ad hoc patterns:
- Case-insensitive
- ASCII phrases match on word boundaries ("out for" but not "about")
- CJK phrases match anywhere in the text
- Categories are independent; one text can hit several
"""

import re
from typing import Iterable, Optional

from src.emotion.models.schemas import Category, StreakPolarity

# Bump when any table below changes so stored analyses can be traced
PHRASE_TABLE_VERSION = 2

PHRASE_TABLE: dict[Category, tuple[str, ...]] = {
    Category.INJURY: (
        "injury", "injuries", "injured", "hurt", "out for", "sidelined",
        "questionable", "doubtful", "day-to-day", "ruled out",
        "伤", "伤病", "伤停", "缺阵",
    ),
    Category.TRADE: (
        "trade", "traded", "trade rumor", "trade rumors", "trade deadline",
        "acquired", "waived",
        "交易", "传言", "交易传言",
    ),
    Category.SUSPENSION: (
        "suspended", "suspension", "banned", "ejected",
        "停赛", "禁赛",
    ),
    Category.STREAK: (
        "streak", "skid", "consecutive", "in a row",
        "winning streak", "losing streak",
        "连胜", "连败",
    ),
    Category.COMEBACK: (
        "comeback", "rally", "rallied", "overcame", "deficit",
        "逆转", "绝杀",
    ),
    Category.BLOWOUT: (
        "blowout", "blown out", "rout", "routed", "crushed",
        "大比分", "惨败", "屠杀",
    ),
    Category.REVENGE: (
        "revenge", "rematch",
        "复仇",
    ),
    Category.FATIGUE: (
        "b2b", "back-to-back", "back to back", "fatigue",
        "背靠背", "疲劳",
    ),
}

# Injury notes naming a star/starter weigh more
STAR_PHRASES: tuple[str, ...] = (
    "star", "starter", "starting", "all-star", "mvp",
    "主力", "球星", "核心", "头号",
)

HOT_STREAK_PHRASES: tuple[str, ...] = (
    "winning streak", "win streak", "hot streak", "comeback win",
    "连胜", "逆转",
)

COLD_STREAK_PHRASES: tuple[str, ...] = (
    "losing streak", "cold streak", "skid", "blowout loss", "blown out",
    "连败", "惨败",
)


def _compile(phrase: str) -> re.Pattern:
    """Compile one trigger phrase to a matcher."""
    escaped = re.escape(phrase.lower())
    if phrase.isascii():
        return re.compile(rf"(?<![a-z0-9]){escaped}(?![a-z0-9])")
    return re.compile(escaped)


def _compile_all(phrases: Iterable[str]) -> tuple[re.Pattern, ...]:
    return tuple(_compile(p) for p in phrases)


_CATEGORY_MATCHERS: dict[Category, tuple[re.Pattern, ...]] = {
    category: _compile_all(phrases) for category, phrases in PHRASE_TABLE.items()
}
_STAR_MATCHERS = _compile_all(STAR_PHRASES)
_HOT_MATCHERS = _compile_all(HOT_STREAK_PHRASES)
_COLD_MATCHERS = _compile_all(COLD_STREAK_PHRASES)


def _any_match(text: str, matchers: tuple[re.Pattern, ...]) -> bool:
    return any(m.search(text) for m in matchers)


def phrase_matches(phrase: str, text: Optional[str]) -> bool:
    """Check a single phrase against text using table matching rules."""
    if not text:
        return False
    return _compile(phrase).search(text.lower()) is not None


def classify(text: Optional[str]) -> frozenset[Category]:
    """
    Classify free text into narrative categories.

    Args:
        text: Notes or headline, any mix of English and Chinese

    Returns:
        Set of matched categories (empty for empty/None text)
    """
    return _DEFAULT_CLASSIFIER.classify(text)


def mentions_star(text: Optional[str]) -> bool:
    """True if the text names a star or starter."""
    if not text:
        return False
    return _any_match(text.lower(), _STAR_MATCHERS)


def streak_polarity(text: Optional[str]) -> Optional[StreakPolarity]:
    """
    Which way a streak narrative leans.

    Returns None when the text has no polarity markers or has both.
    """
    if not text:
        return None

    lowered = text.lower()
    hot = _any_match(lowered, _HOT_MATCHERS)
    cold = _any_match(lowered, _COLD_MATCHERS)

    if hot and not cold:
        return StreakPolarity.HOT
    if cold and not hot:
        return StreakPolarity.COLD
    return None


class NarrativeClassifier:
    """
    Stateless classifier over a category -> phrases table.

    Defaults to PHRASE_TABLE; pass a table to classify against another.
    """

    def __init__(self, table: Optional[dict[Category, tuple[str, ...]]] = None):
        self.version = PHRASE_TABLE_VERSION
        if table is None:
            self._matchers = _CATEGORY_MATCHERS
        else:
            self._matchers = {
                category: _compile_all(phrases) for category, phrases in table.items()
            }

    def classify(self, text: Optional[str]) -> frozenset[Category]:
        if not text:
            return frozenset()
        lowered = text.lower()
        return frozenset(
            category
            for category, matchers in self._matchers.items()
            if _any_match(lowered, matchers)
        )


_DEFAULT_CLASSIFIER = NarrativeClassifier()
