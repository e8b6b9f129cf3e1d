"""
Emotion arbitrage data models and schemas.

Defines the core data structures for:
- Market entries as uploaded by the operator (raw strings)
- Parsed market numbers (explicit optionals, never raw strings)
- Signals, analysis results and queue records
"""

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Optional
import math

from pydantic import BaseModel, Field


class Direction(str, Enum):
    """Trade direction of a signal."""
    LONG = "LONG"        # Take the receiving (faded) side
    SHORT = "SHORT"      # Take the favored (chalk) side
    NEUTRAL = "NEUTRAL"  # Informational only


class Category(str, Enum):
    """Narrative categories detected in free-text notes."""
    INJURY = "INJURY"
    TRADE = "TRADE"
    SUSPENSION = "SUSPENSION"
    STREAK = "STREAK"
    COMEBACK = "COMEBACK"
    BLOWOUT = "BLOWOUT"
    REVENGE = "REVENGE"
    FATIGUE = "FATIGUE"


class StreakPolarity(str, Enum):
    """Which way a streak narrative leans."""
    HOT = "HOT"
    COLD = "COLD"


class QueueStatus(str, Enum):
    """Lifecycle status of a queued record."""
    PENDING = "PENDING"
    MERGED = "MERGED"
    EXPIRED = "EXPIRED"


# =============================================================================
# Field Parsing
# =============================================================================

PICK_EM_TOKENS = frozenset({"pk", "pick", "pk'em", "pick'em", "pickem"})


def parse_number(raw: Optional[str]) -> Optional[float]:
    """
    Parse a loosely formatted numeric field.

    Accepts "67%", "+24%", "-2.5", " 9 " and pick'em tokens ("PK" -> 0.0).

    Returns:
        The parsed value, or None if the field is unusable
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        value = float(raw)
        return value if math.isfinite(value) else None

    text = str(raw).strip()
    if not text:
        return None
    if text.lower() in PICK_EM_TOKENS:
        return 0.0

    text = text.rstrip("%").strip()
    if text.startswith("+"):
        text = text[1:]

    try:
        value = float(text)
    except ValueError:
        return None

    if not math.isfinite(value):
        return None
    return value


def format_spread(value: float) -> str:
    """Format a spread the way books print it (+9, -2.5, 0)."""
    if value == 0:
        return "0"
    return f"{value:+g}"


def parse_share(raw: Optional[str]) -> Optional[float]:
    """Parse a percentage share; values outside [0, 100] are unusable."""
    value = parse_number(raw)
    if value is None or not 0.0 <= value <= 100.0:
        return None
    return value


def as_text(value: Any) -> str:
    """Normalize a raw field to text (None -> "", 9 -> "9")."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:g}"
    return str(value)


def _infer_complement(own: Optional[float], other: Optional[float]) -> Optional[float]:
    """Fill a missing two-way share from the other side."""
    if own is not None:
        return own
    if other is not None:
        return 100.0 - other
    return None


# =============================================================================
# Market Entry
# =============================================================================

@dataclass(frozen=True)
class MarketNumbers:
    """
    Parsed numeric view of a MarketEntry.

    Every field is either a finite float or None. Missing sides of a
    two-way market are already inferred from the other side.
    """
    spread_a: Optional[float] = None
    spread_b: Optional[float] = None
    bets_a: Optional[float] = None
    bets_b: Optional[float] = None
    money_a: Optional[float] = None
    money_b: Optional[float] = None
    line_move: Optional[float] = None

    @property
    def spread_size(self) -> Optional[float]:
        """Absolute size of the spread."""
        if self.spread_a is None:
            return None
        return abs(self.spread_a)


@dataclass(frozen=True)
class MarketEntry:
    """
    One betting market as supplied by the upload surface.

    Values are kept as entered text (None and bare numbers are normalized
    to text); use numbers() for the parsed view.
    Favored/underdog roles come from spread sign, never from which team
    is listed first.
    """
    team_a: str = ""
    team_b: str = ""

    spread_a: str = ""
    spread_b: str = ""

    # Informational only
    moneyline_a: str = ""
    moneyline_b: str = ""

    bets_share_pct_a: str = ""
    bets_share_pct_b: str = ""
    money_share_pct_a: str = ""
    money_share_pct_b: str = ""

    line_move_pct: str = ""
    free_text_notes: str = ""

    game_time: str = ""

    def __post_init__(self) -> None:
        # Entries built in-process may carry None or bare numbers
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str):
                object.__setattr__(self, f.name, as_text(value))

    def numbers(self) -> MarketNumbers:
        """Parse numeric fields, inferring a missing side where possible."""
        spread_a = parse_number(self.spread_a)
        spread_b = parse_number(self.spread_b)

        # spread_a is authoritative when both parse
        if spread_a is not None:
            spread_b = -spread_a if spread_a != 0 else 0.0
        elif spread_b is not None:
            spread_a = -spread_b if spread_b != 0 else 0.0

        bets_a = parse_share(self.bets_share_pct_a)
        bets_b = parse_share(self.bets_share_pct_b)
        money_a = parse_share(self.money_share_pct_a)
        money_b = parse_share(self.money_share_pct_b)

        return MarketNumbers(
            spread_a=spread_a,
            spread_b=spread_b,
            bets_a=_infer_complement(bets_a, bets_b),
            bets_b=_infer_complement(bets_b, bets_a),
            money_a=_infer_complement(money_a, money_b),
            money_b=_infer_complement(money_b, money_a),
            line_move=parse_number(self.line_move_pct),
        )

    def side_spread(self, side: str, numbers: Optional[MarketNumbers] = None) -> str:
        """
        Display spread for side "a" or "b".

        Uses the entered text when it agrees with the resolved value,
        otherwise the resolved value formatted.
        """
        raw = (self.spread_a if side == "a" else self.spread_b).strip()
        numbers = numbers or self.numbers()
        value = numbers.spread_a if side == "a" else numbers.spread_b
        if value is None:
            return ""
        if raw and parse_number(raw) == value:
            return raw
        return format_spread(value)

    def team(self, side: str) -> str:
        """Team name for side "a" or "b"."""
        return self.team_a if side == "a" else self.team_b

    def get_display_name(self) -> str:
        """Get human-readable matchup name."""
        return f"{self.team_a} vs {self.team_b}"

    def to_dict(self) -> dict:
        """Convert to a dict with stable camelCase keys."""
        return {
            "teamA": self.team_a,
            "teamB": self.team_b,
            "spreadA": self.spread_a,
            "spreadB": self.spread_b,
            "moneylineA": self.moneyline_a,
            "moneylineB": self.moneyline_b,
            "betsSharePctA": self.bets_share_pct_a,
            "betsSharePctB": self.bets_share_pct_b,
            "moneySharePctA": self.money_share_pct_a,
            "moneySharePctB": self.money_share_pct_b,
            "lineMovePct": self.line_move_pct,
            "freeTextNotes": self.free_text_notes,
            "gameTime": self.game_time,
        }


# =============================================================================
# Signals and Results
# =============================================================================

MIN_CONFIDENCE = 0.0
MAX_CONFIDENCE = 10.0


def clamp_confidence(value: float) -> float:
    """Clamp a confidence into [0, 10]. NaN counts as no confidence."""
    value = float(value)
    if math.isnan(value):
        return MIN_CONFIDENCE
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, value))


@dataclass(frozen=True)
class Signal:
    """A single fired rule."""
    rule_id: str
    label: str
    direction: Direction
    confidence: float
    reason: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))

    @property
    def is_directional(self) -> bool:
        return self.direction != Direction.NEUTRAL

    def to_dict(self) -> dict:
        """Convert to loggable dict."""
        return {
            "ruleId": self.rule_id,
            "label": self.label,
            "direction": self.direction.value,
            "confidence": self.confidence,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of analyzing one MarketEntry.

    signals keep rule-table order; order never affects the score.
    """
    signals: tuple[Signal, ...]
    overall_score: float
    recommendation: str
    categories: tuple[Category, ...] = ()

    @property
    def has_signals(self) -> bool:
        return bool(self.signals)

    def to_dict(self) -> dict:
        """Convert to a dict with the field names the queue store expects."""
        return {
            "signals": [s.to_dict() for s in self.signals],
            "overallScore": self.overall_score,
            "recommendation": self.recommendation,
            "categories": [c.value for c in self.categories],
        }


@dataclass(frozen=True)
class QueueRecord:
    """
    An analyzed entry waiting in the pending queue.

    Owned by the queue layer; the engine never touches status.
    """
    record_id: str
    entry: MarketEntry
    result: AnalysisResult
    created_at: datetime
    status: QueueStatus = QueueStatus.PENDING

    def to_log(self) -> "QueueRecordLog":
        """Convert to the serializable log model."""
        return QueueRecordLog(
            id=self.record_id,
            timestamp=self.created_at.isoformat(),
            status=self.status.value,
            game=self.entry.to_dict(),
            signals=[s.to_dict() for s in self.result.signals],
            overall_score=self.result.overall_score,
            recommendation=self.result.recommendation,
            categories=[c.value for c in self.result.categories],
        )


# --- Serialized Record Model ---

class QueueRecordLog(BaseModel):
    """Serialized form of a QueueRecord, as persisted by the store."""
    id: str
    timestamp: str
    status: str
    game: dict = Field(default_factory=dict)
    signals: list[dict] = Field(default_factory=list)
    overall_score: float = Field(serialization_alias="overallScore")
    recommendation: str
    categories: list[str] = Field(default_factory=list)
