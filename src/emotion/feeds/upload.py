"""
Odds upload ingestion.

Turns operator input into MarketEntry values. Both upload paths produce the
same JSON shape, one object per game:

    {"gameTime": "2:00 AM", "team1": "...", "team2": "...",
     "spread1": "-2.5", "spread2": "+2.5",
     "moneyline1": "-108", "moneyline2": "+104",
     "bets1": "67%", "bets2": "33%", "money1": "43%", "money2": "57%",
     "lineMove": "+24%", "notes": ""}

- Screenshot path: the OCR service answers with this array, usually wrapped
  in prose or a code fence
- Manual path: the form posts the same fields

Values are kept as text; numeric parsing happens in MarketEntry.numbers().
"""

import re
from typing import Any, Optional, Union

import orjson
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.emotion.errors import UploadParseError
from src.emotion.models.schemas import MarketEntry, as_text

logger = structlog.get_logger()

# First JSON array in a model response (greedy, spans lines)
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


class UploadedGame(BaseModel):
    """One game row from the upload surface."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    game_time: str = Field(default="", alias="gameTime")
    team1: str
    team2: str
    spread1: str = ""
    spread2: str = ""
    moneyline1: str = ""
    moneyline2: str = ""
    bets1: str = ""
    bets2: str = ""
    money1: str = ""
    money2: str = ""
    line_move: str = Field(default="", alias="lineMove")
    notes: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        """OCR output sometimes has bare numbers or nulls."""
        if value is None or (isinstance(value, (int, float)) and not isinstance(value, bool)):
            return as_text(value)
        return value

    @field_validator("team1", "team2")
    @classmethod
    def _team_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("team name must not be empty")
        return value

    def to_market_entry(self, default_notes: str = "") -> MarketEntry:
        """Convert to the engine's input type."""
        return MarketEntry(
            team_a=self.team1,
            team_b=self.team2,
            spread_a=self.spread1,
            spread_b=self.spread2,
            moneyline_a=self.moneyline1,
            moneyline_b=self.moneyline2,
            bets_share_pct_a=self.bets1,
            bets_share_pct_b=self.bets2,
            money_share_pct_a=self.money1,
            money_share_pct_b=self.money2,
            line_move_pct=self.line_move,
            free_text_notes=self.notes or default_notes,
            game_time=self.game_time,
        )


def _decode(payload: Union[str, bytes]) -> Any:
    """Decode the JSON array embedded in a text payload."""
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")

    match = _JSON_ARRAY.search(payload)
    if not match:
        raise UploadParseError("No JSON array found in upload payload")

    try:
        return orjson.loads(match.group(0))
    except orjson.JSONDecodeError as e:
        raise UploadParseError(f"Malformed JSON in upload payload: {e}") from e


def parse_uploaded_games(
    payload: Union[str, bytes, list],
    default_notes: str = "",
) -> list[MarketEntry]:
    """
    Parse an upload payload into market entries.

    Args:
        payload: Raw OCR/form text containing a JSON array, or a decoded list
        default_notes: Operator notes applied to games without their own

    Returns:
        One MarketEntry per game, in payload order

    Raises:
        UploadParseError: If the payload is not a list of valid games
    """
    data = payload if isinstance(payload, list) else _decode(payload)
    if not isinstance(data, list):
        raise UploadParseError("Upload payload must be a JSON array")

    entries = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise UploadParseError(f"Game #{index} is not an object")
        try:
            game = UploadedGame.model_validate(item)
        except ValidationError as e:
            raise UploadParseError(f"Game #{index} is invalid: {e}") from e
        entries.append(game.to_market_entry(default_notes))

    logger.debug("Parsed upload payload", games=len(entries))
    return entries


def parse_uploaded_game(item: dict, default_notes: Optional[str] = None) -> MarketEntry:
    """Parse a single manually entered game."""
    return parse_uploaded_games([item], default_notes or "")[0]
