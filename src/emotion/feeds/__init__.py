"""Market entry sources (operator uploads)."""

from src.emotion.feeds.upload import UploadedGame, parse_uploaded_games, parse_uploaded_game

__all__ = [
    "UploadedGame",
    "parse_uploaded_games",
    "parse_uploaded_game",
]
