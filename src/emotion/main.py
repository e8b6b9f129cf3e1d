"""
Emotion Arbitrage - batch analysis entry point.

Reads an upload payload (the JSON array the OCR step or the manual form
produces), analyzes every game and queues it in memory.

Usage:
    python -m src.emotion.main games.json
    python -m src.emotion.main games.json --notes "主力伤病, b2b" --json

Environment Variables:
    EMOTION_LOG_LEVEL  - DEBUG|INFO|WARNING (default: INFO)
    EMOTION_JSON_LOGS  - true for JSON log lines
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import orjson

from config.settings import settings
from src.emotion.engine.analyzer import Analyzer
from src.emotion.engine.confidence import ScoreAggregator
from src.emotion.errors import UploadParseError
from src.emotion.feeds.upload import parse_uploaded_games
from src.emotion.models.schemas import Direction, QueueRecord
from src.emotion.queue import InMemoryQueueRepository, OddsQueue
from src.utils.logging import setup_logging

DIRECTION_ICONS = {
    Direction.LONG: "▲",
    Direction.SHORT: "▼",
    Direction.NEUTRAL: "•",
}


def format_record(record: QueueRecord, aggregator: ScoreAggregator) -> str:
    """Human-readable block for one analyzed game."""
    result = record.result
    header = record.entry.get_display_name()
    if record.entry.game_time:
        header = f"{record.entry.game_time}  {header}"

    lines = [
        header,
        f"  Score: {result.overall_score}/10  {aggregator.tier(result.overall_score)}",
        f"  Recommendation: {result.recommendation}",
    ]
    for signal in result.signals:
        lines.append(
            f"  {DIRECTION_ICONS[signal.direction]} {signal.label} "
            f"[{signal.rule_id}] {signal.confidence}/10: {signal.reason}"
        )
    if not result.signals:
        lines.append("  (no signals)")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.emotion.main",
        description="Analyze uploaded odds snapshots",
    )
    parser.add_argument("payload", type=Path, help="Upload JSON file (OCR or manual form output)")
    parser.add_argument("--notes", default="", help="Notes applied to games without their own")
    parser.add_argument("--json", action="store_true", help="Print one JSON record per line")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(settings.log_level, settings.json_logs, stream=sys.stderr)

    try:
        payload = args.payload.read_text(encoding="utf-8")
        entries = parse_uploaded_games(payload, default_notes=args.notes)
    except OSError as e:
        print(f"❌ Cannot read {args.payload}: {e}", file=sys.stderr)
        return 1
    except UploadParseError as e:
        print(f"❌ Invalid upload: {e}", file=sys.stderr)
        return 1

    analyzer = Analyzer()
    queue = OddsQueue(InMemoryQueueRepository(), analyzer=analyzer)
    records = queue.submit_all(entries)

    for record in records:
        if args.json:
            log = record.to_log()
            print(orjson.dumps(log.model_dump(by_alias=True)).decode())
        else:
            print(format_record(record, analyzer.aggregator))
            print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
