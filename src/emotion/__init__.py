"""
Emotion Arbitrage Signal Engine.

Pre-analysis for uploaded odds snapshots. The public overreacts to
narratives (injuries, streaks, revenge spots, blowouts) and piles onto one
side; the line then overstates the story. This package spots those
situations from the market numbers and the operator's notes.

Architecture:
- models/: Market entries, signals, analysis results, queue records
- engine/: Narrative classifier, rule table, score aggregation, recommendation
- feeds/: Operator upload ingestion (OCR or manual JSON)
- queue/: Pending queue storage interface and lifecycle

Results stay PENDING until a later live-fusion step re-weighs them against
real-time odds.
"""

__version__ = "0.1.0"
