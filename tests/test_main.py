"""Tests for the batch entry point and logging setup."""

import io

import orjson
import pytest
import structlog
from structlog.testing import capture_logs

from src.emotion import main as entry_point
from src.utils.logging import setup_logging

PAYLOAD = """```json
[
  {"team1": "Heat", "team2": "Knicks", "spread1": "-9", "spread2": "+9"},
  {"team1": "Suns", "team2": "Jazz", "notes": ""}
]
```"""


@pytest.fixture
def payload_file(tmp_path):
    path = tmp_path / "games.json"
    path.write_text(PAYLOAD, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep main() from reconfiguring structlog for the whole session."""
    monkeypatch.setattr(entry_point, "setup_logging", lambda *args, **kwargs: None)


class TestMain:

    def test_text_output(self, payload_file, capsys):
        with capture_logs() as logs:
            code = entry_point.main([str(payload_file)])

        out = capsys.readouterr().out
        assert code == 0
        assert "Heat vs Knicks" in out
        assert "Take Knicks +9 (underdog, Big Spread Fade)" in out
        assert "(no signals)" in out
        assert sum(1 for e in logs if e["event"] == "📥 Queued market entry") == 2

    def test_json_output(self, payload_file, capsys):
        with capture_logs():
            code = entry_point.main([str(payload_file), "--json", "--notes", "revenge game"])

        lines = capsys.readouterr().out.strip().splitlines()
        records = [orjson.loads(line) for line in lines]

        assert code == 0
        assert [r["game"]["teamA"] for r in records] == ["Heat", "Suns"]
        assert records[1]["game"]["freeTextNotes"] == "revenge game"
        assert records[1]["signals"][0]["ruleId"] == "REVENGE_GAME"
        assert all("overallScore" in r for r in records)

    def test_missing_file(self, tmp_path, capsys):
        code = entry_point.main([str(tmp_path / "nope.json")])

        assert code == 1
        assert "Cannot read" in capsys.readouterr().err

    def test_invalid_payload(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("no array here", encoding="utf-8")

        assert entry_point.main([str(path)]) == 1
        assert "Invalid upload" in capsys.readouterr().err


class TestSetupLogging:

    def test_json_logs_to_stream(self):
        stream = io.StringIO()
        try:
            setup_logging("DEBUG", json_logs=True, stream=stream)
            structlog.get_logger().info("hello", game="Heat vs Knicks")
        finally:
            structlog.reset_defaults()

        line = orjson.loads(stream.getvalue().strip())
        assert line["event"] == "hello"
        assert line["level"] == "info"
        assert line["game"] == "Heat vs Knicks"

    def test_level_filtering(self):
        stream = io.StringIO()
        try:
            setup_logging("WARNING", stream=stream)
            structlog.get_logger().info("quiet")
        finally:
            structlog.reset_defaults()

        assert stream.getvalue() == ""
