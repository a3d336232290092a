# Area: Shared Tests
"""Tests for the match log writer, logging setup and guarded writes."""

import json
import logging
import sys

import pytest
from unittest.mock import Mock, patch
from circle_royale._shared.logging_config import JSONFormatter, TerminalFormatter, setup_logging
from circle_royale._shared.match_log import MatchLogWriter
from circle_royale._shared.safe_write import fire_and_forget


class TestMatchLogWriter:
    """Tests for MatchLogWriter."""

    def test_init_creates_path(self, tmp_path):
        """Test init names the document after the event."""
        writer = MatchLogWriter(str(tmp_path / "logs"))
        path = writer.init(7)
        assert path.startswith(str(tmp_path / "logs" / "match-7-"))
        assert path.endswith(".json")

    def test_log_rewrites_document(self, tmp_path):
        """Test every entry is flushed to disk."""
        writer = MatchLogWriter(str(tmp_path))
        path = writer.init(1)
        writer.log(1, "INIT", "Event created")
        writer.log(1, "JOIN", "Alice joined the event")

        with open(path, encoding="utf-8") as f:
            document = json.load(f)
        assert [e["type"] for e in document["entries"]] == ["INIT", "JOIN"]
        assert set(document["entries"][0]) == {"timestamp", "type", "message"}

    def test_log_without_init(self, tmp_path):
        """Test logging an unknown event opens its log."""
        writer = MatchLogWriter(str(tmp_path))
        writer.log(3, "INIT", "Event created")
        assert writer.entries(3)[0]["message"] == "Event created"

    def test_finalize_writes_summary_once(self, tmp_path):
        """Test finalize writes summary plus entries and forgets the event."""
        writer = MatchLogWriter(str(tmp_path))
        writer.init(1)
        writer.log(1, "STOP", "Event stopped: test")

        path = writer.finalize(1, {"winner": None, "duration_seconds": 1})

        with open(path, encoding="utf-8") as f:
            document = json.load(f)
        assert document["summary"] == {"winner": None, "duration_seconds": 1}
        assert len(document["entries"]) == 1
        assert writer.finalize(1, {"winner": None}) is None
        assert writer.entries(1) == []


class TestFireAndForget:
    """Tests for fire_and_forget."""

    def test_returns_result(self):
        """Test a successful call passes its result through."""
        assert fire_and_forget("add", lambda a, b=0: a + b, 2, b=3) == 5

    def test_swallows_and_logs_errors(self):
        """Test failures are logged as warnings and return None."""
        with patch("circle_royale._shared.safe_write.logger") as mock_logger:
            result = fire_and_forget("write", Mock(side_effect=RuntimeError("down")))
        assert result is None
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs["exc_info"] is True


class TestLogging:
    """Tests for setup_logging and formatters."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        yield
        pkg_logger = logging.getLogger("circle_royale")
        for handler in list(pkg_logger.handlers):
            handler.close()
        pkg_logger.handlers.clear()
        pkg_logger.propagate = True
        pkg_logger.setLevel(logging.NOTSET)

    def test_setup_installs_two_handlers(self, tmp_path):
        """Test terminal and JSON file handlers are installed."""
        setup_logging(str(tmp_path / "out" / "arena.log"), level=logging.DEBUG)
        pkg_logger = logging.getLogger("circle_royale")
        assert len(pkg_logger.handlers) == 2
        assert pkg_logger.propagate is False
        assert (tmp_path / "out").is_dir()

    def test_json_lines_written(self, tmp_path):
        """Test file records are JSON."""
        log_file = tmp_path / "arena.log"
        setup_logging(str(log_file))
        logging.getLogger("circle_royale.zone").info("Zone shrunk to %.1f", 75.0)
        for handler in logging.getLogger("circle_royale").handlers:
            handler.flush()
        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert record["logger"] == "circle_royale.zone"
        assert record["message"] == "Zone shrunk to 75.0"

    def test_terminal_formatter_does_not_mutate_record(self):
        """Test colouring leaves the original record intact."""
        record = logging.LogRecord("circle_royale", logging.INFO, __file__, 1, "hi", None, None)
        TerminalFormatter("%(levelname)s %(message)s").format(record)
        assert record.levelname == "INFO"

    def test_json_formatter_includes_exception(self):
        """Test exc_info is serialised."""
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "oops", None, sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad" in data["exception"]

    def test_json_formatter_exports_extra_fields(self):
        """Test extra= fields land in the JSON object."""
        record = logging.makeLogRecord({"name": "circle_royale", "msg": "tick",
                                        "levelno": logging.INFO, "levelname": "INFO",
                                        "event_id": 7})
        data = json.loads(JSONFormatter().format(record))
        assert data["event_id"] == 7

    def test_setup_without_file(self):
        """Test a None path installs only the terminal handler."""
        setup_logging(None)
        assert len(logging.getLogger("circle_royale").handlers) == 1
