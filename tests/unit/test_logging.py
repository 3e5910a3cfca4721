import json
import logging
from datetime import datetime

from applyassist.core.logging import JsonFormatter, StatusFormatter, session_log_path, setup_logging


def _record(message, **extra):
    record = logging.LogRecord("applyassist.test", logging.WARNING, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_status_formatter_renders_level_and_message():
    line = StatusFormatter().format(_record("Skipping job: Location"))
    assert line.startswith("[")
    assert line.endswith("[WARNING] Skipping job: Location")


def test_json_formatter_merges_extra_payload():
    payload = json.loads(JsonFormatter().format(_record("done", extra={"status": "SUBMITTED", "filled_count": 7})))
    assert payload["level"] == "WARNING"
    assert payload["message"] == "done"
    assert payload["status"] == "SUBMITTED"
    assert payload["filled_count"] == 7


def test_session_log_path_is_timestamped(tmp_path):
    path = session_log_path(tmp_path, datetime(2026, 5, 4, 9, 30, 15))
    assert path == tmp_path / "session-2026-05-04T09-30-15.log"


def test_setup_logging_writes_json_session_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        path = setup_logging(logging.INFO, tmp_path / "logs")
        logging.getLogger("applyassist.test").info("Application %s", "SUBMITTED", extra={"extra": {"url": "https://x"}})
        for handler in root.handlers:
            handler.flush()

        line = path.read_text(encoding="utf-8").strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["message"] == "Application SUBMITTED"
        assert entry["url"] == "https://x"
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_without_directory_has_no_file():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        assert setup_logging("DEBUG") is None
        assert len(root.handlers) == 1
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
