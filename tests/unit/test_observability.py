import json
import logging

from observability import log_event
from observability import logger as logger_mod


def test_human_line_lists_known_fields_only():
    line = logger_mod._human_line(
        {"kind": "session_saved", "session_id": "s1", "trigger": "autosave", "trace": "abc"}
    )
    assert line == "session=s1 kind=session_saved trigger=autosave"


def test_json_formatter_serializes_event():
    record = logging.LogRecord("mockmatch.events", logging.INFO, "", 0, "ignored", (), None)
    record.event = {"kind": "history_cleared", "session_id": None, "entries": 2}
    payload = json.loads(logger_mod._JsonLineFormatter().format(record))
    assert payload == {"kind": "history_cleared", "session_id": None, "entries": 2}


def test_log_event_attaches_structured_payload():
    records: list[logging.LogRecord] = []

    class Collector(logging.Handler):
        def emit(self, record):
            records.append(record)

    collector = Collector()
    events = logging.getLogger("mockmatch.events")
    events.addHandler(collector)
    try:
        log_event("autosave_failed", "s9", level=logging.WARNING, trigger="autosave", error="disk full")
    finally:
        events.removeHandler(collector)

    assert records[-1].levelno == logging.WARNING
    assert records[-1].event["kind"] == "autosave_failed"
    assert records[-1].event["error"] == "disk full"
    assert records[-1].getMessage() == "session=s9 kind=autosave_failed trigger=autosave error=disk full"
