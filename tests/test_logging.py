"""Tests for log redaction of client PII."""

import logging

from aml_indicators.logging_config import PIIRedactionFilter, _sanitize_extra, setup_logging


def _record(msg: str, args=()) -> logging.LogRecord:
    return logging.LogRecord("aml_indicators", logging.INFO, __file__, 1, msg, args, None)


def test_message_pii_redacted() -> None:
    record = _record("rejected client_ref=C-001 occupation: notaire")
    PIIRedactionFilter().filter(record)
    assert "C-001" not in record.getMessage()
    assert "notaire" not in record.getMessage()
    assert "client_ref=[REDACTED]" in record.getMessage()


def test_args_redacted() -> None:
    record = _record("loaded %s", ("client_ref=C-9",))
    PIIRedactionFilter().filter(record)
    assert record.getMessage() == "loaded client_ref=[REDACTED]"


def test_counts_untouched() -> None:
    record = _record("evaluated %s profiles, %s with alerts", (12, 3))
    PIIRedactionFilter().filter(record)
    assert record.getMessage() == "evaluated 12 profiles, 3 with alerts"


def test_sanitize_extra() -> None:
    out = _sanitize_extra({"api_key": "k", "client_ref": "C1", "count": 4})
    assert out == {"api_key": "***", "client_ref": "[REDACTED]", "count": 4}


def test_setup_logging_redacts_child_logger_records(capsys) -> None:
    """Records from package modules propagate to root and are redacted there."""
    setup_logging("INFO")
    root = logging.getLogger()
    try:
        logging.getLogger("aml_indicators.ingest.loader").info("rejected client_ref=C-001")
        out = capsys.readouterr().out
        assert "aml_indicators.ingest.loader" in out
        assert "client_ref=[REDACTED]" in out
        assert "C-001" not in out
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
