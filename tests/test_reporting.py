"""Tests for batch report output (JSON + CSV)."""

from __future__ import annotations

import csv
import json
from pathlib import Path

from aml_indicators.audit_context import set_audit_context
from aml_indicators.engine import evaluate_many
from aml_indicators.reporting import CSV_COLUMNS, flatten_report, write_reports


def _reports(make_profile):
    return evaluate_many(
        [
            make_profile(client_ref="A", premium=100),
            make_profile(client_ref="B", cash_payment=9000, watchlist_country=True),
        ]
    )


def test_flatten_report_one_row_per_indicator(make_profile) -> None:
    report = _reports(make_profile)[1]
    rows = flatten_report(report)
    assert len(rows) == 10
    assert [r["indicator_id"] for r in rows] == list(range(1, 11))
    assert all(set(r) == set(CSV_COLUMNS) for r in rows)
    assert rows[0]["client_ref"] == "B"
    assert rows[0]["triggered"] is True
    assert rows[9]["value"] == 9000


def test_write_reports_json_and_csv(tmp_path: Path, make_profile) -> None:
    set_audit_context("batch-run-1", "analyst")
    reports = _reports(make_profile)
    json_path, csv_path = write_reports(
        reports, tmp_path / "out", config_hash="abc123", rejects=["row 4: invalid:premium"]
    )
    payload = json.loads(Path(json_path).read_text(encoding="utf-8"))
    assert payload["correlation_id"] == "batch-run-1"
    assert payload["actor"] == "analyst"
    assert payload["config_hash"] == "abc123"
    assert payload["thresholds_version"] == "2024.2"
    assert payload["rejects"] == ["row 4: invalid:premium"]
    assert payload["summary"]["profiles"] == 2
    assert payload["summary"]["triggered_profiles"] == 1
    assert payload["summary"]["by_verdict"] == {"critical": 1, "ok": 1}
    assert [r["client_ref"] for r in payload["reports"]] == ["A", "B"]

    with open(csv_path, encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 20
    assert list(rows[0]) == CSV_COLUMNS


def test_write_reports_triggered_only(tmp_path: Path, make_profile) -> None:
    _, csv_path = write_reports(_reports(make_profile), tmp_path, triggered_only=True)
    with open(csv_path, encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert {r["indicator_code"] for r in rows} == {"watchlist_country", "cash_payment"}
    assert all(r["client_ref"] == "B" for r in rows)


def test_write_reports_empty_batch(tmp_path: Path) -> None:
    json_path, _ = write_reports([], tmp_path)
    payload = json.loads(Path(json_path).read_text(encoding="utf-8"))
    assert payload["reports"] == []
    assert payload["thresholds_version"] is None
    assert payload["summary"]["profiles"] == 0
