"""Batch report output (JSON + flat CSV) for reviewers and downstream collaborators."""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from aml_indicators import ENGINE_VERSION, RULES_VERSION
from aml_indicators.audit_context import get_actor, get_correlation_id
from aml_indicators.engine import summarize
from aml_indicators.schemas import EvaluationReport

CSV_COLUMNS = [
    "client_ref",
    "risk_group",
    "risk_level",
    "operation_type",
    "verdict",
    "indicator_id",
    "indicator_code",
    "severity",
    "status",
    "triggered",
    "value",
    "threshold",
    "explanation",
]


def flatten_report(report: EvaluationReport) -> list[dict[str, Any]]:
    """One flat row per indicator result (primitive values only)."""
    data = report.model_dump(mode="json")
    rows: list[dict[str, Any]] = []
    for r in data["results"]:
        rows.append(
            {
                "client_ref": data["client_ref"],
                "risk_group": data["risk_group"],
                "risk_level": data["risk_level"],
                "operation_type": data["operation_type"],
                "verdict": data["verdict"],
                "indicator_id": r["id"],
                "indicator_code": r["code"],
                "severity": r["severity"],
                "status": r["status"],
                "triggered": r["triggered"],
                "value": r["value"],
                "threshold": r["threshold"],
                "explanation": r["explanation"],
            }
        )
    return rows


def write_reports(
    reports: Sequence[EvaluationReport],
    output_dir: str | Path,
    output_prefix: str = "aml_indicators",
    config_hash: str | None = None,
    rejects: Sequence[str] = (),
    triggered_only: bool = False,
) -> tuple[str, str]:
    """
    Write the batch as JSON (full reports + summary + run metadata) and as a flat CSV.
    With triggered_only, the CSV keeps only rows of triggered indicators.
    Returns (path_json, path_csv).
    """
    path = Path(output_dir)
    path.mkdir(parents=True, exist_ok=True)
    now = datetime.now(UTC)
    ts_suffix = now.strftime("%Y%m%d_%H%M%S")
    json_path = path / f"{output_prefix}_{ts_suffix}.json"
    csv_path = path / f"{output_prefix}_{ts_suffix}.csv"

    summary = summarize(reports)
    payload = {
        "generated_at": now.isoformat(),
        "correlation_id": get_correlation_id(),
        "actor": get_actor(),
        "engine_version": ENGINE_VERSION,
        "rules_version": RULES_VERSION,
        "thresholds_version": reports[0].thresholds_version if reports else None,
        "config_hash": config_hash,
        "summary": summary.model_dump(mode="json"),
        "rejects": list(rejects),
        "reports": [r.model_dump(mode="json") for r in reports],
    }
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    with open(csv_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for report in reports:
            for row in flatten_report(report):
                if triggered_only and not row["triggered"]:
                    continue
                writer.writerow(row)
    return str(json_path), str(csv_path)
