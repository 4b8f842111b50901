"""Typer CLI: classify, evaluate, evaluate-batch, thresholds, serve-api."""

from __future__ import annotations

import json
import os
import sys
import uuid
from typing import Any

import typer
from pydantic import ValidationError

from aml_indicators.audit_context import set_audit_context
from aml_indicators.classifier import OccupationClassifier, get_classifier
from aml_indicators.config import get_config, get_config_hash
from aml_indicators.engine import evaluate as evaluate_profile
from aml_indicators.engine import evaluate_many, summarize
from aml_indicators.ingest import load_profiles
from aml_indicators.logging_config import setup_logging
from aml_indicators.reporting import write_reports
from aml_indicators.schemas import ClientProfile
from aml_indicators.thresholds import ThresholdTable, dump_thresholds, get_thresholds

app = typer.Typer(help="AML indicator engine CLI (life insurance)")


def _setup(config_path: str | None) -> tuple[dict[str, Any], ThresholdTable, OccupationClassifier]:
    """Load config, configure logging and resolve thresholds + classifier; exit 1 on bad config."""
    try:
        config = get_config(config_path)
        setup_logging(config.get("app", {}).get("log_level", "INFO"))
        return config, get_thresholds(config), get_classifier(config)
    except (ValueError, FileNotFoundError) as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(1) from e


@app.command()
def classify(
    occupation: str = typer.Argument(..., help="Free-text occupation, e.g. \"chef d'entreprise\""),
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
) -> None:
    """Print the risk group for an occupation."""
    _, _, classifier = _setup(config)
    typer.echo(classifier.classify(occupation).value)


@app.command()
def evaluate(
    path: str = typer.Argument(..., help="JSON file with one client profile, or '-' for stdin"),
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
    fail_on_alert: bool = typer.Option(
        False, "--fail-on-alert", help="Exit with code 2 when any indicator triggers"
    ),
) -> None:
    """Evaluate one profile and print the JSON report."""
    _, thresholds, classifier = _setup(config)
    try:
        if path == "-":
            raw = sys.stdin.read()
        else:
            with open(path, encoding="utf-8") as f:
                raw = f.read()
        profile = ClientProfile.model_validate(json.loads(raw))
    except FileNotFoundError as e:
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(1) from e
    except json.JSONDecodeError as e:
        typer.echo(f"Invalid JSON: {e.msg}", err=True)
        raise typer.Exit(1) from e
    except ValidationError as e:
        typer.echo(f"Invalid profile: {e}", err=True)
        raise typer.Exit(1) from e
    report = evaluate_profile(profile, thresholds=thresholds, classifier=classifier)
    typer.echo(report.model_dump_json(indent=2))
    if fail_on_alert and report.triggered:
        raise typer.Exit(2)


@app.command("evaluate-batch")
def evaluate_batch(
    path: str = typer.Argument(..., help="Portfolio file: CSV, JSONL or JSON list"),
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
    output_dir: str | None = typer.Option(None, "--output", "-o", help="Output directory"),
    encoding: str | None = typer.Option(None, "--encoding", "-e", help="CSV encoding"),
    triggered_only: bool = typer.Option(
        False, "--triggered-only", help="CSV keeps only triggered indicator rows"
    ),
) -> None:
    """Evaluate every profile in a portfolio file; write JSON + CSV reports."""
    cfg, thresholds, classifier = _setup(config)
    set_audit_context(str(uuid.uuid4()), os.environ.get("AML_ACTOR", "cli"))
    batch_cfg = cfg.get("batch") or {}
    try:
        loaded = load_profiles(
            path,
            encoding=encoding or batch_cfg.get("csv_encoding", "utf-8"),
            column_map=batch_cfg.get("column_map"),
        )
    except FileNotFoundError as e:
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(1) from e
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1) from e
    reports = evaluate_many(
        loaded.profiles,
        thresholds=thresholds,
        classifier=classifier,
        progress_interval=int(batch_cfg.get("progress_interval", 1000)),
    )
    out = output_dir or cfg.get("reporting", {}).get("output_dir", "./reports")
    json_path, csv_path = write_reports(
        reports,
        out,
        config_hash=get_config_hash(cfg),
        rejects=loaded.reject_reasons,
        triggered_only=triggered_only,
    )
    summary = summarize(reports)
    typer.echo(
        f"Read {loaded.rows_read} rows, rejected {loaded.rows_rejected}, "
        f"evaluated {summary.profiles} profiles, {summary.triggered_profiles} with alerts."
    )
    for verdict, count in summary.by_verdict.items():
        typer.echo(f"  {verdict}: {count}")
    typer.echo(f"Reports: {json_path}, {csv_path}")


@app.command()
def thresholds(
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
) -> None:
    """Print the active threshold table as YAML."""
    _, table, _ = _setup(config)
    typer.echo(dump_thresholds(table))


@app.command("serve-api")
def serve_api(
    config: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
    host: str | None = typer.Option(None, "--host", "-h", help="Bind host"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
) -> None:
    """Start the FastAPI server."""
    cfg, _, _ = _setup(config)
    if config:
        os.environ["AML_CONFIG_PATH"] = config
    api_cfg = cfg.get("api", {})
    h = host or api_cfg.get("host", "0.0.0.0")
    p = port or int(api_cfg.get("port", 8000))
    import uvicorn

    uvicorn.run(
        "aml_indicators.api:app",
        host=h,
        port=p,
        reload=False,
    )


if __name__ == "__main__":
    app()
