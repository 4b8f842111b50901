"""CLI tests with typer's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from aml_indicators.cli import app

runner = CliRunner()


def test_classify_command(config_path: str) -> None:
    result = runner.invoke(app, ["classify", "Chef d'entreprise", "--config", config_path])
    assert result.exit_code == 0
    assert result.output.strip().splitlines()[-1] == "high"


def test_evaluate_command_fail_on_alert(tmp_path: Path, config_path: str) -> None:
    profile = tmp_path / "profile.json"
    profile.write_text(
        json.dumps({"activite": "retraité", "paiementEspeces": 3500}), encoding="utf-8"
    )
    result = runner.invoke(app, ["evaluate", str(profile), "-c", config_path])
    assert result.exit_code == 0
    report = json.loads(result.output[result.output.index("{") :])
    assert report["risk_group"] == "retired"
    assert report["verdict"] == "critical"

    result = runner.invoke(app, ["evaluate", str(profile), "-c", config_path, "--fail-on-alert"])
    assert result.exit_code == 2


def test_evaluate_command_stdin(config_path: str) -> None:
    result = runner.invoke(
        app, ["evaluate", "-", "-c", config_path, "--fail-on-alert"], input='{"occupation": "salarié"}'
    )
    assert result.exit_code == 0


def test_evaluate_command_invalid_input(tmp_path: Path, config_path: str) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert runner.invoke(app, ["evaluate", str(bad), "-c", config_path]).exit_code == 1
    assert runner.invoke(app, ["evaluate", str(tmp_path / "none.json"), "-c", config_path]).exit_code == 1
    negative = tmp_path / "negative.json"
    negative.write_text('{"premium": -1}', encoding="utf-8")
    assert runner.invoke(app, ["evaluate", str(negative), "-c", config_path]).exit_code == 1


def test_evaluate_batch_command(tmp_path: Path, config_path: str) -> None:
    portfolio = tmp_path / "portefeuille.csv"
    portfolio.write_text(
        "Code client;Activité;Niveau de risque;Paiement espèces;Pays GAFI\n"
        "C1;salarié;!=;3001;non\n"
        "C2;notaire;RE;100;non\n"
        "C3;étudiant;!=;abc;non\n",
        encoding="utf-8",
    )
    out = tmp_path / "reports"
    result = runner.invoke(
        app, ["evaluate-batch", str(portfolio), "-c", config_path, "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "Read 3 rows, rejected 1, evaluated 2 profiles, 1 with alerts." in result.output
    assert len(list(out.glob("aml_indicators_*.json"))) == 1
    assert len(list(out.glob("aml_indicators_*.csv"))) == 1


def test_evaluate_batch_unsupported_file(tmp_path: Path, config_path: str) -> None:
    path = tmp_path / "portfolio.txt"
    path.write_text("x", encoding="utf-8")
    result = runner.invoke(app, ["evaluate-batch", str(path), "-c", config_path])
    assert result.exit_code == 1


def test_thresholds_command(config_path: str) -> None:
    result = runner.invoke(app, ["thresholds", "-c", config_path])
    assert result.exit_code == 0
    assert "cash_payment_ceiling: 3000" in result.output
    assert "version: '2024.2'" in result.output


def test_invalid_config_exits_1(tmp_path: Path) -> None:
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("thresholds:\n  cash_payment_ceiling: -1\n", encoding="utf-8")
    result = runner.invoke(app, ["thresholds", "-c", str(cfg)])
    assert result.exit_code == 1
