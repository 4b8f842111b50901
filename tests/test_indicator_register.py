"""Tests for indicator register validation (CI governance)."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _env() -> dict[str, str]:
    return {**os.environ, "PYTHONPATH": str(_repo_root() / "src")}


def test_indicator_register_valid_from_repo_root() -> None:
    """Running validate_indicator_register.py from repo root must succeed (current repo state)."""
    root = _repo_root()
    result = subprocess.run(
        [sys.executable, "scripts/validate_indicator_register.py"],
        cwd=root,
        env=_env(),
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, (result.stdout or "") + (result.stderr or "")


def test_indicator_register_fails_when_missing(tmp_path: Path) -> None:
    """When docs/indicator_register.csv is missing, validator exits non-zero."""
    script = _repo_root() / "scripts" / "validate_indicator_register.py"
    result = subprocess.run(
        [sys.executable, str(script)],
        cwd=tmp_path,
        env=_env(),
        capture_output=True,
        text=True,
    )
    assert result.returncode != 0


def test_indicator_register_fails_on_severity_drift(tmp_path: Path) -> None:
    """A register row whose severity differs from the catalogue fails validation."""
    root = _repo_root()
    src = (root / "docs" / "indicator_register.csv").read_text(encoding="utf-8")
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "indicator_register.csv").write_text(
        src.replace("10,cash_payment,critical", "10,cash_payment,high"), encoding="utf-8"
    )
    result = subprocess.run(
        [sys.executable, str(root / "scripts" / "validate_indicator_register.py")],
        cwd=tmp_path,
        env=_env(),
        capture_output=True,
        text=True,
    )
    assert result.returncode == 1
    assert "cash_payment" in result.stdout
