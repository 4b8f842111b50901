"""Pytest fixtures: sample config, profile factory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest

from aml_indicators.schemas import ClientProfile

# Keep a developer's environment from leaking into config resolution.
for _var in ("AML_CONFIG_PATH", "AML_LOG_LEVEL", "AML_API_HOST", "AML_API_PORT"):
    os.environ.pop(_var, None)


@pytest.fixture
def config_path(tmp_path: Path) -> str:
    """Return path to a temporary config dir with default.yaml."""
    cfg_dir = tmp_path / "config"
    cfg_dir.mkdir()
    (cfg_dir / "default.yaml").write_text(
        """
app:
  log_level: INFO
thresholds:
  cash_payment_ceiling: 3000
batch:
  progress_interval: 10
api:
  max_batch_size: 3
""",
        encoding="utf-8",
    )
    return str(cfg_dir / "default.yaml")


@pytest.fixture
def make_profile():
    """Factory: medium-group, standard-level subscription profile with overrides."""

    def _make(**overrides: Any) -> ClientProfile:
        data: dict[str, Any] = {
            "occupation": "salarié",
            "risk_level": "standard",
            "operation_type": "subscription",
        }
        data.update(overrides)
        return ClientProfile(**data)

    return _make
