"""Threshold tables: per-indicator amounts keyed by risk group and risk level.

The canonical table is data, not rule logic: a policy update replaces or
overrides it from YAML (see `get_thresholds`). Lookups never raise; a missing
group/level pair returns None and the indicator reports "no threshold".
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, field_serializer, field_validator, model_validator

from aml_indicators import CATALOGUE_VERSION
from aml_indicators.config import _deep_merge, _load_yaml
from aml_indicators.schemas import RiskGroup, RiskLevel

GROUP_LEVEL_TABLES = ("insured_capital", "premium", "redemption_value")
FLAT_TABLES = ("capital_increase_ratio", "reference_capital")


def _positive(amount: float) -> bool:
    return math.isfinite(amount) and amount > 0


def _level_key(key: Any) -> Any:
    """Accept source tokens ("!=", "RE") as level keys; leave anything else for validation."""
    return RiskLevel.parse(key) or key


class ThresholdTable(BaseModel):
    """Versioned, read-only threshold configuration for the indicator catalogue."""

    model_config = ConfigDict(frozen=True)

    version: str
    insured_capital: Mapping[RiskGroup, Mapping[RiskLevel, float]] = {}
    premium: Mapping[RiskGroup, Mapping[RiskLevel, float]] = {}
    redemption_value: Mapping[RiskGroup, Mapping[RiskLevel, float]] = {}
    capital_increase_ratio: Mapping[RiskLevel, float] = {}
    reference_capital: Mapping[RiskGroup, float] = {}
    cash_payment_ceiling: float | None = None

    @field_validator(*GROUP_LEVEL_TABLES, mode="before")
    @classmethod
    def normalize_level_keys(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {
            group: {_level_key(k): amount for k, amount in (levels or {}).items()}
            if isinstance(levels, dict)
            else levels
            for group, levels in v.items()
        }

    @field_validator("capital_increase_ratio", mode="before")
    @classmethod
    def normalize_ratio_keys(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {_level_key(k): ratio for k, ratio in v.items()}

    @field_validator(*GROUP_LEVEL_TABLES)
    @classmethod
    def group_level_positive(
        cls, v: Mapping[RiskGroup, Mapping[RiskLevel, float]]
    ) -> Mapping[RiskGroup, Mapping[RiskLevel, float]]:
        for group, levels in v.items():
            for level, amount in levels.items():
                if not _positive(amount):
                    raise ValueError(
                        f"threshold for ({group.value}, {level.value}) must be > 0, got {amount}"
                    )
        return v

    @field_validator(*FLAT_TABLES)
    @classmethod
    def flat_positive(cls, v: Mapping[Any, float]) -> Mapping[Any, float]:
        for key, amount in v.items():
            if not _positive(amount):
                raise ValueError(f"threshold for {key.value} must be > 0, got {amount}")
        return v

    @field_validator("cash_payment_ceiling")
    @classmethod
    def ceiling_positive(cls, v: float | None) -> float | None:
        if v is not None and not _positive(v):
            raise ValueError(f"cash_payment_ceiling must be > 0, got {v}")
        return v

    @model_validator(mode="after")
    def freeze_tables(self) -> ThresholdTable:
        """Tables become read-only views; one table is shared by every evaluation."""
        for name in GROUP_LEVEL_TABLES:
            levels = getattr(self, name)
            self.__dict__[name] = MappingProxyType(
                {group: MappingProxyType(dict(by_level)) for group, by_level in levels.items()}
            )
        for name in FLAT_TABLES:
            self.__dict__[name] = MappingProxyType(dict(getattr(self, name)))
        return self

    @field_serializer(*GROUP_LEVEL_TABLES, *FLAT_TABLES)
    def tables_as_dicts(self, v: Mapping[Any, Any]) -> dict[Any, Any]:
        return {k: dict(x) if isinstance(x, Mapping) else x for k, x in v.items()}

    # --- lookups (total) ---
    def group_level(
        self, table: str, group: RiskGroup | None, level: RiskLevel | None
    ) -> float | None:
        """Amount for (group, level) in one of the group/level tables, None when absent."""
        if table not in GROUP_LEVEL_TABLES or group is None or level is None:
            return None
        levels: Mapping[RiskLevel, float] = getattr(self, table).get(group) or {}
        return levels.get(level)

    def ratio(self, level: RiskLevel | None) -> float | None:
        if level is None:
            return None
        return self.capital_increase_ratio.get(level)

    def reference(self, group: RiskGroup | None) -> float | None:
        if group is None:
            return None
        return self.reference_capital.get(group)


DEFAULT_THRESHOLDS = ThresholdTable(
    version=CATALOGUE_VERSION,
    insured_capital={
        RiskGroup.LOW: {RiskLevel.STANDARD: 50_000, RiskLevel.ENHANCED: 30_000},
        RiskGroup.MEDIUM: {RiskLevel.STANDARD: 150_000, RiskLevel.ENHANCED: 40_000},
        RiskGroup.HIGH: {RiskLevel.STANDARD: 500_000, RiskLevel.ENHANCED: 200_000},
        RiskGroup.RETIRED: {RiskLevel.STANDARD: 80_000, RiskLevel.ENHANCED: 160_000},
    },
    premium={
        RiskGroup.LOW: {RiskLevel.STANDARD: 1_000, RiskLevel.ENHANCED: 400},
        RiskGroup.MEDIUM: {RiskLevel.STANDARD: 2_500, RiskLevel.ENHANCED: 1_000},
        RiskGroup.HIGH: {RiskLevel.STANDARD: 6_000, RiskLevel.ENHANCED: 3_000},
        RiskGroup.RETIRED: {RiskLevel.STANDARD: 2_000, RiskLevel.ENHANCED: 3_000},
    },
    redemption_value={
        RiskGroup.LOW: {RiskLevel.STANDARD: 20_000, RiskLevel.ENHANCED: 10_000},
        RiskGroup.MEDIUM: {RiskLevel.STANDARD: 30_000, RiskLevel.ENHANCED: 15_000},
        RiskGroup.HIGH: {RiskLevel.STANDARD: 100_000, RiskLevel.ENHANCED: 50_000},
        RiskGroup.RETIRED: {RiskLevel.STANDARD: 50_000, RiskLevel.ENHANCED: 60_000},
    },
    capital_increase_ratio={RiskLevel.STANDARD: 2.0, RiskLevel.ENHANCED: 1.25},
    reference_capital={
        RiskGroup.LOW: 400_000,
        RiskGroup.MEDIUM: 800_000,
        RiskGroup.HIGH: 1_000_000,
        RiskGroup.RETIRED: 400_000,
    },
    cash_payment_ceiling=5_000,
)


def thresholds_from_mapping(
    data: dict[str, Any], base: ThresholdTable | None = None
) -> ThresholdTable:
    """Build a table from a (possibly partial) mapping merged over `base`.

    With ``replace: true`` in the mapping the base is ignored, so a table can
    deliberately leave group/level pairs undefined.
    """
    data = dict(data)
    replace = bool(data.pop("replace", False))
    if replace or base is None:
        merged = data
    else:
        merged = _deep_merge(base.model_dump(mode="json"), data)
    return ThresholdTable.model_validate(merged)


def load_thresholds(path: str | Path, base: ThresholdTable | None = None) -> ThresholdTable:
    """Load a threshold table from YAML. Raises ValueError on invalid content."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))
    data = _load_yaml(p)
    if not isinstance(data, dict):
        raise ValueError(f"threshold file {p} must contain a mapping")
    return thresholds_from_mapping(data, base=DEFAULT_THRESHOLDS if base is None else base)


def get_thresholds(config: dict[str, Any]) -> ThresholdTable:
    """Resolve the active table from config: `thresholds.path` file, then inline overrides."""
    cfg = dict(config.get("thresholds") or {})
    path = cfg.pop("path", None)
    table = DEFAULT_THRESHOLDS
    if path:
        table = load_thresholds(path)
    if cfg:
        table = thresholds_from_mapping(cfg, base=table)
    return table


def dump_thresholds(table: ThresholdTable) -> str:
    """YAML rendering of a table (stable key order) for display and export."""
    return yaml.safe_dump(
        table.model_dump(mode="json"), sort_keys=False, allow_unicode=True, default_flow_style=False
    )
