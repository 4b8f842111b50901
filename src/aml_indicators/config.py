"""Configuration loading from YAML + environment overrides."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_yaml(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


class AppSettings(BaseSettings):
    """App-level settings with env override."""

    model_config = SettingsConfigDict(
        env_prefix="AML_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    config_path: str = Field(default="config/default.yaml", alias="AML_CONFIG_PATH")
    log_level: str = Field(default="INFO", alias="AML_LOG_LEVEL")
    api_host: str = Field(default="0.0.0.0", alias="AML_API_HOST")
    api_port: int = Field(default=8000, alias="AML_API_PORT")


def validate_classifier_keywords(config: dict[str, Any]) -> None:
    """Raise ValueError if classifier.keywords names an unknown group or is not a list of strings."""
    keywords = (config.get("classifier") or {}).get("keywords")
    if not keywords:
        return
    if not isinstance(keywords, dict):
        raise ValueError("classifier.keywords must map a risk group to a list of keywords")
    allowed = {"low", "medium", "high", "retired"}
    for group, words in keywords.items():
        if group not in allowed:
            raise ValueError(
                f"classifier.keywords has unknown group {group!r}; expected one of {sorted(allowed)}"
            )
        if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
            raise ValueError(f"classifier.keywords.{group} must be a list of strings")


def _resolve_thresholds_path(config: dict[str, Any], config_dir: Path) -> None:
    """A relative `thresholds.path` is taken relative to the config file, not the cwd."""
    thresholds = config.get("thresholds")
    if isinstance(thresholds, dict) and thresholds.get("path"):
        p = Path(thresholds["path"])
        if not p.is_absolute():
            thresholds["path"] = str(config_dir / p)


def get_config(config_path: str | None = None) -> dict[str, Any]:
    """Load merged config from YAML and apply env overrides via AppSettings."""
    settings = AppSettings()
    path = config_path or settings.config_path
    base = _default_config()
    if Path(path).exists():
        base = _deep_merge(base, _load_yaml(path))
        tuned_path = Path(path).parent / "tuned.yaml"
        if tuned_path.exists():
            base = _deep_merge(base, _load_yaml(str(tuned_path)))
        _resolve_thresholds_path(base, Path(path).parent)
    if os.environ.get("AML_LOG_LEVEL"):
        base.setdefault("app", {})["log_level"] = settings.log_level
    if os.environ.get("AML_API_HOST"):
        base.setdefault("api", {})["host"] = settings.api_host
    if os.environ.get("AML_API_PORT"):
        base.setdefault("api", {})["port"] = settings.api_port
    validate_classifier_keywords(base)
    return base


def _default_config() -> dict[str, Any]:
    return {
        "app": {"name": "aml-indicators", "env": "default", "log_level": "INFO"},
        "classifier": {},
        "thresholds": {},
        "batch": {"progress_interval": 1000, "csv_encoding": "utf-8"},
        "reporting": {"output_dir": "./reports"},
        "api": {"host": "0.0.0.0", "port": 8000, "max_batch_size": 1000},
    }


def get_config_hash(config: dict[str, Any]) -> str:
    """SHA256 of resolved config for audit reproducibility (canonical key order)."""
    canonical = yaml.dump(config, default_flow_style=False, sort_keys=True, allow_unicode=True)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
