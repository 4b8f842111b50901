"""Portfolio loaders for CSV and JSONL profile files."""

from aml_indicators.ingest.loader import (
    LoadResult,
    load_profiles,
    load_profiles_csv,
    load_profiles_jsonl,
)

__all__ = ["LoadResult", "load_profiles", "load_profiles_csv", "load_profiles_jsonl"]
