"""Load a client portfolio (CSV or JSONL) into ClientProfile records.

Bad rows are rejected and counted, never abort the load: data-quality issues
are reported next to the AML findings, not mixed into them.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from aml_indicators.ingest.schema import infer_column_map, normalize_row
from aml_indicators.schemas import ClientProfile

log = logging.getLogger(__name__)

MAX_REJECT_REASONS = 500  # cap to keep batch summaries small
SUPPORTED_SUFFIXES = (".csv", ".jsonl", ".json")


@dataclass
class LoadResult:
    profiles: list[ClientProfile] = field(default_factory=list)
    rows_read: int = 0
    rows_rejected: int = 0
    reject_reasons: list[str] = field(default_factory=list)
    column_map: dict[str, str] = field(default_factory=dict)

    def reject(self, line_no: int, reason: str) -> None:
        self.rows_rejected += 1
        if len(self.reject_reasons) < MAX_REJECT_REASONS:
            self.reject_reasons.append(f"row {line_no}: {reason}")


def _validation_reason(e: ValidationError) -> str:
    fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
    return "invalid:" + ",".join(fields)


def _add_row(
    result: LoadResult, line_no: int, row: dict[str, Any], column_map: dict[str, str]
) -> None:
    try:
        result.profiles.append(ClientProfile.model_validate(normalize_row(row, column_map)))
    except ValidationError as e:
        result.reject(line_no, _validation_reason(e))


def _sniff_delimiter(header_line: str) -> str:
    """Spreadsheet exports in French locales use ';'; pick the most frequent candidate."""
    counts = {d: header_line.count(d) for d in (",", ";", "\t")}
    best = max(counts, key=lambda d: counts[d])
    return best if counts[best] else ","


def load_profiles_csv(
    filepath: str | Path,
    encoding: str = "utf-8",
    column_map: dict[str, str] | None = None,
) -> LoadResult:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(str(path))
    result = LoadResult()
    # utf-8-sig strips the BOM Excel writes
    enc = "utf-8-sig" if encoding.lower().replace("_", "-") == "utf-8" else encoding
    with open(path, encoding=enc, newline="") as f:
        delimiter = _sniff_delimiter(f.readline())
        f.seek(0)
        reader = csv.DictReader(f, delimiter=delimiter)
        if not reader.fieldnames:
            return result
        headers = [h for h in reader.fieldnames if h]
        result.column_map = infer_column_map(headers, column_map)
        if not result.column_map:
            raise ValueError(
                f"Cannot load {path}: no column maps to a profile field. Headers: {headers}"
            )
        for line_no, row in enumerate(reader, start=2):
            result.rows_read += 1
            _add_row(result, line_no, row, result.column_map)
    log.info(
        "loaded %s profiles from %s (%s read, %s rejected)",
        len(result.profiles),
        path.name,
        result.rows_read,
        result.rows_rejected,
    )
    return result


def load_profiles_jsonl(
    filepath: str | Path,
    column_map: dict[str, str] | None = None,
) -> LoadResult:
    """JSONL, one object per line.

    A `.json` file holding one object or a list of objects is accepted too.
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(str(path))
    result = LoadResult()
    text = path.read_text(encoding="utf-8")
    parsed: Any = None
    if path.suffix.lower() == ".json":
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            # a .json file may still hold one object per line
            if text.lstrip().startswith("["):
                raise ValueError(f"Cannot load {path}: invalid JSON ({e.msg})") from e
    if isinstance(parsed, list):
        records = list(enumerate(parsed, start=1))
    elif isinstance(parsed, dict):
        records = [(1, parsed)]
    else:
        records = []
        for line_no, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append((line_no, json.loads(line)))
            except json.JSONDecodeError as e:
                result.rows_read += 1
                result.reject(line_no, f"json_error:{e.msg}")
    for line_no, obj in records:
        result.rows_read += 1
        if not isinstance(obj, dict):
            result.reject(line_no, "not_an_object")
            continue
        row_map = infer_column_map(list(obj.keys()), column_map)
        result.column_map.update(row_map)
        _add_row(result, line_no, obj, row_map)
    log.info(
        "loaded %s profiles from %s (%s read, %s rejected)",
        len(result.profiles),
        path.name,
        result.rows_read,
        result.rows_rejected,
    )
    return result


def load_profiles(
    filepath: str | Path,
    encoding: str = "utf-8",
    column_map: dict[str, str] | None = None,
) -> LoadResult:
    """Dispatch on file suffix (.csv, .jsonl, .json)."""
    suffix = Path(filepath).suffix.lower()
    if suffix == ".csv":
        return load_profiles_csv(filepath, encoding=encoding, column_map=column_map)
    if suffix in (".jsonl", ".json"):
        return load_profiles_jsonl(filepath, column_map=column_map)
    raise ValueError(f"Unsupported file type {suffix!r}; expected one of {SUPPORTED_SUFFIXES}")
