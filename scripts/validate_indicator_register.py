"""Check docs/indicator_register.csv against the indicator catalogue (CI governance)."""

import csv
from pathlib import Path

from aml_indicators.rules import get_catalogue

REQUIRED_COLS = {"indicator_id", "code", "severity", "gate"}


def main() -> int:
    p = Path("docs/indicator_register.csv")
    if not p.exists():
        print("MISSING: docs/indicator_register.csv")
        return 1
    with p.open(newline="") as f:
        reader = csv.DictReader(f)
        cols = set(reader.fieldnames or [])
        missing = REQUIRED_COLS - cols
        if missing:
            print(f"Missing required columns: {sorted(missing)}")
            return 1
        rows = list(reader)
    registered = {(r["indicator_id"], r["code"], r["severity"]) for r in rows}
    expected = {
        (str(ind.indicator_id), ind.code, ind.severity.value) for ind in get_catalogue()
    }
    if registered != expected:
        for item in sorted(expected - registered):
            print(f"Not registered: {item}")
        for item in sorted(registered - expected):
            print(f"Not in catalogue: {item}")
        return 1
    print(f"OK: indicator_register.csv matches the catalogue ({len(rows)} indicators)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
