"""AML indicator engine for life-insurance compliance monitoring."""

import os
import subprocess

__version__ = "0.2.0"

CATALOGUE_VERSION = "2024.2"


# Audit-grade reproducibility: env > git describe > catalogue version
def _git_version() -> str | None:
    try:
        rev = subprocess.run(
            ["git", "describe", "--always", "--dirty"],
            capture_output=True,
            text=True,
            timeout=5,
            cwd=os.path.dirname(os.path.abspath(__file__)),
        )
        if rev.returncode == 0 and rev.stdout:
            return rev.stdout.strip()
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return None


RULES_VERSION = os.environ.get("AML_RULES_VERSION") or _git_version() or CATALOGUE_VERSION
ENGINE_VERSION = __version__
