"""Structured logging setup - no secrets, client PII redaction."""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

# Redact secrets
REDACT_FIELDS = frozenset({"password", "secret", "token", "api_key", "authorization"})
# PII: client identity and occupation never reach the logs, only counts and verdicts
PII_REDACT_KEYS = frozenset(
    {
        "client_ref",
        "occupation",
        "activite",
        "name",
        "nom",
        "prenom",
    }
)
PII_KEY_PATTERN = re.compile(
    r"(\b" + "|".join(re.escape(k) for k in PII_REDACT_KEYS) + r")[\s=:]+[^\s,\)\]]+",
    re.IGNORECASE,
)


def _sanitize_extra(extra: dict[str, Any] | None) -> dict[str, Any]:
    if not extra:
        return {}
    out: dict[str, Any] = {}
    for k, v in extra.items():
        key_lower = k.lower()
        if any(r in key_lower for r in REDACT_FIELDS):
            out[k] = "***"
        elif any(p in key_lower for p in PII_REDACT_KEYS):
            out[k] = "[REDACTED]"
        else:
            out[k] = v
    return out


def _redact_message(msg: Any) -> str:
    """Replace PII key=value or key: value in message with [REDACTED]."""
    if not isinstance(msg, str):
        return str(msg)
    return PII_KEY_PATTERN.sub(r"\1=[REDACTED]", msg)


class PIIRedactionFilter(logging.Filter):
    """Filter that redacts client PII from log records (message, args and dict args)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = _redact_message(record.msg)
        if getattr(record, "args", None) and isinstance(record.args, tuple | dict):
            if isinstance(record.args, tuple):
                record.args = tuple(_redact_message(str(a)) for a in record.args)
            else:
                record.args = _sanitize_extra(dict(record.args))
        return True


def setup_logging(log_level: str = "INFO") -> None:
    """Configure root logger: stdout, PII redaction filter, no secrets."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
        stream=sys.stdout,
        force=True,
    )
    # Handler-level: logger filters do not see records propagated from child loggers.
    for handler in logging.getLogger().handlers:
        handler.addFilter(PIIRedactionFilter())
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)