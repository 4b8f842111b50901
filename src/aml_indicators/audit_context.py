"""Run context: correlation_id and actor stamped on batch outputs and API responses."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("run_correlation_id", default=None)
_actor: ContextVar[str | None] = ContextVar("run_actor", default=None)


def set_audit_context(correlation_id: str | None, actor: str | None = None) -> None:
    """Set correlation_id and actor for the current context (CLI batch or API request)."""
    _correlation_id.set(correlation_id)
    _actor.set(actor)


def get_correlation_id() -> str:
    """Return current correlation_id; one is generated and kept if none was set."""
    cid = _correlation_id.get()
    if cid is None:
        cid = str(uuid.uuid4())
        _correlation_id.set(cid)
    return cid


def get_actor() -> str:
    """Return current actor, 'system' if not set."""
    return _actor.get() or "system"
