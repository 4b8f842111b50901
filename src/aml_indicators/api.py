"""FastAPI app: classify occupations and evaluate client profiles."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from aml_indicators import ENGINE_VERSION, RULES_VERSION
from aml_indicators.audit_context import set_audit_context
from aml_indicators.classifier import OccupationClassifier, get_classifier
from aml_indicators.config import get_config
from aml_indicators.engine import evaluate, evaluate_many, summarize
from aml_indicators.schemas import (
    BatchEvaluateRequest,
    BatchEvaluateResponse,
    ClassifyRequest,
    ClassifyResponse,
    ClientProfile,
    EvaluationReport,
)
from aml_indicators.thresholds import ThresholdTable, get_thresholds

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineRuntime:
    """Thresholds, classifier and limits resolved from config for one request."""

    thresholds: ThresholdTable
    classifier: OccupationClassifier
    max_batch_size: int


def get_runtime() -> EngineRuntime:
    """Resolve config per request (AML_CONFIG_PATH), so a threshold update needs no restart."""
    try:
        config = get_config()
        return EngineRuntime(
            thresholds=get_thresholds(config),
            classifier=get_classifier(config),
            max_batch_size=int(config.get("api", {}).get("max_batch_size", 1000)),
        )
    except (ValueError, FileNotFoundError) as e:
        log.error("invalid configuration: %s", e)
        raise HTTPException(status_code=500, detail=f"Invalid configuration: {e}") from e


app = FastAPI(title="AML Indicator API", version=ENGINE_VERSION)


class AuditContextMiddleware(BaseHTTPMiddleware):
    """Set correlation_id per request; echo X-Correlation-ID in response."""

    async def dispatch(self, request: Request, call_next: Any) -> Any:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_audit_context(correlation_id, "api")
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


app.add_middleware(AuditContextMiddleware)


@app.get("/health")
def health(runtime: EngineRuntime = Depends(get_runtime)) -> dict[str, Any]:
    """Liveness and versions."""
    return {
        "status": "ok",
        "engine_version": ENGINE_VERSION,
        "rules_version": RULES_VERSION,
        "thresholds_version": runtime.thresholds.version,
    }


@app.get("/thresholds", response_model=ThresholdTable)
def thresholds(runtime: EngineRuntime = Depends(get_runtime)) -> ThresholdTable:
    """Active threshold table."""
    return runtime.thresholds


@app.post("/classify", response_model=ClassifyResponse)
def classify(body: ClassifyRequest, runtime: EngineRuntime = Depends(get_runtime)) -> ClassifyResponse:
    return ClassifyResponse(
        occupation=body.occupation,
        risk_group=runtime.classifier.classify(body.occupation),
    )


@app.post("/evaluate", response_model=EvaluationReport)
def evaluate_profile(
    profile: ClientProfile, runtime: EngineRuntime = Depends(get_runtime)
) -> EvaluationReport:
    """Evaluate one profile against every indicator."""
    return evaluate(profile, thresholds=runtime.thresholds, classifier=runtime.classifier)


@app.post("/evaluate/batch", response_model=BatchEvaluateResponse)
def evaluate_batch(
    body: BatchEvaluateRequest, runtime: EngineRuntime = Depends(get_runtime)
) -> BatchEvaluateResponse:
    """Evaluate a list of profiles; reports keep request order."""
    if len(body.profiles) > runtime.max_batch_size:
        raise HTTPException(
            status_code=413,
            detail=f"Batch of {len(body.profiles)} exceeds max_batch_size {runtime.max_batch_size}",
        )
    reports = evaluate_many(
        body.profiles, thresholds=runtime.thresholds, classifier=runtime.classifier
    )
    return BatchEvaluateResponse(summary=summarize(reports), reports=reports)
