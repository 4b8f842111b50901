"""Rule engine: evaluate a client profile against every catalogue indicator.

`evaluate` is pure: no I/O, no shared mutable state. Each call builds its own
results, so portfolios can be evaluated concurrently without coordination.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence

from aml_indicators import RULES_VERSION
from aml_indicators.classifier import DEFAULT_CLASSIFIER, OccupationClassifier
from aml_indicators.rules import get_catalogue
from aml_indicators.rules.base import RuleContext
from aml_indicators.schemas import (
    VERDICT_OK,
    ClientProfile,
    EvaluationReport,
    IndicatorResult,
    PortfolioSummary,
)
from aml_indicators.thresholds import DEFAULT_THRESHOLDS, ThresholdTable

log = logging.getLogger(__name__)
PROGRESS_INTERVAL = 1000  # log progress every N profiles

_CATALOGUE = get_catalogue()


def overall_verdict(results: Iterable[IndicatorResult]) -> str:
    """Highest severity among triggered results, or "ok" when nothing triggered."""
    fired = [r.severity for r in results if r.triggered]
    if not fired:
        return VERDICT_OK
    return max(fired).value


def evaluate(
    profile: ClientProfile,
    thresholds: ThresholdTable | None = None,
    classifier: OccupationClassifier | None = None,
) -> EvaluationReport:
    """Evaluate all indicators for one profile; always returns one result per indicator."""
    table = thresholds if thresholds is not None else DEFAULT_THRESHOLDS
    group = (classifier or DEFAULT_CLASSIFIER).classify(profile.occupation)
    ctx = RuleContext(profile=profile, group=group, thresholds=table)
    results = tuple(indicator.evaluate(ctx) for indicator in _CATALOGUE)
    triggered_count = sum(1 for r in results if r.triggered)
    report = EvaluationReport(
        client_ref=profile.client_ref,
        risk_group=group,
        risk_level=profile.risk_level,
        operation_type=profile.operation_type,
        triggered=triggered_count > 0,
        triggered_count=triggered_count,
        verdict=overall_verdict(results),
        thresholds_version=table.version,
        rules_version=RULES_VERSION,
        results=results,
    )
    log.debug(
        "evaluated profile: group=%s triggered=%s verdict=%s",
        group.value,
        triggered_count,
        report.verdict,
    )
    return report


def evaluate_many(
    profiles: Iterable[ClientProfile],
    thresholds: ThresholdTable | None = None,
    classifier: OccupationClassifier | None = None,
    progress_interval: int = PROGRESS_INTERVAL,
) -> list[EvaluationReport]:
    """Evaluate a portfolio in input order."""
    reports: list[EvaluationReport] = []
    for profile in profiles:
        reports.append(evaluate(profile, thresholds=thresholds, classifier=classifier))
        if progress_interval > 0 and len(reports) % progress_interval == 0:
            log.info("evaluate progress: %s profiles", len(reports))
    log.info(
        "evaluated %s profiles, %s with alerts",
        len(reports),
        sum(1 for r in reports if r.triggered),
    )
    return reports


def summarize(reports: Sequence[EvaluationReport]) -> PortfolioSummary:
    """Portfolio counts: profiles with alerts, verdict distribution, hits per indicator."""
    by_verdict: Counter[str] = Counter(r.verdict for r in reports)
    by_indicator: Counter[str] = Counter()
    for report in reports:
        for result in report.results:
            if result.triggered:
                by_indicator[result.code] += 1
    return PortfolioSummary(
        profiles=len(reports),
        triggered_profiles=sum(1 for r in reports if r.triggered),
        by_verdict=dict(sorted(by_verdict.items())),
        by_indicator={ind.code: by_indicator.get(ind.code, 0) for ind in _CATALOGUE},
    )
