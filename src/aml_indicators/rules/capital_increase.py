"""Capital increase: ratio of new to previous insured capital against a per-level ratio."""

from __future__ import annotations

from aml_indicators.rules.base import BaseIndicator, RuleContext, fmt_ratio
from aml_indicators.schemas import IndicatorResult, OperationType, RuleStatus, Severity


class CapitalIncreaseIndicator(BaseIndicator):
    indicator_id = 5
    code = "capital_increase"
    label = "Suspicious capital increase"
    rule = "Capital increase ratio at or above the ratio for the client's risk level"
    severity = Severity.HIGH

    def evaluate(self, ctx: RuleContext) -> IndicatorResult:
        if ctx.operation is not OperationType.CAPITAL_INCREASE:
            found = ctx.operation.value if ctx.operation else "missing"
            return self.not_applicable(f"Operation {found}; applies to capital_increase only")
        ratio = ctx.profile.capital_increase_ratio
        if ratio is None:
            return self.not_applicable("Capital increase ratio not provided")
        threshold = ctx.thresholds.ratio(ctx.level)
        if threshold is None:
            level = ctx.level.value if ctx.level else "missing"
            return self.result(
                triggered=False,
                status=RuleStatus.NO_THRESHOLD,
                value=ratio,
                explanation=f"No ratio defined for level {level}",
            )
        # Inclusive bound: a ratio equal to the policy ratio alerts.
        triggered = ratio >= threshold
        sign = ">=" if triggered else "<"
        return self.result(
            triggered=triggered,
            status=RuleStatus.EVALUATED,
            value=ratio,
            threshold=threshold,
            explanation=(
                f"Increase {fmt_ratio(ratio)} {sign} {fmt_ratio(threshold)} "
                f"(level {ctx.level.value if ctx.level else 'missing'}): "
                f"{'ALERT' if triggered else 'OK'}"
            ),
        )
