"""Amount indicators: a profile amount compared to a (group, level) threshold.

The comparison is strict: an amount equal to the threshold does not alert.
"""

from __future__ import annotations

from aml_indicators.rules.base import BaseIndicator, RuleContext, fmt_amount
from aml_indicators.schemas import IndicatorResult, OperationType, RuleStatus, Severity


class AmountThresholdIndicator(BaseIndicator):
    """Alert when `amount_field` > thresholds.<table>[group][level], for gated operations only."""

    amount_field: str = ""
    amount_label: str = ""
    table: str = ""
    operations: frozenset[OperationType] = frozenset()
    severity = Severity.HIGH

    def _gate_text(self) -> str:
        return " or ".join(sorted(op.value for op in self.operations))

    def evaluate(self, ctx: RuleContext) -> IndicatorResult:
        op = ctx.operation
        if op is None:
            return self.not_applicable(f"Operation type missing; applies to {self._gate_text()}")
        if op not in self.operations:
            return self.not_applicable(
                f"Operation {op.value} outside scope ({self._gate_text()})"
            )
        amount = getattr(ctx.profile, self.amount_field)
        if amount is None:
            return self.not_applicable(f"{self.amount_label} not provided")
        threshold = ctx.thresholds.group_level(self.table, ctx.group, ctx.level)
        if threshold is None:
            return self.result(
                triggered=False,
                status=RuleStatus.NO_THRESHOLD,
                value=amount,
                explanation=f"No threshold defined for {ctx.describe_segment()}",
            )
        triggered = amount > threshold
        sign = ">" if triggered else "<="
        outcome = "ALERT" if triggered else "OK"
        return self.result(
            triggered=triggered,
            status=RuleStatus.EVALUATED,
            value=amount,
            threshold=threshold,
            explanation=(
                f"{self.amount_label} {fmt_amount(amount)} {sign} {fmt_amount(threshold)} "
                f"({ctx.describe_segment()}): {outcome}"
            ),
        )


class InsuredCapitalIndicator(AmountThresholdIndicator):
    indicator_id = 2
    code = "high_insured_capital"
    label = "High insured capital"
    rule = "Insured capital above the threshold for the client's risk group and level"
    amount_field = "insured_capital"
    amount_label = "Insured capital"
    table = "insured_capital"
    operations = frozenset({OperationType.SUBSCRIPTION, OperationType.CAPITAL_INCREASE})


class PremiumIndicator(AmountThresholdIndicator):
    indicator_id = 3
    code = "high_premium"
    label = "Abnormally high premium"
    rule = "Premium above the threshold for the client's risk group and level"
    amount_field = "premium"
    amount_label = "Premium"
    table = "premium"
    operations = frozenset({OperationType.SUBSCRIPTION, OperationType.PREMIUM_PAYMENT})


class RedemptionIndicator(AmountThresholdIndicator):
    indicator_id = 4
    code = "high_redemption"
    label = "Large redemption"
    rule = "Redemption value above the threshold for the client's risk group and level"
    amount_field = "redemption_value"
    amount_label = "Redemption value"
    table = "redemption_value"
    operations = frozenset({OperationType.REDEMPTION})
