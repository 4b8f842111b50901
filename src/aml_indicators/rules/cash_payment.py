"""Cash payment above the fixed legal ceiling."""

from __future__ import annotations

from aml_indicators.rules.base import BaseIndicator, RuleContext, fmt_amount
from aml_indicators.schemas import IndicatorResult, RuleStatus, Severity


class CashPaymentIndicator(BaseIndicator):
    indicator_id = 10
    code = "cash_payment"
    label = "High cash payment"
    rule = "Amount paid in cash above the fixed ceiling"
    severity = Severity.CRITICAL

    def evaluate(self, ctx: RuleContext) -> IndicatorResult:
        cash = ctx.profile.cash_payment
        if cash is None:
            return self.not_applicable("No cash payment amount provided")
        ceiling = ctx.thresholds.cash_payment_ceiling
        if ceiling is None:
            return self.result(
                triggered=False,
                status=RuleStatus.NO_THRESHOLD,
                value=cash,
                explanation="No cash payment ceiling defined",
            )
        triggered = cash > ceiling
        sign = ">" if triggered else "<="
        return self.result(
            triggered=triggered,
            status=RuleStatus.EVALUATED,
            value=cash,
            threshold=ceiling,
            explanation=(
                f"Cash {fmt_amount(cash)} {sign} ceiling {fmt_amount(ceiling)}: "
                f"{'ALERT' if triggered else 'OK'}"
            ),
        )
