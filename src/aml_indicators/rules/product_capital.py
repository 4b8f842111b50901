"""Product capital inconsistent with the client profile (housing-savings product)."""

from __future__ import annotations

from aml_indicators.rules.base import BaseIndicator, RuleContext, fmt_amount
from aml_indicators.schemas import IndicatorResult, RuleStatus, Severity


class ProductCapitalIndicator(BaseIndicator):
    """Flag-driven; the group's reference capital is reported for the reviewer.

    The flag alone decides the alert. A missing reference capital is surfaced
    through the status, it does not suppress the alert.
    """

    indicator_id = 8
    code = "inconsistent_product_capital"
    label = "Product capital inconsistent with profile"
    rule = "Capital subscribed on the housing-savings product inconsistent with the client profile"
    severity = Severity.HIGH

    def evaluate(self, ctx: RuleContext) -> IndicatorResult:
        flagged = ctx.profile.inconsistent_product_capital
        reference = ctx.thresholds.reference(ctx.group)
        if reference is None:
            status = RuleStatus.NO_THRESHOLD
            ref_text = f"no reference capital for group {ctx.group.value}"
        else:
            status = RuleStatus.EVALUATED
            ref_text = f"reference capital {fmt_amount(reference)} for group {ctx.group.value}"
        if flagged:
            explanation = f"Capital inconsistent with profile ({ref_text}): ALERT"
        else:
            explanation = f"Capital consistent with profile ({ref_text}): OK"
        return self.result(
            triggered=flagged,
            status=status,
            value=flagged,
            threshold=reference,
            explanation=explanation,
        )
