"""Boolean indicators: the profile flag alone decides the alert."""

from __future__ import annotations

from aml_indicators.rules.base import BaseIndicator, RuleContext
from aml_indicators.schemas import IndicatorResult, RuleStatus, Severity


class FlagIndicator(BaseIndicator):
    """Triggers when `flag_field` is set on the profile. No threshold applies."""

    flag_field: str = ""
    alert_text: str = ""
    ok_text: str = ""

    def evaluate(self, ctx: RuleContext) -> IndicatorResult:
        flagged = bool(getattr(ctx.profile, self.flag_field, False))
        return self.result(
            triggered=flagged,
            status=RuleStatus.EVALUATED,
            value=flagged,
            explanation=f"{self.alert_text}: ALERT" if flagged else f"{self.ok_text}: OK",
        )


class WatchlistCountryIndicator(FlagIndicator):
    indicator_id = 1
    code = "watchlist_country"
    label = "FATF watchlist jurisdiction"
    rule = "Client is a national or resident of a country on the FATF watchlist"
    severity = Severity.CRITICAL
    flag_field = "watchlist_country"
    alert_text = "Client linked to a watchlisted jurisdiction"
    ok_text = "No watchlisted jurisdiction"


class EarlyRedemptionIndicator(FlagIndicator):
    indicator_id = 6
    code = "early_redemption"
    label = "Early redemption (< 90 days)"
    rule = "Total or partial redemption requested less than 90 days after subscription"
    severity = Severity.CRITICAL
    flag_field = "early_redemption"
    alert_text = "Redemption requested within 90 days of subscription"
    ok_text = "No redemption within 90 days"


class BeneficiaryChangeIndicator(FlagIndicator):
    indicator_id = 7
    code = "frequent_beneficiary_change"
    label = "Frequent beneficiary change"
    rule = "3 or more beneficiary changes during the life of the contract"
    severity = Severity.MEDIUM
    flag_field = "frequent_beneficiary_change"
    alert_text = "Beneficiary changed 3 or more times"
    ok_text = "Beneficiary stable"


class MultipleSubscriptionsIndicator(FlagIndicator):
    indicator_id = 9
    code = "multiple_subscriptions"
    label = "Multiple subscriptions in a short period"
    rule = "3 or more life or capitalisation contracts in force subscribed within 3 years"
    severity = Severity.MEDIUM
    flag_field = "multiple_subscriptions"
    alert_text = "3 or more active contracts subscribed within 3 years"
    ok_text = "No subscription clustering"
