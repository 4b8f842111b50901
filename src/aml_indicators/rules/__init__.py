"""Indicator catalogue: one class per indicator, evaluated in id order."""

from aml_indicators.rules.amount_threshold import (
    AmountThresholdIndicator,
    InsuredCapitalIndicator,
    PremiumIndicator,
    RedemptionIndicator,
)
from aml_indicators.rules.base import BaseIndicator, RuleContext
from aml_indicators.rules.capital_increase import CapitalIncreaseIndicator
from aml_indicators.rules.cash_payment import CashPaymentIndicator
from aml_indicators.rules.flags import (
    BeneficiaryChangeIndicator,
    EarlyRedemptionIndicator,
    FlagIndicator,
    MultipleSubscriptionsIndicator,
    WatchlistCountryIndicator,
)
from aml_indicators.rules.product_capital import ProductCapitalIndicator

CATALOGUE: tuple[type[BaseIndicator], ...] = (
    WatchlistCountryIndicator,
    InsuredCapitalIndicator,
    PremiumIndicator,
    RedemptionIndicator,
    CapitalIncreaseIndicator,
    EarlyRedemptionIndicator,
    BeneficiaryChangeIndicator,
    ProductCapitalIndicator,
    MultipleSubscriptionsIndicator,
    CashPaymentIndicator,
)


def get_catalogue() -> list[BaseIndicator]:
    """Return indicator instances ordered by id (1..N)."""
    return sorted((cls() for cls in CATALOGUE), key=lambda ind: ind.indicator_id)


__all__ = [
    "CATALOGUE",
    "AmountThresholdIndicator",
    "BaseIndicator",
    "BeneficiaryChangeIndicator",
    "CapitalIncreaseIndicator",
    "CashPaymentIndicator",
    "EarlyRedemptionIndicator",
    "FlagIndicator",
    "InsuredCapitalIndicator",
    "MultipleSubscriptionsIndicator",
    "PremiumIndicator",
    "ProductCapitalIndicator",
    "RedemptionIndicator",
    "RuleContext",
    "WatchlistCountryIndicator",
    "get_catalogue",
]
