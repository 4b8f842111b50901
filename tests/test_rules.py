"""Unit tests for individual indicators."""

import pytest

from aml_indicators.rules import get_catalogue
from aml_indicators.rules.amount_threshold import (
    InsuredCapitalIndicator,
    PremiumIndicator,
    RedemptionIndicator,
)
from aml_indicators.rules.base import RuleContext, fmt_amount
from aml_indicators.rules.capital_increase import CapitalIncreaseIndicator
from aml_indicators.rules.cash_payment import CashPaymentIndicator
from aml_indicators.rules.flags import EarlyRedemptionIndicator, WatchlistCountryIndicator
from aml_indicators.rules.product_capital import ProductCapitalIndicator
from aml_indicators.schemas import ClientProfile, RiskGroup, RuleStatus, Severity
from aml_indicators.thresholds import DEFAULT_THRESHOLDS, ThresholdTable


def _ctx(
    profile: ClientProfile, group: RiskGroup = RiskGroup.MEDIUM, thresholds=None
) -> RuleContext:
    return RuleContext(
        profile=profile,
        group=group,
        thresholds=thresholds if thresholds is not None else DEFAULT_THRESHOLDS,
    )


def test_catalogue_ids_and_severities() -> None:
    catalogue = get_catalogue()
    assert [i.indicator_id for i in catalogue] == list(range(1, 11))
    assert len({i.code for i in catalogue}) == 10
    severities = {i.indicator_id: i.severity for i in catalogue}
    assert severities == {
        1: Severity.CRITICAL,
        2: Severity.HIGH,
        3: Severity.HIGH,
        4: Severity.HIGH,
        5: Severity.HIGH,
        6: Severity.CRITICAL,
        7: Severity.MEDIUM,
        8: Severity.HIGH,
        9: Severity.MEDIUM,
        10: Severity.CRITICAL,
    }


@pytest.mark.parametrize(
    ("capital", "triggered"),
    [(150_000, False), (150_001, True), (149_999.99, False)],
)
def test_insured_capital_strict_boundary(make_profile, capital, triggered) -> None:
    result = InsuredCapitalIndicator().evaluate(_ctx(make_profile(insured_capital=capital)))
    assert result.triggered is triggered
    assert result.status == RuleStatus.EVALUATED
    assert result.threshold == 150_000
    assert result.value == capital


def test_insured_capital_applies_to_capital_increase(make_profile) -> None:
    profile = make_profile(operation_type="capital_increase", insured_capital=200_000)
    result = InsuredCapitalIndicator().evaluate(_ctx(profile))
    assert result.triggered


def test_insured_capital_not_applicable_for_redemption(make_profile) -> None:
    profile = make_profile(operation_type="redemption", insured_capital=10_000_000)
    result = InsuredCapitalIndicator().evaluate(_ctx(profile))
    assert not result.triggered
    assert result.status == RuleStatus.NOT_APPLICABLE
    assert result.threshold is None


def test_premium_applies_to_premium_payment(make_profile) -> None:
    profile = make_profile(operation_type="premium_payment", premium=2_501)
    result = PremiumIndicator().evaluate(_ctx(profile))
    assert result.triggered
    assert result.threshold == 2_500


def test_redemption_uses_group_and_level(make_profile) -> None:
    profile = make_profile(
        operation_type="redemption", risk_level="enhanced", redemption_value=60_000
    )
    at_threshold = RedemptionIndicator().evaluate(_ctx(profile, group=RiskGroup.RETIRED))
    assert not at_threshold.triggered
    assert at_threshold.threshold == 60_000
    above = RedemptionIndicator().evaluate(_ctx(profile, group=RiskGroup.LOW))
    assert above.triggered
    assert above.threshold == 10_000


def test_redemption_gated_out_for_subscription(make_profile) -> None:
    profile = make_profile(operation_type="subscription", redemption_value=99_000_000)
    result = RedemptionIndicator().evaluate(_ctx(profile))
    assert not result.triggered
    assert result.status == RuleStatus.NOT_APPLICABLE


def test_amount_missing_value_not_applicable(make_profile) -> None:
    result = InsuredCapitalIndicator().evaluate(_ctx(make_profile()))
    assert result.status == RuleStatus.NOT_APPLICABLE
    assert not result.triggered


def test_amount_missing_risk_level_is_no_threshold(make_profile) -> None:
    profile = make_profile(risk_level=None, insured_capital=10_000_000)
    result = InsuredCapitalIndicator().evaluate(_ctx(profile))
    assert result.status == RuleStatus.NO_THRESHOLD
    assert result.threshold is None
    assert not result.triggered


def test_amount_absent_table_entry_is_no_threshold(make_profile) -> None:
    table = ThresholdTable(version="partial")
    profile = make_profile(insured_capital=10_000_000)
    result = InsuredCapitalIndicator().evaluate(_ctx(profile, thresholds=table))
    assert result.status == RuleStatus.NO_THRESHOLD
    assert result.value == 10_000_000
    assert "No threshold" in result.explanation


@pytest.mark.parametrize(
    ("level", "ratio", "triggered"),
    [
        ("enhanced", 1.25, True),
        ("enhanced", 1.24999, False),
        ("standard", 2.0, True),
        ("standard", 1.99, False),
    ],
)
def test_capital_increase_inclusive_boundary(make_profile, level, ratio, triggered) -> None:
    profile = make_profile(
        operation_type="capital_increase", risk_level=level, capital_increase_ratio=ratio
    )
    result = CapitalIncreaseIndicator().evaluate(_ctx(profile))
    assert result.triggered is triggered
    assert result.status == RuleStatus.EVALUATED


def test_capital_increase_ratio_same_for_all_groups(make_profile) -> None:
    profile = make_profile(
        operation_type="capital_increase", risk_level="enhanced", capital_increase_ratio=1.25
    )
    for group in RiskGroup:
        assert CapitalIncreaseIndicator().evaluate(_ctx(profile, group=group)).triggered


def test_capital_increase_gated_to_capital_increase(make_profile) -> None:
    profile = make_profile(operation_type="subscription", capital_increase_ratio=5)
    result = CapitalIncreaseIndicator().evaluate(_ctx(profile))
    assert result.status == RuleStatus.NOT_APPLICABLE


def test_flag_indicator() -> None:
    result = WatchlistCountryIndicator().evaluate(_ctx(ClientProfile(watchlist_country=True)))
    assert result.triggered
    assert result.severity == Severity.CRITICAL
    assert result.value is True
    assert result.threshold is None
    quiet = EarlyRedemptionIndicator().evaluate(_ctx(ClientProfile()))
    assert not quiet.triggered
    assert quiet.status == RuleStatus.EVALUATED


def test_product_capital_reports_reference() -> None:
    result = ProductCapitalIndicator().evaluate(
        _ctx(ClientProfile(inconsistent_product_capital=True), group=RiskGroup.HIGH)
    )
    assert result.triggered
    assert result.threshold == 1_000_000
    assert result.status == RuleStatus.EVALUATED


def test_product_capital_flag_still_alerts_without_reference() -> None:
    result = ProductCapitalIndicator().evaluate(
        _ctx(
            ClientProfile(inconsistent_product_capital=True),
            thresholds=ThresholdTable(version="empty"),
        )
    )
    assert result.triggered
    assert result.status == RuleStatus.NO_THRESHOLD
    assert result.threshold is None


@pytest.mark.parametrize(("cash", "triggered"), [(5_000, False), (5_001, True)])
def test_cash_payment_ceiling(cash, triggered) -> None:
    result = CashPaymentIndicator().evaluate(_ctx(ClientProfile(cash_payment=cash)))
    assert result.triggered is triggered
    assert result.threshold == 5_000


def test_cash_payment_missing_amount_not_applicable() -> None:
    result = CashPaymentIndicator().evaluate(_ctx(ClientProfile()))
    assert result.status == RuleStatus.NOT_APPLICABLE


def test_fmt_amount() -> None:
    assert fmt_amount(150_000) == "150 000 DT"
    assert fmt_amount(1234.5) == "1 234.50 DT"
