"""Base indicator interface and evaluation context."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from aml_indicators.schemas import (
    ClientProfile,
    IndicatorResult,
    OperationType,
    RiskGroup,
    RiskLevel,
    RuleStatus,
    Severity,
)
from aml_indicators.thresholds import ThresholdTable

CURRENCY = "DT"


def fmt_amount(amount: float) -> str:
    """150000.0 -> '150 000 DT'; decimals kept only when present."""
    s = f"{amount:,.2f}".replace(",", " ")
    if s.endswith(".00"):
        s = s[:-3]
    return f"{s} {CURRENCY}"


def fmt_ratio(ratio: float) -> str:
    return f"x{ratio:g}"


@dataclass(frozen=True)
class RuleContext:
    """Context passed to indicators: the profile plus its derived group and the active table."""

    profile: ClientProfile
    group: RiskGroup
    thresholds: ThresholdTable

    @property
    def level(self) -> RiskLevel | None:
        return self.profile.risk_level

    @property
    def operation(self) -> OperationType | None:
        return self.profile.operation_type

    def describe_segment(self) -> str:
        level = self.level.value if self.level else "missing"
        return f"group {self.group.value}, level {level}"


class BaseIndicator(ABC):
    """Base class for catalogue indicators. Each evaluation returns exactly one result."""

    indicator_id: int = 0
    code: str = "base"
    label: str = ""
    rule: str = ""
    severity: Severity = Severity.LOW

    def result(
        self,
        *,
        triggered: bool,
        status: RuleStatus,
        explanation: str,
        value: bool | float | None = None,
        threshold: float | None = None,
    ) -> IndicatorResult:
        return IndicatorResult(
            id=self.indicator_id,
            code=self.code,
            label=self.label,
            rule=self.rule,
            triggered=triggered,
            severity=self.severity,
            status=status,
            value=value,
            threshold=threshold,
            explanation=explanation,
        )

    def not_applicable(self, explanation: str, value: bool | float | None = None) -> IndicatorResult:
        return self.result(
            triggered=False,
            status=RuleStatus.NOT_APPLICABLE,
            explanation=explanation,
            value=value,
        )

    @abstractmethod
    def evaluate(self, ctx: RuleContext) -> IndicatorResult:
        """Evaluate the indicator; never raises for a valid ClientProfile."""
        ...
