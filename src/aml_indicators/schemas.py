"""Pydantic v2 schemas: enums, client profile, indicator results and API bodies."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from aml_indicators.text import fold_text


# --- Enums ---
class RiskGroup(str, Enum):
    """Occupation-derived client segment used to select thresholds."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    RETIRED = "retired"


class RiskLevel(str, Enum):
    """Relationship risk level: standard ("!=") or enhanced relationship ("RE")."""

    STANDARD = "standard"
    ENHANCED = "enhanced"

    @classmethod
    def parse(cls, value: Any) -> RiskLevel | None:
        """Return the level for a value or source token, None when unrecognized."""
        if isinstance(value, RiskLevel):
            return value
        if not isinstance(value, str):
            return None
        return _RISK_LEVEL_TOKENS.get(fold_text(value.strip()))


_RISK_LEVEL_TOKENS: dict[str, RiskLevel] = {
    "standard": RiskLevel.STANDARD,
    "!=": RiskLevel.STANDARD,
    "!= re": RiskLevel.STANDARD,
    "normal": RiskLevel.STANDARD,
    "enhanced": RiskLevel.ENHANCED,
    "re": RiskLevel.ENHANCED,
}


class OperationType(str, Enum):
    """Contract operation the profile describes; gates amount-based indicators."""

    SUBSCRIPTION = "subscription"
    REDEMPTION = "redemption"
    CAPITAL_INCREASE = "capital_increase"
    PREMIUM_PAYMENT = "premium_payment"
    CASH_PAYMENT = "cash_payment"

    @classmethod
    def parse(cls, value: Any) -> OperationType | None:
        """Return the operation for a value or French source token, None when unrecognized."""
        if isinstance(value, OperationType):
            return value
        if not isinstance(value, str):
            return None
        return _OPERATION_TOKENS.get(fold_text(value.strip()).replace("-", "_").replace(" ", "_"))


_OPERATION_TOKENS: dict[str, OperationType] = {
    **{op.value: op for op in OperationType},
    "surrender": OperationType.REDEMPTION,
    "souscription": OperationType.SUBSCRIPTION,
    "rachat": OperationType.REDEMPTION,
    "augmentation": OperationType.CAPITAL_INCREASE,
    "augmentation_capital": OperationType.CAPITAL_INCREASE,
    "prime": OperationType.PREMIUM_PAYMENT,
    "versement_prime": OperationType.PREMIUM_PAYMENT,
    "especes": OperationType.CASH_PAYMENT,
    "paiement_especes": OperationType.CASH_PAYMENT,
}


class Severity(str, Enum):
    """Indicator severity, ordered low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class RuleStatus(str, Enum):
    """How an indicator was resolved for a profile."""

    EVALUATED = "evaluated"
    NOT_APPLICABLE = "not_applicable"
    NO_THRESHOLD = "no_threshold"


VERDICT_OK = "ok"

TRUTHY_TOKENS = frozenset({"1", "true", "yes", "y", "oui", "o", "x", "vrai", "on"})
FALSY_TOKENS = frozenset({"", "0", "false", "no", "n", "non", "faux", "off", "none", "null"})


# --- Engine input ---
class ClientProfile(BaseModel):
    """Client/transaction profile evaluated by the engine (one contract operation).

    Field names accept the snake_case names below and the camelCase names used by
    the originating monitoring front-end (``activite``, ``niveauRisque``, ...), so
    exports from that tool evaluate without remapping.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    client_ref: str | None = Field(None, validation_alias=AliasChoices("client_ref", "id"))
    occupation: str | None = Field(None, validation_alias=AliasChoices("occupation", "activite"))
    risk_level: RiskLevel | None = Field(
        None, validation_alias=AliasChoices("risk_level", "niveauRisque")
    )
    operation_type: OperationType | None = Field(
        None, validation_alias=AliasChoices("operation_type", "typeOperation")
    )
    insured_capital: float | None = Field(
        None, ge=0, validation_alias=AliasChoices("insured_capital", "capitalAssure")
    )
    premium: float | None = Field(None, ge=0, validation_alias=AliasChoices("premium", "prime"))
    redemption_value: float | None = Field(
        None, ge=0, validation_alias=AliasChoices("redemption_value", "valeurRachat")
    )
    capital_increase_ratio: float | None = Field(
        None, ge=0, validation_alias=AliasChoices("capital_increase_ratio", "augmentationCapital")
    )
    cash_payment: float | None = Field(
        None, ge=0, validation_alias=AliasChoices("cash_payment", "paiementEspeces")
    )
    watchlist_country: bool = Field(
        False, validation_alias=AliasChoices("watchlist_country", "paysGafi")
    )
    early_redemption: bool = Field(
        False, validation_alias=AliasChoices("early_redemption", "rachatMoins90j")
    )
    frequent_beneficiary_change: bool = Field(
        False,
        validation_alias=AliasChoices("frequent_beneficiary_change", "changementBeneficiaire"),
    )
    inconsistent_product_capital: bool = Field(
        False, validation_alias=AliasChoices("inconsistent_product_capital", "baytIIcoherent")
    )
    multiple_subscriptions: bool = Field(
        False, validation_alias=AliasChoices("multiple_subscriptions", "souscriptionsMultiples")
    )

    @field_validator("client_ref", mode="before")
    @classmethod
    def ref_to_str(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("risk_level", mode="before")
    @classmethod
    def coerce_risk_level(cls, v: Any) -> RiskLevel | None:
        return RiskLevel.parse(v)

    @field_validator("operation_type", mode="before")
    @classmethod
    def coerce_operation_type(cls, v: Any) -> OperationType | None:
        return OperationType.parse(v)

    @field_validator(
        "insured_capital",
        "premium",
        "redemption_value",
        "capital_increase_ratio",
        "cash_payment",
        mode="before",
    )
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        """Blank cells become None; French formatting ("150 000", "1,25") is accepted."""
        if isinstance(v, str):
            s = v.strip().replace(" ", "").replace("\u00a0", "").replace("\u202f", "")
            s = s.removesuffix("DT").removesuffix("dt").strip()
            if not s:
                return None
            return s.replace(",", ".")
        return v

    @field_validator(
        "watchlist_country",
        "early_redemption",
        "frequent_beneficiary_change",
        "inconsistent_product_capital",
        "multiple_subscriptions",
        mode="before",
    )
    @classmethod
    def parse_flag(cls, v: Any) -> Any:
        if v is None:
            return False
        if isinstance(v, str):
            token = fold_text(v.strip())
            if token in TRUTHY_TOKENS:
                return True
            if token in FALSY_TOKENS:
                return False
        return v


# --- Engine output ---
class IndicatorResult(BaseModel):
    """Outcome of one indicator for one profile. Flat and JSON-serializable."""

    model_config = ConfigDict(frozen=True)

    id: int
    code: str
    label: str
    rule: str
    triggered: bool
    severity: Severity
    status: RuleStatus
    value: bool | float | None = None
    threshold: float | None = None
    explanation: str


class EvaluationReport(BaseModel):
    """All indicator results for one profile, in catalogue order."""

    model_config = ConfigDict(frozen=True)

    client_ref: str | None = None
    risk_group: RiskGroup
    risk_level: RiskLevel | None
    operation_type: OperationType | None
    triggered: bool
    triggered_count: int
    verdict: str
    thresholds_version: str
    rules_version: str
    results: tuple[IndicatorResult, ...]

    def triggered_results(self) -> list[IndicatorResult]:
        return [r for r in self.results if r.triggered]


class PortfolioSummary(BaseModel):
    """Counts over a batch of evaluation reports."""

    profiles: int
    triggered_profiles: int
    by_verdict: dict[str, int]
    by_indicator: dict[str, int]


# --- API bodies ---
class ClassifyRequest(BaseModel):
    occupation: str | None = None


class ClassifyResponse(BaseModel):
    occupation: str | None
    risk_group: RiskGroup


class BatchEvaluateRequest(BaseModel):
    """Request body for /evaluate/batch."""

    profiles: list[ClientProfile]


class BatchEvaluateResponse(BaseModel):
    summary: PortfolioSummary
    reports: list[EvaluationReport]
