"""
Schema adaptation: map external column names to ClientProfile fields.
Portfolio exports name their columns in English or in the French of the
originating monitoring tool ("Activité", "niveauRisque", "Capital assuré"...);
the map is inferred from headers unless config provides `batch.column_map`.
"""

from __future__ import annotations

import re
from typing import Any

from aml_indicators.text import fold_text

# For each profile field, possible external header names (normalized: folded, snake_case).
# First match wins when inferring column map.
ALIASES: dict[str, list[str]] = {
    "client_ref": ["client_ref", "client_id", "id", "ref", "reference", "code_client", "numero_client"],
    "occupation": ["occupation", "activite", "profession", "job", "metier", "activity"],
    "risk_level": ["risk_level", "niveau_risque", "niveau_de_risque", "risque", "risk"],
    "operation_type": [
        "operation_type",
        "type_operation",
        "type_d_operation",
        "operation",
        "type",
    ],
    "insured_capital": ["insured_capital", "capital_assure", "capital", "sum_insured"],
    "premium": ["premium", "prime", "prime_versee", "premium_amount"],
    "redemption_value": ["redemption_value", "valeur_rachat", "valeur_de_rachat", "surrender_value"],
    "capital_increase_ratio": [
        "capital_increase_ratio",
        "augmentation_capital",
        "augmentation_de_capital",
        "ratio_augmentation",
        "increase_ratio",
    ],
    "cash_payment": ["cash_payment", "paiement_especes", "especes", "cash", "cash_amount"],
    "watchlist_country": ["watchlist_country", "pays_gafi", "gafi", "fatf", "fatf_country"],
    "early_redemption": ["early_redemption", "rachat_moins90j", "rachat_moins_90j", "rachat_precoce"],
    "frequent_beneficiary_change": [
        "frequent_beneficiary_change",
        "changement_beneficiaire",
        "beneficiary_change",
    ],
    "inconsistent_product_capital": [
        "inconsistent_product_capital",
        "bayt_iicoherent",
        "bayti_incoherent",
        "incoherence_bayti",
        "product_capital_inconsistent",
    ],
    "multiple_subscriptions": [
        "multiple_subscriptions",
        "souscriptions_multiples",
        "multi_souscriptions",
    ],
}

PROFILE_FIELDS = frozenset(ALIASES)


def _normalize_header(h: str) -> str:
    """camelCase -> snake, fold accents, collapse spaces/dots/dashes/apostrophes to '_'."""
    if not h:
        return ""
    s = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", str(h).strip())
    s = fold_text(s)
    s = re.sub(r"[\s.'’()_-]+", "_", s)
    return s.strip("_")


def infer_column_map(
    headers: list[str],
    config_map: dict[str, str] | None = None,
) -> dict[str, str]:
    """
    Build external_column -> profile_field from headers (and optional config override).
    config_map takes precedence: keys are external names (as in file), values are field names.
    """
    if config_map:
        unknown = sorted(set(config_map.values()) - PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"column_map targets unknown profile fields: {unknown}")
        return dict(config_map)

    normalized_to_original: dict[str, str] = {}
    for h in headers:
        if not h:
            continue
        norm = _normalize_header(h)
        if norm and norm not in normalized_to_original:
            normalized_to_original[norm] = h

    result: dict[str, str] = {}
    for field, alias_list in ALIASES.items():
        for alias in alias_list:
            if alias in normalized_to_original:
                external_name = normalized_to_original[alias]
                if external_name not in result:
                    result[external_name] = field
                    break
    return result


def normalize_row(row: dict[str, Any], column_map: dict[str, str]) -> dict[str, Any]:
    """Map a raw row (CSV dict or JSON object) to profile field names; blank cells are dropped."""
    out: dict[str, Any] = {}
    for external_key, field in column_map.items():
        if external_key not in row:
            continue
        val = row[external_key]
        if val is None or (isinstance(val, str) and not val.strip()):
            continue
        out[field] = val.strip() if isinstance(val, str) else val
    return out
