"""Occupation classifier: free-text occupation -> risk group.

Keyword lists are tested in a fixed priority order (retired, low, high) and the
first list with a keyword contained in the folded occupation text wins. Anything
else, including empty text, falls back to the medium group.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache

from aml_indicators.schemas import RiskGroup
from aml_indicators.text import fold_text

RETIRED_KEYWORDS = ("retraité", "retraite")
LOW_KEYWORDS = (
    "élève",
    "etudiant",
    "étudiant",
    "sans profession",
    "travailleur indépendant",
    "travailleur independant",
)
HIGH_KEYWORDS = (
    "pm",
    "chef d'entreprise",
    "chef dentreprise",
    "profession libérale",
    "profession liberale",
)
# Not matched: medium is the fallback. Kept so the catalogue documents the segment.
MEDIUM_KEYWORDS = ("salarié", "salarie", "fonctionnaire")

DEFAULT_KEYWORDS: dict[RiskGroup, tuple[str, ...]] = {
    RiskGroup.RETIRED: RETIRED_KEYWORDS,
    RiskGroup.LOW: LOW_KEYWORDS,
    RiskGroup.HIGH: HIGH_KEYWORDS,
    RiskGroup.MEDIUM: MEDIUM_KEYWORDS,
}

PRIORITY = (RiskGroup.RETIRED, RiskGroup.LOW, RiskGroup.HIGH)


class OccupationClassifier:
    """Classifier over a keyword set; `classify` is total and deterministic."""

    def __init__(self, keywords: Mapping[RiskGroup | str, Iterable[str]] | None = None) -> None:
        source = DEFAULT_KEYWORDS if keywords is None else keywords
        self.keywords: dict[RiskGroup, tuple[str, ...]] = {}
        for group, words in source.items():
            self.keywords[RiskGroup(group)] = tuple(fold_text(w) for w in words if w)
        self._cached = lru_cache(maxsize=4096)(self._classify)

    def _classify(self, folded: str) -> RiskGroup:
        for group in PRIORITY:
            if any(kw in folded for kw in self.keywords.get(group, ())):
                return group
        return RiskGroup.MEDIUM

    def classify(self, occupation: str | None) -> RiskGroup:
        # Typographic apostrophe from word processors: "chef d’entreprise".
        return self._cached(fold_text(occupation).replace("\u2019", "'"))


DEFAULT_CLASSIFIER = OccupationClassifier()


def classify(occupation: str | None) -> RiskGroup:
    """Map an occupation to its risk group using the canonical keyword lists."""
    return DEFAULT_CLASSIFIER.classify(occupation)


def get_classifier(config: dict) -> OccupationClassifier:
    """Classifier for config: `classifier.keywords` replaces the listed groups' keywords."""
    overrides = (config.get("classifier") or {}).get("keywords") or {}
    if not overrides:
        return DEFAULT_CLASSIFIER
    keywords: dict[RiskGroup | str, Iterable[str]] = dict(DEFAULT_KEYWORDS)
    for group, words in overrides.items():
        keywords[RiskGroup(group)] = words
    return OccupationClassifier(keywords)
