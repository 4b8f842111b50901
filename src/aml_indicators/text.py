"""Text folding shared by the classifier and enum parsing."""

from __future__ import annotations

import unicodedata


def fold_text(value: str | None) -> str:
    """Lowercase and strip diacritics (NFD, drop combining marks)."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value.lower())
    return "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
