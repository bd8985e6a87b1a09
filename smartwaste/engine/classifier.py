"""
smartwaste.engine.classifier — Rule-Based Waste Classifier
============================================================

Keyword matching on a free-text description plus an eco-score computed
from reported quantities.  Stateless and side-effect free.

Keyword groups are checked in priority order — plastic, organic,
electronic — and the first group with a substring hit wins.  Text with no
hit falls back to ``other``.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any

from smartwaste.constants import ECO_PENALTIES, ECO_SCORE_BASE, HIGH_WASTE_THRESHOLD
from smartwaste.engine.scoring import Quantities, round_half_up

# Priority order matters: "botol plastik" must not fall through to organic.
KEYWORD_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("plastic", ("plast", "botol", "kemasan")),
    ("organic", ("organ", "sisa", "makanan")),
    ("electronic", ("elect", "baterai", "hp")),
)

DEFAULT_CATEGORY = "other"

RECOMMENDATIONS: dict[str, str] = {
    "plastic": (
        "Kurangi penggunaan plastik sekali pakai. Gunakan tas belanja sendiri "
        "dan botol minum yang bisa dipakai ulang."
    ),
    "organic": (
        "Sampah organik bisa dijadikan kompos. Pisahkan dari sampah lain dan "
        "olah menjadi pupuk."
    ),
    "electronic": (
        "Sampah elektronik harus dibuang ke tempat khusus. Jangan campur "
        "dengan sampah biasa."
    ),
    "other": "Usahakan untuk memilah sampah dengan benar",
}

SUGGESTION_HIGH = "Coba kurangi timbulan sampah minggu depan"
SUGGESTION_OK = "Good job! Timbulan sampah terkendali"


@dataclass(frozen=True, slots=True)
class Classification:
    category: str
    recommendation: str
    eco_score: int
    suggestion: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def detect_category(text: str | None) -> str:
    """Return the first keyword group matched by *text* (case-insensitive)."""
    lowered = (text or "").lower()
    for category, keywords in KEYWORD_GROUPS:
        if any(kw in lowered for kw in keywords):
            return category
    return DEFAULT_CATEGORY


def eco_score(quantities: Quantities) -> int:
    """Penalty score clamped to ``[0, 100]``; independent of the detected category."""
    score = ECO_SCORE_BASE - sum(qty * ECO_PENALTIES[cat] for cat, qty in quantities.items())
    if math.isnan(score):
        return 0
    return round_half_up(min(float(ECO_SCORE_BASE), max(0.0, score)))


def classify(
    text: str | None = "",
    quantities: Quantities | dict[str, Any] | None = None,
) -> Classification:
    """Classify a waste description and score the reported quantities."""
    if not isinstance(quantities, Quantities):
        quantities = Quantities.from_mapping(quantities)

    category = detect_category(text)
    return Classification(
        category=category,
        recommendation=RECOMMENDATIONS[category],
        eco_score=eco_score(quantities),
        suggestion=SUGGESTION_HIGH if quantities.total > HIGH_WASTE_THRESHOLD else SUGGESTION_OK,
    )
