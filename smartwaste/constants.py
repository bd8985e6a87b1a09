"""
smartwaste.constants — Shared Constants
=========================================

Single source of truth for the waste categories, the daily quantity cap,
and the weights used by scoring and the eco-score.  Import from here
instead of duplicating in services, engine modules, and routes.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Waste categories — order matches the report columns
# ---------------------------------------------------------------------------
CATEGORIES: tuple[str, ...] = ("organic", "plastic", "electronic", "other")

# Max units (kg) per category per report
DAILY_QUANTITY_CAP = 50


# ---------------------------------------------------------------------------
# Scoring weights — organic waste diverts the most from landfill
# ---------------------------------------------------------------------------
POINT_WEIGHTS: dict[str, float] = {
    "organic": 0.5,
    "plastic": 0.2,
    "electronic": 0.1,
    "other": 0.1,
}


# ---------------------------------------------------------------------------
# Eco-score — penalty per unit, subtracted from a perfect 100
# ---------------------------------------------------------------------------
ECO_SCORE_BASE = 100
ECO_PENALTIES: dict[str, float] = {
    "organic": 0.5,
    "plastic": 3,
    "electronic": 5,
    "other": 2,
}

# Total units above which the classifier suggests cutting back
HIGH_WASTE_THRESHOLD = 10
