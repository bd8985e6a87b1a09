"""
smartwaste.engine.scoring — Report Point Calculation
======================================================

Pure calculation; no DB I/O.  Inputs are validated by the caller
(:mod:`smartwaste.services.report_service`) before they reach here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from smartwaste.constants import CATEGORIES, POINT_WEIGHTS

__all__ = ["Quantities", "compute_points", "round_half_up"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 → 3).

    Python's :func:`round` uses banker's rounding, which would score a
    5-unit organic report (2.5) as 2 instead of 3.
    """
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Quantities — per-category amounts of one report
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Quantities:
    """Per-category waste amounts (kg).  Missing categories are zero."""

    organic: float = 0
    plastic: float = 0
    electronic: float = 0
    other: float = 0

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> Quantities:
        """Build from a dict, treating missing or ``None`` fields as zero."""
        data = data or {}
        return cls(**{c: data.get(c) or 0 for c in CATEGORIES})

    def items(self) -> list[tuple[str, float]]:
        return [(c, getattr(self, c)) for c in CATEGORIES]

    @property
    def total(self) -> float:
        return self.organic + self.plastic + self.electronic + self.other


def compute_points(
    organic: float = 0,
    plastic: float = 0,
    electronic: float = 0,
    other: float = 0,
) -> int:
    """Points earned by a report: weighted sum, floored at zero, rounded."""
    raw = (
        organic * POINT_WEIGHTS["organic"]
        + plastic * POINT_WEIGHTS["plastic"]
        + electronic * POINT_WEIGHTS["electronic"]
        + other * POINT_WEIGHTS["other"]
    )
    return round_half_up(max(0.0, raw))
