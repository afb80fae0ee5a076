"""Outfit scoring and compatibility lookups over a curated wardrobe catalog."""

from wardrobe_engine.catalog.models import (
    Category,
    Combination,
    CuratedCombination,
    Garment,
    ScoredCombination,
    TuckStyle,
)
from wardrobe_engine.recommender.compatibility import CompatibilityEngine
from wardrobe_engine.recommender.scorer import ScoreBreakdown, score_combination

__all__ = [
    "Category",
    "Combination",
    "CompatibilityEngine",
    "CuratedCombination",
    "Garment",
    "ScoreBreakdown",
    "ScoredCombination",
    "TuckStyle",
    "score_combination",
]
