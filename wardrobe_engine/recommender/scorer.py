"""Layer-aware outfit scoring.

A combination scores out of 100: up to 93 points for its weighted average
formality and up to 7 points for how closely its garments agree on formality.
Covered garments count for less because they are mostly hidden when worn.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from wardrobe_engine.catalog.models import Category, Combination, Garment

FORMALITY_WEIGHT = 0.93
CONSISTENCY_WEIGHT = 0.07

VISIBLE_WEIGHT = 1.0
COVERED_SHIRT_WEIGHT = 0.7
COVERED_UNDERSHIRT_WEIGHT = 0.3
ACCESSORY_WEIGHT = 0.8

# Population variance treated as fully inconsistent. Empirical, not derived.
CONSISTENCY_VARIANCE_CEILING = 25

MIN_FORMALITY = 1
MAX_FORMALITY = 10


class LayerReason(str, Enum):
    """Why a garment received its weight."""

    VISIBLE = "visible"
    COVERED = "covered"
    ACCESSORY = "accessory"


@dataclass(frozen=True, slots=True)
class LayerAdjustment:
    """Per-item record explaining its contribution to the formality score."""

    item_id: str
    item_name: str
    category: Category
    original_score: float
    weight: float
    adjusted_score: float
    reason: LayerReason


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """Full scoring result for one combination."""

    formality_score: int
    consistency_bonus: int
    layer_adjustments: tuple[LayerAdjustment, ...]
    total: int
    percentage: int
    formality_weight: float = FORMALITY_WEIGHT
    consistency_weight: float = CONSISTENCY_WEIGHT


EMPTY_BREAKDOWN = ScoreBreakdown(
    formality_score=0,
    consistency_bonus=0,
    layer_adjustments=(),
    total=0,
    percentage=0,
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scorable_formality(garment: Garment | None) -> float | None:
    """Return the garment's formality if it can be scored, otherwise None."""

    if garment is None:
        return None
    value = getattr(garment, "formality", None)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or not MIN_FORMALITY <= value <= MAX_FORMALITY:
        return None
    return value


def layer_weight(category: Category, combination: Combination) -> tuple[float, LayerReason]:
    """Weight and reason for a garment in ``category`` given what else is worn."""

    if category is Category.SHIRT and combination.jacket is not None:
        return COVERED_SHIRT_WEIGHT, LayerReason.COVERED
    if category is Category.UNDERSHIRT and (
        combination.shirt is not None or combination.jacket is not None
    ):
        return COVERED_UNDERSHIRT_WEIGHT, LayerReason.COVERED
    if category in (Category.BELT, Category.WATCH):
        return ACCESSORY_WEIGHT, LayerReason.ACCESSORY
    return VISIBLE_WEIGHT, LayerReason.VISIBLE


def calculate_layer_aware_formality(combination: Combination) -> tuple[int, list[LayerAdjustment]]:
    """Return the formality component (0-93) and one adjustment per scored item."""

    weighted_sum = 0.0
    weight_total = 0.0
    adjustments: list[LayerAdjustment] = []

    for category, garment in combination.items():
        formality = scorable_formality(garment)
        if formality is None:
            continue
        weight, reason = layer_weight(category, combination)
        adjusted = formality * weight
        weighted_sum += adjusted
        weight_total += weight
        adjustments.append(
            LayerAdjustment(
                item_id=garment.id,
                item_name=garment.name,
                category=category,
                original_score=formality,
                weight=weight,
                adjusted_score=adjusted,
                reason=reason,
            )
        )

    if weight_total == 0:
        return 0, adjustments

    average = weighted_sum / weight_total
    return _round_half_up((average / 10) * 100 * FORMALITY_WEIGHT), adjustments


def calculate_consistency_bonus(combination: Combination) -> int:
    """Return the consistency component (0-7) from the spread of raw formality values."""

    values: list[float] = []
    for _, garment in combination.items():
        formality = scorable_formality(garment)
        if formality is not None:
            values.append(formality)
    if len(values) < 2:
        return 0

    mean = sum(values) / len(values)
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    ratio = min(1.0, max(0.0, 1 - variance / CONSISTENCY_VARIANCE_CEILING))
    return _round_half_up(ratio * 100 * CONSISTENCY_WEIGHT)


def score_combination(combination: Combination) -> ScoreBreakdown:
    """Score any subset of categories, including the empty combination."""

    formality_score, adjustments = calculate_layer_aware_formality(combination)
    if not adjustments:
        return EMPTY_BREAKDOWN

    consistency_bonus = calculate_consistency_bonus(combination)
    total = formality_score + consistency_bonus
    return ScoreBreakdown(
        formality_score=formality_score,
        consistency_bonus=consistency_bonus,
        layer_adjustments=tuple(adjustments),
        total=total,
        percentage=min(total, 100),
    )
