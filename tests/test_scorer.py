"""Tests for layer-aware outfit scoring."""

from __future__ import annotations

import math
import random

import pytest

from wardrobe_engine.catalog.models import Category, Combination, Garment
from wardrobe_engine.recommender.scorer import (
    CONSISTENCY_WEIGHT,
    FORMALITY_WEIGHT,
    LayerReason,
    calculate_consistency_bonus,
    calculate_layer_aware_formality,
    score_combination,
)


def _garment(item_id: str, category: Category, formality: object = None, name: str | None = None) -> Garment:
    return Garment(id=item_id, name=name or f"Item {item_id}", category=category, formality=formality)  # type: ignore[arg-type]


def _adjustment(combination: Combination, category: Category):
    _, adjustments = calculate_layer_aware_formality(combination)
    return next(adj for adj in adjustments if adj.category is category)


def test_weights_sum_to_one() -> None:
    assert FORMALITY_WEIGHT == 0.93
    assert CONSISTENCY_WEIGHT == 0.07
    assert FORMALITY_WEIGHT + CONSISTENCY_WEIGHT == pytest.approx(1.0)


def test_empty_combination_scores_zero() -> None:
    breakdown = score_combination(Combination())

    assert breakdown.formality_score == 0
    assert breakdown.consistency_bonus == 0
    assert breakdown.total == 0
    assert breakdown.percentage == 0
    assert breakdown.layer_adjustments == ()


def test_perfect_formality_without_layers_scores_hundred() -> None:
    combination = Combination(
        shirt=_garment("s", Category.SHIRT, 10),
        pants=_garment("p", Category.PANTS, 10),
        shoes=_garment("sh", Category.SHOES, 10),
        watch=_garment("w", Category.WATCH, 10),
    )

    breakdown = score_combination(combination)

    assert breakdown.formality_score == 93
    assert breakdown.consistency_bonus == 7
    assert breakdown.total == 100
    assert breakdown.percentage == 100


def test_two_perfect_items_score_hundred() -> None:
    combination = Combination(
        shirt=_garment("s", Category.SHIRT, 10),
        pants=_garment("p", Category.PANTS, 10),
    )

    assert score_combination(combination).total == 100


def test_shirt_is_covered_by_jacket() -> None:
    combination = Combination(
        jacket=_garment("j", Category.JACKET, 8),
        shirt=_garment("s", Category.SHIRT, 7),
        pants=_garment("p", Category.PANTS, 8),
        shoes=_garment("sh", Category.SHOES, 9),
    )

    shirt = _adjustment(combination, Category.SHIRT)
    assert shirt.weight == 0.7
    assert shirt.reason is LayerReason.COVERED
    assert shirt.original_score == 7
    assert shirt.adjusted_score == pytest.approx(4.9)

    breakdown = score_combination(combination)
    assert breakdown.formality_score == 75
    assert breakdown.consistency_bonus == 7
    assert breakdown.total == 82

    uncovered = _adjustment(combination.with_item(Category.JACKET, None), Category.SHIRT)
    assert uncovered.weight == 1.0
    assert uncovered.reason is LayerReason.VISIBLE


def test_undershirt_visible_when_worn_alone() -> None:
    combination = Combination(
        undershirt=_garment("u", Category.UNDERSHIRT, 1),
        pants=_garment("p", Category.PANTS, 8),
        shoes=_garment("sh", Category.SHOES, 9),
    )

    _, adjustments = calculate_layer_aware_formality(combination)
    undershirt = _adjustment(combination, Category.UNDERSHIRT)

    assert len(adjustments) == 3
    assert undershirt.weight == 1.0
    assert undershirt.reason is LayerReason.VISIBLE
    assert undershirt.adjusted_score == 1


@pytest.mark.parametrize("cover", [Category.SHIRT, Category.JACKET])
def test_undershirt_covered_by_shirt_or_jacket(cover: Category) -> None:
    combination = Combination(undershirt=_garment("u1", Category.UNDERSHIRT, 1, name="Basic Undershirt"))
    combination = combination.with_item(cover, _garment("c", cover, 7))

    undershirt = _adjustment(combination, Category.UNDERSHIRT)

    assert undershirt.item_id == "u1"
    assert undershirt.item_name == "Basic Undershirt"
    assert undershirt.weight == 0.3
    assert undershirt.reason is LayerReason.COVERED
    assert undershirt.adjusted_score == pytest.approx(0.3)


def test_accessories_use_accessory_weight() -> None:
    combination = Combination(
        shirt=_garment("s", Category.SHIRT, 7),
        pants=_garment("p", Category.PANTS, 8),
        shoes=_garment("sh", Category.SHOES, 9),
        belt=_garment("b", Category.BELT, 7),
        watch=_garment("w", Category.WATCH, 8),
    )

    belt = _adjustment(combination, Category.BELT)
    watch = _adjustment(combination, Category.WATCH)

    assert (belt.weight, belt.reason) == (0.8, LayerReason.ACCESSORY)
    assert belt.adjusted_score == pytest.approx(5.6)
    assert (watch.weight, watch.reason) == (0.8, LayerReason.ACCESSORY)
    assert watch.adjusted_score == pytest.approx(6.4)


def test_full_layered_outfit() -> None:
    combination = Combination(
        jacket=_garment("j", Category.JACKET, 8),
        shirt=_garment("s", Category.SHIRT, 7),
        pants=_garment("p", Category.PANTS, 8),
        shoes=_garment("sh", Category.SHOES, 9),
        belt=_garment("b", Category.BELT, 7),
        watch=_garment("w", Category.WATCH, 8),
    )

    breakdown = score_combination(combination)

    assert breakdown.formality_score == 74
    assert breakdown.consistency_bonus == 7
    assert breakdown.total == 81
    assert len(breakdown.layer_adjustments) == 6
    assert breakdown.formality_weight == 0.93
    assert breakdown.consistency_weight == 0.07


def test_weighted_average_across_layers() -> None:
    combination = Combination(
        jacket=_garment("j", Category.JACKET, 10),
        shirt=_garment("s", Category.SHIRT, 8),
        undershirt=_garment("u", Category.UNDERSHIRT, 2),
        pants=_garment("p", Category.PANTS, 6),
    )

    score, adjustments = calculate_layer_aware_formality(combination)

    # (10 + 5.6 + 0.6 + 6) / 3.0 = 7.4 -> 68.82
    assert score == 69
    assert [adj.weight for adj in adjustments] == [1.0, 0.7, 0.3, 1.0]


def test_adjustments_follow_layer_order() -> None:
    combination = Combination.from_mapping(
        {
            "watch": _garment("w", Category.WATCH, 5),
            "pants": _garment("p", Category.PANTS, 5),
            "Jacket/Overshirt": _garment("j", Category.JACKET, 5),
            "undershirt": _garment("u", Category.UNDERSHIRT, 5),
        }
    )

    _, adjustments = calculate_layer_aware_formality(combination)

    assert [adj.category for adj in adjustments] == [
        Category.JACKET,
        Category.UNDERSHIRT,
        Category.PANTS,
        Category.WATCH,
    ]


@pytest.mark.parametrize("bad_value", [None, 0, 11, "7", True, math.nan, -3])
def test_unscorable_formality_is_skipped(bad_value: object) -> None:
    combination = Combination(
        shirt=_garment("s", Category.SHIRT, bad_value),
        pants=_garment("p", Category.PANTS, 8),
    )

    breakdown = score_combination(combination)

    assert [adj.category for adj in breakdown.layer_adjustments] == [Category.PANTS]
    assert breakdown.formality_score == 74
    assert breakdown.consistency_bonus == 0
    assert breakdown.total == 74


def test_only_unscorable_items_score_zero() -> None:
    combination = Combination(shirt=_garment("s", Category.SHIRT), pants=_garment("p", Category.PANTS))

    breakdown = score_combination(combination)

    assert breakdown.total == 0
    assert breakdown.layer_adjustments == ()


def test_casual_outfit() -> None:
    combination = Combination(
        shirt=_garment("s", Category.SHIRT, 2),
        pants=_garment("p", Category.PANTS, 3),
        shoes=_garment("sh", Category.SHOES, 1),
    )

    breakdown = score_combination(combination)

    assert breakdown.formality_score == 19
    assert breakdown.consistency_bonus == 7
    assert breakdown.total == 26


def test_consistency_bonus_drops_for_mixed_formality() -> None:
    combination = Combination(
        jacket=_garment("j", Category.JACKET, 1),
        shirt=_garment("s", Category.SHIRT, 10),
        pants=_garment("p", Category.PANTS, 1),
        shoes=_garment("sh", Category.SHOES, 10),
    )

    # variance 20.25 -> (1 - 0.81) * 7 = 1.33
    assert calculate_consistency_bonus(combination) == 1


def test_consistency_bonus_needs_two_items() -> None:
    assert calculate_consistency_bonus(Combination(shirt=_garment("s", Category.SHIRT, 7))) == 0


def test_tuck_flag_does_not_change_score() -> None:
    base = Combination(shirt=_garment("s", Category.SHIRT, 6), pants=_garment("p", Category.PANTS, 7))
    tucked = Combination.from_mapping({"shirt": base.shirt, "pants": base.pants, "tuck": "Tucked"})

    assert score_combination(base) == score_combination(tucked)


def test_scoring_is_deterministic() -> None:
    combination = Combination(
        jacket=_garment("j", Category.JACKET, 9),
        undershirt=_garment("u", Category.UNDERSHIRT, 3),
        shoes=_garment("sh", Category.SHOES, 5),
        belt=_garment("b", Category.BELT, 6),
    )

    assert score_combination(combination) == score_combination(combination)


def test_bounds_hold_for_random_combinations() -> None:
    rng = random.Random(1234)
    for _ in range(300):
        combination = Combination()
        for category in Category:
            if rng.random() < 0.6:
                combination = combination.with_item(category, _garment(category.key, category, rng.randint(1, 10)))

        breakdown = score_combination(combination)

        assert 0 <= breakdown.formality_score <= 93
        assert 0 <= breakdown.consistency_bonus <= 7
        assert breakdown.formality_score + breakdown.consistency_bonus == breakdown.total
        assert 0 <= breakdown.total <= 100
        assert breakdown.percentage == breakdown.total
        assert len(breakdown.layer_adjustments) == len(list(combination.items()))
