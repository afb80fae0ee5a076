"""Shared fixtures: a small wardrobe and its curated combinations."""

from __future__ import annotations

import pytest

from wardrobe_engine.catalog.models import Catalog, Category, CuratedCombination, Garment, TuckStyle
from wardrobe_engine.config.settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings() -> None:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def wardrobe() -> dict[str, Garment]:
    return {
        "J1": Garment(id="J1", name="Navy Blazer", category=Category.JACKET, formality=8),
        "S1": Garment(id="S1", name="Oxford Shirt", category=Category.SHIRT, formality=7),
        "S2": Garment(id="S2", name="Linen Shirt", category=Category.SHIRT, formality=4),
        "U1": Garment(id="U1", name="White Tee", category=Category.UNDERSHIRT, formality=2),
        "P1": Garment(id="P1", name="Grey Trousers", category=Category.PANTS, formality=8),
        "P2": Garment(id="P2", name="Cargo Shorts", category=Category.PANTS, formality=2),
        "SH1": Garment(id="SH1", name="Derby Shoes", category=Category.SHOES, formality=9),
        "SH2": Garment(id="SH2", name="Chelsea Boots", category=Category.SHOES, formality=6),
        "W1": Garment(id="W1", name="Steel Watch", category=Category.WATCH, formality=7),
    }


@pytest.fixture
def catalog(wardrobe: dict[str, Garment]) -> Catalog:
    # Scores: o1=82, o3=72, o2~52, o4=34.
    return Catalog(
        garments=wardrobe,
        combinations=(
            CuratedCombination(id="o1", item_ids=("J1", "S1", "P1", "SH1"), tuck=TuckStyle.TUCKED, favorited=True),
            CuratedCombination(id="o2", item_ids=("S2", "P2", "SH1")),
            CuratedCombination(id="o3", item_ids=("S1", "P1", "SH2")),
            CuratedCombination(id="o4", item_ids=("S2", "U1", "P2", "missing-id")),
        ),
    )
