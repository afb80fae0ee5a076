"""Ranked, cached lookups over the curated combinations of a catalog."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from wardrobe_engine.catalog.models import (
    Catalog,
    Category,
    Combination,
    CombinationSource,
    Garment,
    ScoredCombination,
    TuckStyle,
)
from wardrobe_engine.config.settings import get_settings
from wardrobe_engine.metrics.prometheus_exporter import record_cache_event, record_rebuild
from wardrobe_engine.recommender.duplicates import DuplicateReport, find_duplicates
from wardrobe_engine.recommender.rules_engine import RulesEngine
from wardrobe_engine.recommender.scorer import score_combination

logger = logging.getLogger(__name__)

PartialCombination = Combination | Mapping[Any, Any]
PartialKey = tuple[tuple[str, str], ...]


@dataclass(slots=True)
class LookupCache:
    """Per-index memo of lookup results. Entries are never evicted."""

    compatible_items: dict[tuple[str, PartialKey], tuple[Garment, ...]] = field(default_factory=dict)
    filtered: dict[PartialKey, tuple[ScoredCombination, ...]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class OutfitIndex:
    """Scored curated combinations for one catalog snapshot, best first."""

    catalog: Catalog | None
    entries: tuple[ScoredCombination, ...]
    cache: LookupCache = field(default_factory=LookupCache)


def resolve_combination(
    catalog: Catalog,
    curated_ids: Sequence[str],
    tuck: TuckStyle | None,
) -> tuple[Combination, list[str]]:
    """Place each referenced garment in its slot; return the combination and unresolved ids."""

    slots: dict[str, Garment] = {}
    missing: list[str] = []
    for item_id in curated_ids:
        garment = catalog.get_item(item_id)
        if garment is None:
            missing.append(item_id)
            continue
        try:
            slot = Category.parse(garment.category)
        except ValueError:
            missing.append(item_id)
            continue
        slots[slot.key] = garment
    return Combination(tuck=tuck, **slots), missing


def build_index(catalog: Catalog | None) -> OutfitIndex:
    """Resolve, score and rank every curated combination in ``catalog``."""

    if catalog is None:
        record_rebuild(0, 0)
        return OutfitIndex(catalog=None, entries=())

    scored: list[ScoredCombination] = []
    unresolved = 0
    for curated in catalog.combinations:
        combination, missing = resolve_combination(catalog, curated.item_ids, curated.tuck)
        for item_id in missing:
            logger.warning("Item not found: %s (curated combination %s)", item_id, curated.id)
        unresolved += len(missing)
        scored.append(
            ScoredCombination(
                id=curated.id,
                combination=combination,
                breakdown=score_combination(combination),
                source=CombinationSource.CURATED,
                favorited=curated.favorited,
            )
        )

    # sorted() is stable, so equal scores keep catalog order.
    ranked = tuple(sorted(scored, key=lambda entry: entry.score, reverse=True))
    record_rebuild(len(ranked), unresolved)
    logger.info("Outfit index built: %d combinations, %d unresolved references", len(ranked), unresolved)
    return OutfitIndex(catalog=catalog, entries=ranked)


def coerce_partial(partial: PartialCombination) -> Combination:
    """Accept a ``Combination`` or a host mapping; raise ``ValueError`` otherwise."""

    if isinstance(partial, Combination):
        return partial
    if isinstance(partial, ScoredCombination):
        return partial.combination
    return Combination.from_mapping(partial)


def normalized_partial_key(partial: Combination) -> PartialKey:
    """
    Order-independent cache key built from the filled slots; the tuck flag is ignored.

    Garment ids are opaque strings, so the key keeps ``(slot key, id)`` pairs
    as tuples instead of joining them into one string.
    """

    return tuple(sorted((category.key, garment.id) for category, garment in partial.items()))


def matches_partial(entry: ScoredCombination, partial: Combination) -> bool:
    """True when every filled slot of ``partial`` holds the same garment in ``entry``."""

    for category, garment in partial.items():
        candidate = entry.get(category)
        if candidate is None or candidate.id != garment.id:
            return False
    return True


class CompatibilityEngine:
    """
    Query layer over a catalog's curated combinations.

    The index and its caches live in a single ``OutfitIndex`` object. Rebuilding
    creates a new one and swaps the reference, so a reader always sees either
    the previous snapshot or the next one. Lookups never raise; failures are
    logged and surface as empty results.
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        *,
        rules_engine: RulesEngine | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._rules_engine = rules_engine or RulesEngine()
        self._rng = rng or random.Random()
        self._index = build_index(catalog)

    @property
    def catalog(self) -> Catalog | None:
        return self._index.catalog

    def rebuild(self, catalog: Catalog | None) -> None:
        """Rebuild the index (and drop all cached lookups) for ``catalog``."""

        self._index = build_index(catalog)

    def set_catalog(self, catalog: Catalog | None) -> bool:
        """Rebuild only when the catalog reference changed. Returns whether it did."""

        if catalog is self._index.catalog:
            return False
        self.rebuild(catalog)
        return True

    def score(self, combination: PartialCombination) -> int:
        """Return the 0-100 score of an arbitrary combination."""

        return score_combination(coerce_partial(combination)).percentage

    def get_all(self) -> list[ScoredCombination]:
        return list(self._index.entries)

    def get_random(self) -> ScoredCombination | None:
        entries = self._index.entries
        if not entries:
            return None
        return self._rng.choice(entries)

    def get_for_anchor(self, category: Category | str, garment: Garment | None) -> list[ScoredCombination]:
        """Curated combinations whose ``category`` slot holds ``garment``."""

        try:
            slot = Category.parse(category)
            if garment is None:
                return []
            anchored: list[ScoredCombination] = []
            for entry in self._index.entries:
                candidate = entry.get(slot)
                if candidate is not None and candidate.id == garment.id:
                    anchored.append(entry)
            return anchored
        except Exception:
            logger.exception("Error in get_for_anchor for %r", category)
            return []

    def get_compatible_items(self, category: Category | str, partial: PartialCombination) -> list[Garment]:
        """
        Distinct garments seen in ``category`` across combinations consistent with ``partial``.

        Results keep first-seen index order and are cached per snapshot.
        """

        try:
            slot = Category.parse(category)
            selection = coerce_partial(partial)
            index = self._index
            cache_key = (slot.key, normalized_partial_key(selection))

            cached = index.cache.compatible_items.get(cache_key)
            if cached is not None:
                record_cache_event("compatible_items", hit=True)
                return list(cached)
            record_cache_event("compatible_items", hit=False)

            seen: set[str] = set()
            compatible: list[Garment] = []
            for entry in index.entries:
                if not matches_partial(entry, selection):
                    continue
                garment = entry.get(slot)
                if garment is None or not garment.id or not garment.name or garment.id in seen:
                    continue
                seen.add(garment.id)
                compatible.append(garment)

            index.cache.compatible_items[cache_key] = tuple(compatible)
            return compatible
        except Exception:
            logger.exception("Error in get_compatible_items for %r", category)
            return []

    def get_filtered(self, partial: PartialCombination) -> list[ScoredCombination]:
        """Curated combinations consistent with ``partial``, best first."""

        try:
            selection = coerce_partial(partial)
            index = self._index
            cache_key = normalized_partial_key(selection)

            cached = index.cache.filtered.get(cache_key)
            if cached is not None:
                record_cache_event("filtered", hit=True)
                return list(cached)
            record_cache_event("filtered", hit=False)

            filtered = tuple(entry for entry in index.entries if matches_partial(entry, selection))
            index.cache.filtered[cache_key] = filtered
            return list(filtered)
        except Exception:
            logger.exception("Error in get_filtered")
            return []

    def validate_partial(self, partial: PartialCombination) -> bool:
        """False when a hard rule fails or the selection is malformed."""

        try:
            selection = coerce_partial(partial)
        except (TypeError, ValueError) as exc:
            logger.warning("Rejected malformed partial combination: %s", exc)
            return False

        try:
            failed = self._rules_engine.evaluate(selection)
        except Exception:
            logger.exception("Error in validate_partial")
            return False
        if failed:
            logger.debug("Partial combination failed rules: %s", ", ".join(failed))
        return not failed

    def find_duplicates(
        self,
        item_ids: Sequence[str],
        *,
        tuck: TuckStyle | str | None = None,
        threshold: float | None = None,
    ) -> DuplicateReport:
        """Report curated combinations identical or near-identical to ``item_ids``."""

        if threshold is None:
            threshold = get_settings().duplicate_similarity_threshold
        return find_duplicates(item_ids, self._index.entries, tuck=tuck, threshold=threshold)
