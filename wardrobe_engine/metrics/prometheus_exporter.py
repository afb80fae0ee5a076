"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge

from wardrobe_engine.config.settings import get_settings


catalog_rebuild_total = Counter(
    "catalog_rebuild_total",
    "Total number of outfit index rebuilds.",
)

indexed_combinations = Gauge(
    "indexed_combinations",
    "Number of scored combinations in the current outfit index.",
)

unresolved_garment_refs_total = Counter(
    "unresolved_garment_refs_total",
    "Curated combination references to garments missing from the catalog.",
)

lookup_cache_events_total = Counter(
    "lookup_cache_events_total",
    "Compatibility lookup cache hits and misses.",
    ["cache", "result"],
)


def record_rebuild(size: int, unresolved: int) -> None:
    """Track a finished index rebuild."""

    if not get_settings().metrics_enabled:
        return
    catalog_rebuild_total.inc()
    indexed_combinations.set(size)
    if unresolved:
        unresolved_garment_refs_total.inc(unresolved)


def record_cache_event(cache: str, hit: bool) -> None:
    """Track a lookup against one of the engine caches."""

    if not get_settings().metrics_enabled:
        return
    lookup_cache_events_total.labels(cache=cache, result="hit" if hit else "miss").inc()
