"""Exact and near-duplicate detection for combinations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from wardrobe_engine.catalog.models import ScoredCombination, TuckStyle

TUCK_MATCH_BONUS = 0.1


@dataclass(frozen=True, slots=True)
class DuplicateMatch:
    """An existing combination that overlaps with the candidate."""

    id: str
    score: int
    match_type: str
    similarity: float | None = None


@dataclass(frozen=True, slots=True)
class DuplicateReport:
    """Outcome of comparing a candidate against the indexed combinations."""

    threshold: float
    total_existing: int
    exact_matches: tuple[DuplicateMatch, ...] = field(default_factory=tuple)
    similar_matches: tuple[DuplicateMatch, ...] = field(default_factory=tuple)

    @property
    def is_duplicate(self) -> bool:
        return bool(self.exact_matches)

    @property
    def has_similar(self) -> bool:
        return bool(self.similar_matches)


def _tuck_value(tuck: TuckStyle | str | None) -> str | None:
    if tuck is None:
        return None
    return tuck.value if isinstance(tuck, TuckStyle) else str(tuck)


def composition_key(item_ids: Iterable[str], tuck: TuckStyle | str | None = None) -> str:
    """Order-independent identity of a combination, untucked by default."""

    return f"{','.join(sorted(item_ids))}|{_tuck_value(tuck) or TuckStyle.UNTUCKED.value}"


def similarity(
    first: Iterable[str],
    second: Iterable[str],
    first_tuck: TuckStyle | str | None = None,
    second_tuck: TuckStyle | str | None = None,
) -> float:
    """Jaccard similarity of two id sets, nudged up when both share a tuck style."""

    left, right = set(first), set(second)
    union = left | right
    if not union:
        return 0.0
    score = len(left & right) / len(union)
    left_tuck, right_tuck = _tuck_value(first_tuck), _tuck_value(second_tuck)
    if left_tuck and right_tuck and left_tuck == right_tuck:
        score += TUCK_MATCH_BONUS
    return score


def find_duplicates(
    item_ids: Sequence[str],
    existing: Sequence[ScoredCombination],
    *,
    tuck: TuckStyle | str | None = None,
    threshold: float,
) -> DuplicateReport:
    """Compare a candidate combination against existing ones."""

    if not item_ids:
        raise ValueError("item_ids cannot be empty")

    candidate_key = composition_key(item_ids, tuck)
    exact: list[DuplicateMatch] = []
    similar: list[DuplicateMatch] = []

    for entry in existing:
        entry_ids = entry.combination.item_ids()
        if composition_key(entry_ids, entry.combination.tuck) == candidate_key:
            exact.append(DuplicateMatch(id=entry.id, score=entry.score, match_type="exact"))
            continue

        overlap = similarity(item_ids, entry_ids, tuck, entry.combination.tuck)
        if overlap >= threshold:
            similar.append(
                DuplicateMatch(
                    id=entry.id,
                    score=entry.score,
                    match_type="similar",
                    similarity=round(overlap, 2),
                )
            )

    return DuplicateReport(
        threshold=threshold,
        total_existing=len(existing),
        exact_matches=tuple(exact),
        similar_matches=tuple(similar),
    )
