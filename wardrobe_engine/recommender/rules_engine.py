"""Hard rules a partial combination must satisfy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from wardrobe_engine.catalog.models import Combination


@dataclass(frozen=True)
class OutfitRule:
    """Represents a single business rule constraint."""

    name: str
    description: str

    def is_satisfied(self, combination: Combination) -> bool:
        """Evaluate the rule for the provided combination."""

        raise NotImplementedError


@dataclass(frozen=True)
class NoShortsWithBootsRule(OutfitRule):
    """Shorts and boots are never worn together."""

    name: str = "no_shorts_with_boots"
    description: str = "Shorts cannot be paired with boots."

    def is_satisfied(self, combination: Combination) -> bool:
        pants, shoes = combination.pants, combination.shoes
        if pants is None or shoes is None:
            return True
        return not (
            "shorts" in (pants.name or "").lower()
            and "boots" in (shoes.name or "").lower()
        )


@dataclass(frozen=True)
class CompleteIdentityRule(OutfitRule):
    """Every selected garment needs an id, a name and a category."""

    name: str = "complete_identity"
    description: str = "Selected garments must carry id, name and category."

    def is_satisfied(self, combination: Combination) -> bool:
        return all(
            garment.id and garment.name and garment.category
            for _, garment in combination.items()
        )


DEFAULT_RULES: tuple[OutfitRule, ...] = (NoShortsWithBootsRule(), CompleteIdentityRule())


class RulesEngine:
    """Evaluates a collection of outfit rules."""

    def __init__(self, rules: Iterable[OutfitRule] = DEFAULT_RULES) -> None:
        self._rules = list(rules)

    def evaluate(self, combination: Combination) -> list[str]:
        """Return names of rules that failed validation."""

        failed: list[str] = []
        for rule in self._rules:
            if not rule.is_satisfied(combination):
                failed.append(rule.name)
        return failed
