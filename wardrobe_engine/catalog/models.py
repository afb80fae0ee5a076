"""Domain records for garments, combinations and their scored views."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, Mapping

if TYPE_CHECKING:
    from wardrobe_engine.recommender.scorer import ScoreBreakdown


class Category(str, Enum):
    """Garment slots, declared outermost layer first."""

    JACKET = "Jacket/Overshirt"
    SHIRT = "Shirt"
    UNDERSHIRT = "Undershirt"
    PANTS = "Pants"
    SHOES = "Shoes"
    BELT = "Belt"
    WATCH = "Watch"

    @property
    def key(self) -> str:
        """Internal slot name used on ``Combination``."""

        return self.name.lower()

    @classmethod
    def parse(cls, raw: Any) -> "Category":
        """Accept a member, display name or internal key."""

        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            text = raw.strip()
            for member in cls:
                if text == member.value or text.lower() == member.key:
                    return member
        raise ValueError(f"Unknown garment category: {raw!r}")


class TuckStyle(str, Enum):
    """Shirt styling flag; carried through but never scored or matched."""

    TUCKED = "Tucked"
    UNTUCKED = "Untucked"


class CombinationSource(str, Enum):
    """Where a scored combination came from."""

    CURATED = "curated"


# Mapping keys that describe styling state rather than a garment slot.
FLAG_KEYS = frozenset({"tuck", "locked", "loved"})
_TUCK_VALUES = frozenset(style.value for style in TuckStyle)


@dataclass(frozen=True, slots=True)
class Garment:
    """Catalog entry for a single wardrobe item."""

    id: str
    name: str
    category: Category
    formality: int | None = None
    brand: str | None = None
    color: str | None = None
    material: str | None = None
    image: str | None = None
    capsule_tags: tuple[str, ...] = ()
    season: tuple[str, ...] = ()
    active: bool = True


@dataclass(frozen=True, slots=True)
class Combination:
    """At most one garment per category plus the tuck flag."""

    jacket: Garment | None = None
    shirt: Garment | None = None
    undershirt: Garment | None = None
    pants: Garment | None = None
    shoes: Garment | None = None
    belt: Garment | None = None
    watch: Garment | None = None
    tuck: TuckStyle | None = None

    @classmethod
    def from_mapping(cls, payload: Mapping[Any, Any]) -> "Combination":
        """
        Build a combination from a host mapping.

        Keys may be ``Category`` members, display names or slot keys. Flag keys
        (``tuck``, ``locked``, ``loved``) are dropped except a recognised ``tuck``
        value, which is kept as styling state. Raises ``ValueError`` for unknown
        keys or values that are not garments.
        """

        if not isinstance(payload, Mapping):
            raise ValueError(f"Combination payload must be a mapping, got {type(payload).__name__}")

        slots: dict[str, Garment] = {}
        tuck: TuckStyle | None = None
        for raw_key, value in payload.items():
            if isinstance(raw_key, str) and raw_key in FLAG_KEYS:
                if raw_key == "tuck" and isinstance(value, str) and value in _TUCK_VALUES:
                    tuck = TuckStyle(value)
                continue
            category = Category.parse(raw_key)
            if value is None:
                continue
            if not isinstance(value, Garment):
                raise ValueError(f"Slot {category.key!r} must hold a Garment, got {type(value).__name__}")
            slots[category.key] = value
        return cls(tuck=tuck, **slots)

    def get(self, category: Category) -> Garment | None:
        return getattr(self, category.key)

    def with_item(self, category: Category, garment: Garment | None) -> "Combination":
        """Return a copy with ``category`` filled (or cleared when ``garment`` is None)."""

        return replace(self, **{category.key: garment})

    def items(self) -> Iterator[tuple[Category, Garment]]:
        """Yield present slots in layer order."""

        for category in Category:
            garment = self.get(category)
            if garment is not None:
                yield category, garment

    def item_ids(self) -> list[str]:
        return [garment.id for _, garment in self.items()]

    @property
    def is_empty(self) -> bool:
        return next(self.items(), None) is None

    @property
    def is_full(self) -> bool:
        return all(self.get(category) is not None for category in Category)


@dataclass(frozen=True, slots=True)
class CuratedCombination:
    """Pre-authored combination referencing garments by id."""

    id: str
    item_ids: tuple[str, ...]
    tuck: TuckStyle | None = None
    favorited: bool = False


@dataclass(frozen=True, slots=True)
class ScoredCombination:
    """A resolved combination with its score breakdown."""

    id: str
    combination: Combination
    breakdown: "ScoreBreakdown"
    source: CombinationSource = CombinationSource.CURATED
    favorited: bool = False

    @property
    def score(self) -> int:
        return self.breakdown.percentage

    def get(self, category: Category) -> Garment | None:
        return self.combination.get(category)


@dataclass(frozen=True, slots=True)
class Catalog:
    """Immutable snapshot of garments and curated combinations supplied by the host."""

    garments: Mapping[str, Garment] = field(default_factory=dict)
    combinations: tuple[CuratedCombination, ...] = ()

    def get_item(self, item_id: str) -> Garment | None:
        return self.garments.get(item_id)
