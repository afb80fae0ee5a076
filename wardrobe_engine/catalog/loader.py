"""Turn host-supplied catalog payloads into an immutable ``Catalog`` snapshot."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wardrobe_engine.catalog.models import Catalog, Category, CuratedCombination, Garment, TuckStyle

logger = logging.getLogger(__name__)


class GarmentPayload(BaseModel):
    """Wire shape of a catalog garment as the host application stores it."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: Category
    formality: int | None = Field(default=None, alias="formalityScore")
    brand: str | None = None
    color: str | None = None
    material: str | None = None
    image: str | None = None
    capsule_tags: list[str] = Field(default_factory=list, alias="capsuleTags")
    season: list[str] = Field(default_factory=list)
    active: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, value: Any) -> Category:
        return Category.parse(value)

    @field_validator("formality", mode="before")
    @classmethod
    def _coerce_formality(cls, value: Any) -> int | None:
        # Out-of-range or non-numeric ratings make the garment unscorable, not invalid.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value) or not 1 <= value <= 10 or value != int(value):
            return None
        return int(value)

    def to_garment(self) -> Garment:
        return Garment(
            id=self.id,
            name=self.name,
            category=self.category,
            formality=self.formality,
            brand=self.brand,
            color=self.color,
            material=self.material,
            image=self.image,
            capsule_tags=tuple(self.capsule_tags),
            season=tuple(self.season),
            active=self.active,
        )


class CuratedCombinationPayload(BaseModel):
    """Wire shape of a curated outfit entry."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    item_ids: list[str] = Field(alias="items")
    tuck: TuckStyle | None = None
    favorited: bool = Field(default=False, alias="loved")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("item_ids", mode="before")
    @classmethod
    def _stringify_item_ids(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [str(item) if isinstance(item, int) and not isinstance(item, bool) else item for item in value]
        return value

    @field_validator("tuck", mode="before")
    @classmethod
    def _drop_unknown_tuck(cls, value: Any) -> Any:
        if value in (None, ""):
            return None
        try:
            return TuckStyle(value)
        except ValueError:
            return None

    def to_curated(self) -> CuratedCombination:
        return CuratedCombination(
            id=self.id,
            item_ids=tuple(self.item_ids),
            tuck=self.tuck,
            favorited=self.favorited,
        )


def _coerce_garment(entry: Garment | Mapping[str, Any]) -> Garment | None:
    if isinstance(entry, Garment):
        return entry
    try:
        return GarmentPayload.model_validate(entry).to_garment()
    except ValidationError as exc:
        logger.warning("Skipping invalid garment payload %r: %s", entry, exc)
        return None


def _coerce_curated(entry: CuratedCombination | Mapping[str, Any]) -> CuratedCombination | None:
    if isinstance(entry, CuratedCombination):
        return entry
    try:
        return CuratedCombinationPayload.model_validate(entry).to_curated()
    except ValidationError as exc:
        logger.warning("Skipping invalid curated combination payload %r: %s", entry, exc)
        return None


def build_catalog(
    garments: Iterable[Garment | Mapping[str, Any]] | None,
    combinations: Iterable[CuratedCombination | Mapping[str, Any]] | None,
) -> Catalog:
    """
    Validate host data and index garments by id.

    Invalid entries are logged and skipped. When two garments share an id the
    first one wins, matching the order the host supplied them in.
    """

    index: dict[str, Garment] = {}
    for entry in garments or ():
        garment = _coerce_garment(entry)
        if garment is None:
            continue
        if garment.id in index:
            logger.warning("Duplicate garment id %s ignored", garment.id)
            continue
        index[garment.id] = garment

    curated: list[CuratedCombination] = []
    for entry in combinations or ():
        combination = _coerce_curated(entry)
        if combination is not None:
            curated.append(combination)

    logger.debug("Catalog built with %d garments and %d curated combinations", len(index), len(curated))
    return Catalog(garments=index, combinations=tuple(curated))
