"""Storefront catalog reads and the lookups the wizard step editors price against."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from packages.shared.schemas.catalog_v1 import FULLNESS_ORDER, FullnessV1
from services.api.app.db.models import (
    DeliveryOption,
    FullnessVariant,
    Species,
    SpeciesHeight,
    Stand,
    Wreath,
)
from services.api.app.models.draft import DeliverySelection, Schedule, TreeAddRequest, TreeItem
from services.api.app.services.wizard import WizardError
from sqlalchemy.orm import Session

SCHEDULE_TIME_WINDOWS: tuple[str, ...] = (
    "8:00 AM - 12:00 PM",
    "12:00 PM - 4:00 PM",
    "4:00 PM - 8:00 PM",
)

DEFAULT_FULLNESS = FullnessV1.MEDIUM
DEFAULT_HEIGHT_FEET = 7.0


class CatalogItemUnavailableError(WizardError):
    def __init__(self, kind: str, key: object) -> None:
        super().__init__(f"{kind} {key!r} is not available")
        self.kind = kind
        self.key = key


class ScheduleInvalidError(WizardError):
    pass


@dataclass(frozen=True, slots=True)
class SpeciesOptions:
    species: Species
    variants: list[FullnessVariant]
    heights: list[SpeciesHeight]
    default_fullness: FullnessV1 | None
    default_height_feet: float | None


def earliest_delivery_date(today: date | None = None) -> date:
    return (today or date.today()) + timedelta(days=1)


def list_visible_species(db: Session) -> list[Species]:
    return (
        db.query(Species)
        .filter(Species.visible.is_(True))
        .order_by(Species.sort_order, Species.name)
        .all()
    )


def get_species_options(db: Session, species_id: str) -> SpeciesOptions:
    species = db.get(Species, species_id)
    if species is None or not species.visible:
        raise CatalogItemUnavailableError("Species", species_id)

    variants = (
        db.query(FullnessVariant)
        .filter(FullnessVariant.species_id == species_id, FullnessVariant.available.is_(True))
        .all()
    )
    variants.sort(key=lambda v: FULLNESS_ORDER.index(FullnessV1(v.fullness_type)))

    heights = (
        db.query(SpeciesHeight)
        .filter(SpeciesHeight.species_id == species_id, SpeciesHeight.available.is_(True))
        .order_by(SpeciesHeight.height_feet)
        .all()
    )

    default_fullness: FullnessV1 | None = None
    if variants:
        fullness_types = [FullnessV1(v.fullness_type) for v in variants]
        default_fullness = DEFAULT_FULLNESS if DEFAULT_FULLNESS in fullness_types else fullness_types[0]

    default_height: float | None = None
    if heights:
        height_values = [h.height_feet for h in heights]
        default_height = DEFAULT_HEIGHT_FEET if DEFAULT_HEIGHT_FEET in height_values else height_values[0]

    return SpeciesOptions(
        species=species,
        variants=variants,
        heights=heights,
        default_fullness=default_fullness,
        default_height_feet=default_height,
    )


def list_visible_stands(db: Session) -> list[Stand]:
    return db.query(Stand).filter(Stand.visible.is_(True)).order_by(Stand.sort_order).all()


def list_visible_wreaths(db: Session) -> list[Wreath]:
    return db.query(Wreath).filter(Wreath.visible.is_(True)).order_by(Wreath.sort_order).all()


def list_visible_delivery_options(db: Session) -> list[DeliveryOption]:
    return (
        db.query(DeliveryOption)
        .filter(DeliveryOption.visible.is_(True))
        .order_by(DeliveryOption.sort_order)
        .all()
    )


def price_tree(db: Session, request: TreeAddRequest) -> TreeItem:
    """Build a tree line item from the configurator selection and current catalog prices."""

    species = db.get(Species, request.species_id)
    if species is None or not species.visible:
        raise CatalogItemUnavailableError("Species", request.species_id)

    variant = (
        db.query(FullnessVariant)
        .filter(
            FullnessVariant.species_id == species.id,
            FullnessVariant.fullness_type == request.fullness.value,
            FullnessVariant.available.is_(True),
        )
        .first()
    )
    if variant is None:
        raise CatalogItemUnavailableError("Fullness", request.fullness.value)

    height = (
        db.query(SpeciesHeight)
        .filter(
            SpeciesHeight.species_id == species.id,
            SpeciesHeight.height_feet == request.height_feet,
            SpeciesHeight.available.is_(True),
        )
        .first()
    )
    if height is None:
        raise CatalogItemUnavailableError("Height", request.height_feet)

    return TreeItem(
        species_id=species.id,
        species_name=species.name,
        fullness=request.fullness,
        height_feet=height.height_feet,
        price_per_foot=variant.price_per_foot,
        quantity=request.quantity,
        fresh_cut=request.fresh_cut,
        image_url=variant.image_url,
    )


def get_visible_stand(db: Session, stand_id: str) -> Stand:
    stand = db.get(Stand, stand_id)
    if stand is None or not stand.visible:
        raise CatalogItemUnavailableError("Stand", stand_id)
    return stand


def get_visible_wreath(db: Session, wreath_id: str) -> Wreath:
    wreath = db.get(Wreath, wreath_id)
    if wreath is None or not wreath.visible:
        raise CatalogItemUnavailableError("Wreath", wreath_id)
    return wreath


def select_delivery_option(db: Session, option_id: str) -> DeliverySelection:
    option = db.get(DeliveryOption, option_id)
    if option is None or not option.visible:
        raise CatalogItemUnavailableError("Delivery option", option_id)
    return DeliverySelection(id=option.id, name=option.name, fee=option.fee)


def build_schedule(
    delivery_date: date | None, time_window: str | None, today: date | None = None
) -> Schedule:
    time_window = (time_window or "").strip() or None
    if time_window is not None and time_window not in SCHEDULE_TIME_WINDOWS:
        raise ScheduleInvalidError(f"Unknown delivery time window: {time_window!r}")

    if delivery_date is not None and delivery_date < earliest_delivery_date(today):
        raise ScheduleInvalidError("Delivery date must be tomorrow or later")

    return Schedule(date=delivery_date, time=time_window)
