"""Admin catalog and order management.

Every update applies only the fields present in the request, so toggling visibility
never requires resending the rest of the record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from packages.shared.schemas.catalog_v1 import FULLNESS_ORDER, FullnessV1, OrderStatusV1
from packages.shared.schemas.events import EventTypeV1
from pydantic import BaseModel
from services.api.app.db.models import (
    Base,
    DeliveryOption,
    FullnessVariant,
    Order,
    OrderEvent,
    Species,
    SpeciesHeight,
    Stand,
    Wreath,
)
from services.api.app.models.catalog import (
    DeliveryOptionCreate,
    DeliveryOptionUpdate,
    HeightCreate,
    HeightUpdate,
    SpeciesCreate,
    SpeciesUpdate,
    StandCreate,
    StandUpdate,
    VariantUpdate,
    WreathCreate,
    WreathUpdate,
)
from services.api.app.services.order_events import log_order_event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

logger = logging.getLogger(__name__)

# New species start with these heights, available, priced at zero.
DEFAULT_HEIGHTS_FEET: tuple[float, ...] = (5, 6, 7, 8, 9, 10)


class CatalogError(Exception):
    """Base class for admin catalog errors."""


class CatalogNotFoundError(CatalogError):
    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class CatalogConflictError(CatalogError):
    pass


@dataclass(frozen=True, slots=True)
class OrderSummary:
    order_count: int
    revenue: Decimal
    trees_sold: int
    by_status: dict[str, int]


def _get(db: Session, model: type[Base], key: str, kind: str):
    row = db.get(model, key)
    if row is None:
        raise CatalogNotFoundError(kind, key)
    return row


def _apply(row: Base, changes: BaseModel) -> Base:
    for name, value in changes.model_dump(exclude_unset=True).items():
        setattr(row, name, value)
    if hasattr(row, "updated_at"):
        row.updated_at = datetime.utcnow()
    return row


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise CatalogConflictError(f"Failed to save {what}: {e.orig}") from e


# Species


def list_species(db: Session) -> list[Species]:
    return db.query(Species).order_by(Species.sort_order, Species.name).all()


def create_species(db: Session, payload: SpeciesCreate) -> Species:
    species = Species(
        id=uuid4().hex,
        name=payload.name.strip(),
        description=payload.description,
        sort_order=payload.sort_order,
        visible=True,
    )
    db.add(species)
    db.flush()

    for fullness in FULLNESS_ORDER:
        db.add(
            FullnessVariant(
                id=uuid4().hex,
                species_id=species.id,
                fullness_type=fullness.value,
                image_url="",
                price_per_foot=Decimal("0"),
                available=False,
            )
        )

    for height in DEFAULT_HEIGHTS_FEET:
        db.add(
            SpeciesHeight(
                id=uuid4().hex,
                species_id=species.id,
                height_feet=float(height),
                price_per_foot=Decimal("0"),
                available=True,
            )
        )

    _commit(db, "species")
    logger.info("Created species %s (%s)", species.name, species.id)
    return species


def update_species(db: Session, species_id: str, payload: SpeciesUpdate) -> Species:
    species = _apply(_get(db, Species, species_id, "Species"), payload)
    _commit(db, "species")
    return species


# Fullness variants


def list_variants(db: Session, species_id: str) -> list[FullnessVariant]:
    _get(db, Species, species_id, "Species")
    variants = db.query(FullnessVariant).filter(FullnessVariant.species_id == species_id).all()
    variants.sort(key=lambda v: FULLNESS_ORDER.index(FullnessV1(v.fullness_type)))
    return variants


def update_variant(db: Session, variant_id: str, payload: VariantUpdate) -> FullnessVariant:
    variant = _apply(_get(db, FullnessVariant, variant_id, "Fullness variant"), payload)
    _commit(db, "fullness variant")
    return variant


def set_default_image(db: Session, species_id: str, image_url: str) -> FullnessVariant:
    """The medium variant's image is the species' storefront image."""

    _get(db, Species, species_id, "Species")
    variant = (
        db.query(FullnessVariant)
        .filter(
            FullnessVariant.species_id == species_id,
            FullnessVariant.fullness_type == FullnessV1.MEDIUM.value,
        )
        .first()
    )
    if variant is None:
        raise CatalogNotFoundError("Medium variant for species", species_id)

    variant.image_url = image_url
    variant.updated_at = datetime.utcnow()
    _commit(db, "image")
    return variant


# Heights


def list_heights(db: Session, species_id: str) -> list[SpeciesHeight]:
    _get(db, Species, species_id, "Species")
    return (
        db.query(SpeciesHeight)
        .filter(SpeciesHeight.species_id == species_id)
        .order_by(SpeciesHeight.height_feet)
        .all()
    )


def add_height(db: Session, species_id: str, payload: HeightCreate) -> SpeciesHeight:
    _get(db, Species, species_id, "Species")

    exists = (
        db.query(SpeciesHeight)
        .filter(
            SpeciesHeight.species_id == species_id,
            SpeciesHeight.height_feet == payload.height_feet,
        )
        .first()
    )
    if exists is not None:
        raise CatalogConflictError("This height already exists for this species")

    height = SpeciesHeight(
        id=uuid4().hex,
        species_id=species_id,
        height_feet=payload.height_feet,
        price_per_foot=payload.price_per_foot,
        available=True,
    )
    db.add(height)
    _commit(db, "height")
    return height


def update_height(db: Session, height_id: str, payload: HeightUpdate) -> SpeciesHeight:
    height = _apply(_get(db, SpeciesHeight, height_id, "Height"), payload)
    _commit(db, "height")
    return height


def delete_height(db: Session, height_id: str) -> None:
    db.delete(_get(db, SpeciesHeight, height_id, "Height"))
    _commit(db, "height")


# Stands, wreaths, delivery options


def list_stands(db: Session) -> list[Stand]:
    return db.query(Stand).order_by(Stand.sort_order).all()


def create_stand(db: Session, payload: StandCreate) -> Stand:
    stand = Stand(id=uuid4().hex, visible=True, **payload.model_dump())
    db.add(stand)
    _commit(db, "stand")
    return stand


def update_stand(db: Session, stand_id: str, payload: StandUpdate) -> Stand:
    stand = _apply(_get(db, Stand, stand_id, "Stand"), payload)
    _commit(db, "stand")
    return stand


def list_wreaths(db: Session) -> list[Wreath]:
    return db.query(Wreath).order_by(Wreath.sort_order).all()


def default_wreath_title(size: str) -> str:
    return f"{size[:1].upper()}{size[1:]} Wreath"


def create_wreath(db: Session, payload: WreathCreate) -> Wreath:
    if db.query(Wreath).filter(Wreath.size == payload.size.value).first() is not None:
        raise CatalogConflictError("A wreath with this size already exists")

    data = payload.model_dump()
    data["size"] = payload.size.value
    data["title"] = (payload.title or "").strip() or default_wreath_title(payload.size.value)
    wreath = Wreath(id=uuid4().hex, visible=True, **data)
    db.add(wreath)
    _commit(db, "wreath")
    return wreath


def update_wreath(db: Session, wreath_id: str, payload: WreathUpdate) -> Wreath:
    wreath = _apply(_get(db, Wreath, wreath_id, "Wreath"), payload)
    _commit(db, "wreath")
    return wreath


def list_delivery_options(db: Session) -> list[DeliveryOption]:
    return db.query(DeliveryOption).order_by(DeliveryOption.sort_order).all()


def create_delivery_option(db: Session, payload: DeliveryOptionCreate) -> DeliveryOption:
    option = DeliveryOption(id=uuid4().hex, visible=True, **payload.model_dump())
    db.add(option)
    _commit(db, "delivery option")
    return option


def update_delivery_option(
    db: Session, option_id: str, payload: DeliveryOptionUpdate
) -> DeliveryOption:
    option = _apply(_get(db, DeliveryOption, option_id, "Delivery option"), payload)
    _commit(db, "delivery option")
    return option


# Orders


def _orders_query(db: Session):
    return db.query(Order).options(
        selectinload(Order.trees),
        selectinload(Order.stands),
        selectinload(Order.wreaths),
    )


def list_orders(db: Session, status: OrderStatusV1 | None = None) -> list[Order]:
    query = _orders_query(db)
    if status is not None:
        query = query.filter(Order.status == status.value)
    return query.order_by(Order.created_at.desc()).all()


def get_order(db: Session, order_id: str) -> Order:
    order = _orders_query(db).filter(Order.id == order_id).first()
    if order is None:
        raise CatalogNotFoundError("Order", order_id)
    return order


def set_order_status(db: Session, order_id: str, status: OrderStatusV1) -> Order:
    order = get_order(db, order_id)
    previous = order.status
    order.status = status.value

    log_order_event(
        db,
        order_id=order.id,
        event_type=EventTypeV1.ORDER_STATUS_CHANGED,
        event_payload={"from": previous, "to": status.value},
    )
    _commit(db, "order status")
    logger.info("Order %s status %s -> %s", order.order_number, previous, status.value)
    return order


def delete_order(db: Session, order_id: str) -> None:
    order = get_order(db, order_id)
    order_number = order.order_number
    db.delete(order)

    log_order_event(
        db,
        order_id=order_id,
        event_type=EventTypeV1.ORDER_DELETED,
        event_payload={"order_number": order_number},
    )
    _commit(db, "order")
    logger.info("Deleted order %s", order_number)


def list_order_events(db: Session, order_id: str) -> list[OrderEvent]:
    return (
        db.query(OrderEvent)
        .filter(OrderEvent.entity_id == order_id)
        .order_by(OrderEvent.created_at)
        .all()
    )


def order_summary(db: Session) -> OrderSummary:
    orders = _orders_query(db).all()

    by_status = {s.value: 0 for s in OrderStatusV1}
    for order in orders:
        by_status[order.status] = by_status.get(order.status, 0) + 1

    return OrderSummary(
        order_count=len(orders),
        revenue=sum((o.total_amount for o in orders), Decimal("0")),
        trees_sold=sum(t.quantity for o in orders for t in o.trees),
        by_status=by_status,
    )
