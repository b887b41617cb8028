from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

Money = Numeric(10, 2)


class Base(DeclarativeBase):
    pass


class Species(Base):
    __tablename__ = "species"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class FullnessVariant(Base):
    __tablename__ = "fullness_variants"
    __table_args__ = (UniqueConstraint("species_id", "fullness_type"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    species_id: Mapped[str] = mapped_column(ForeignKey("species.id"), nullable=False)
    fullness_type: Mapped[str] = mapped_column(String, nullable=False)
    image_url: Mapped[str] = mapped_column(String, nullable=False, default="")
    price_per_foot: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class SpeciesHeight(Base):
    __tablename__ = "species_heights"
    __table_args__ = (UniqueConstraint("species_id", "height_feet"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    species_id: Mapped[str] = mapped_column(ForeignKey("species.id"), nullable=False)
    height_feet: Mapped[float] = mapped_column(Float, nullable=False)
    price_per_foot: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class Stand(Base):
    __tablename__ = "stands"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    fits_up_to_feet: Mapped[float | None] = mapped_column(Float, nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class Wreath(Base):
    __tablename__ = "wreaths"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    size: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class DeliveryOption(Base):
    __tablename__ = "delivery_options"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    fee: Mapped[Decimal] = mapped_column(Money, nullable=False)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (CheckConstraint("total_amount >= 0", name="ck_orders_total_non_negative"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    order_number: Mapped[str] = mapped_column(String, nullable=False, unique=True)

    delivery_option_id: Mapped[str] = mapped_column(ForeignKey("delivery_options.id"), nullable=False)
    delivery_fee: Mapped[Decimal] = mapped_column(Money, nullable=False)
    preferred_delivery_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    preferred_delivery_time: Mapped[str | None] = mapped_column(String, nullable=True)

    customer_first_name: Mapped[str] = mapped_column(String, nullable=False)
    customer_last_name: Mapped[str] = mapped_column(String, nullable=False)
    customer_email: Mapped[str] = mapped_column(String, nullable=False)
    customer_phone: Mapped[str] = mapped_column(String, nullable=False)

    delivery_street: Mapped[str] = mapped_column(String, nullable=False)
    delivery_unit: Mapped[str | None] = mapped_column(String, nullable=True)
    delivery_city: Mapped[str] = mapped_column(String, nullable=False)
    delivery_state: Mapped[str] = mapped_column(String, nullable=False)
    delivery_zip: Mapped[str] = mapped_column(String, nullable=False)

    total_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    notes: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    trees: Mapped[list[OrderTree]] = relationship(cascade="all, delete-orphan")
    stands: Mapped[list[OrderStand]] = relationship(cascade="all, delete-orphan")
    wreaths: Mapped[list[OrderWreath]] = relationship(cascade="all, delete-orphan")


class OrderTree(Base):
    __tablename__ = "order_trees"
    __table_args__ = (CheckConstraint("quantity >= 1", name="ck_order_trees_quantity"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id"), nullable=False)
    species_id: Mapped[str] = mapped_column(ForeignKey("species.id"), nullable=False)
    fullness_type: Mapped[str] = mapped_column(String, nullable=False)
    height_feet: Mapped[float] = mapped_column(Float, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    fresh_cut: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class OrderStand(Base):
    __tablename__ = "order_stands"
    __table_args__ = (CheckConstraint("quantity >= 1", name="ck_order_stands_quantity"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id"), nullable=False)
    stand_id: Mapped[str | None] = mapped_column(ForeignKey("stands.id"), nullable=True)
    unit_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_own_stand: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class OrderWreath(Base):
    __tablename__ = "order_wreaths"
    __table_args__ = (CheckConstraint("quantity >= 1", name="ck_order_wreaths_quantity"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id"), nullable=False)
    wreath_id: Mapped[str] = mapped_column(ForeignKey("wreaths.id"), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class OrderEvent(Base):
    __tablename__ = "order_events"

    id: Mapped[str] = mapped_column(String, primary_key=True)

    # No foreign key: events outlive hard-deleted orders.
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    event_type: Mapped[str] = mapped_column(String, nullable=False)
    event_payload_json: Mapped[dict] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
