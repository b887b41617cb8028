from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from packages.shared.schemas.catalog_v1 import OrderStatusV1
from pydantic import BaseModel, ConfigDict, Field


class _Row(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class OrderTreeOut(_Row):
    id: str
    species_id: str
    fullness_type: str
    height_feet: float
    unit_price: Decimal
    quantity: int
    fresh_cut: bool


class OrderStandOut(_Row):
    id: str
    stand_id: str | None = None
    unit_price: Decimal
    quantity: int
    is_own_stand: bool


class OrderWreathOut(_Row):
    id: str
    wreath_id: str
    unit_price: Decimal
    quantity: int


class OrderOut(_Row):
    id: str
    order_number: str
    status: OrderStatusV1

    customer_first_name: str
    customer_last_name: str
    customer_email: str
    customer_phone: str

    delivery_street: str
    delivery_unit: str | None = None
    delivery_city: str
    delivery_state: str
    delivery_zip: str

    delivery_option_id: str
    delivery_fee: Decimal
    preferred_delivery_date: date | None = None
    preferred_delivery_time: str | None = None

    total_amount: Decimal
    notes: str | None = None
    created_at: datetime

    trees: list[OrderTreeOut] = Field(default_factory=list)
    stands: list[OrderStandOut] = Field(default_factory=list)
    wreaths: list[OrderWreathOut] = Field(default_factory=list)


class OrderStatusRequest(BaseModel):
    status: OrderStatusV1


class OrderSummaryOut(BaseModel):
    order_count: int
    revenue: Decimal
    trees_sold: int
    by_status: dict[str, int]
