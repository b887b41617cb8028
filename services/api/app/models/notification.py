from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class NotificationTree(BaseModel):
    species_name: str
    height_feet: float
    fullness: str
    quantity: int
    unit_price: Decimal
    fresh_cut: bool = False


class NotificationStand(BaseModel):
    name: str
    quantity: int
    unit_price: Decimal


class NotificationWreath(BaseModel):
    size: str
    title: str
    quantity: int
    unit_price: Decimal


class OrderNotification(BaseModel):
    """Staff notification for a newly placed order."""

    order_number: str

    customer_name: str
    customer_email: str
    customer_phone: str

    delivery_address: str
    delivery_date: str
    delivery_time: str

    trees: list[NotificationTree] = Field(default_factory=list)
    stands: list[NotificationStand] = Field(default_factory=list)
    wreaths: list[NotificationWreath] = Field(default_factory=list)

    delivery_option: str
    delivery_fee: Decimal
    total_amount: Decimal
    notes: str | None = None
