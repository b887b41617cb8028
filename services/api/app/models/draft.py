from __future__ import annotations

import datetime
from decimal import Decimal

from packages.shared.schemas.catalog_v1 import FullnessV1
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


def whole_or_half_feet(v: float) -> float:
    if v <= 0 or (v * 2) != int(v * 2):
        raise ValueError("height_feet must be a positive whole or half foot value")
    return v


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class TreeItem(_Frozen):
    species_id: str
    species_name: str
    fullness: FullnessV1
    height_feet: float
    price_per_foot: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    fresh_cut: bool = False
    image_url: str = ""

    @field_validator("height_feet")
    @classmethod
    def _whole_or_half_feet(cls, v: float) -> float:
        return whole_or_half_feet(v)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def unit_price(self) -> Decimal:
        return self.price_per_foot * Decimal(str(self.height_feet))


class StandItem(_Frozen):
    # None means the customer brings their own stand.
    stand_id: str | None
    name: str
    unit_price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    is_own_stand: bool = False


class WreathItem(_Frozen):
    wreath_id: str
    size: str
    title: str
    unit_price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)


class DeliverySelection(_Frozen):
    id: str
    name: str
    fee: Decimal = Field(..., ge=0)


class Schedule(_Frozen):
    date: datetime.date | None = None
    time: str | None = None


class ContactInfo(_Frozen):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    unit: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    notes: str = ""


class OrderDraft(_Frozen):
    trees: tuple[TreeItem, ...] = ()
    stands: tuple[StandItem, ...] = ()
    wreaths: tuple[WreathItem, ...] = ()
    delivery: DeliverySelection | None = None
    schedule: Schedule = Field(default_factory=Schedule)
    contact: ContactInfo = Field(default_factory=ContactInfo)

    def item_count(self) -> int:
        return (
            sum(t.quantity for t in self.trees)
            + sum(s.quantity for s in self.stands if not s.is_own_stand)
            + sum(w.quantity for w in self.wreaths)
        )


# Request bodies for the wizard step editors.


class TreeAddRequest(BaseModel):
    species_id: str
    fullness: FullnessV1
    height_feet: float = Field(..., gt=0)
    quantity: int = Field(1, ge=1)
    fresh_cut: bool = False

    @field_validator("height_feet")
    @classmethod
    def _whole_or_half_feet(cls, v: float) -> float:
        return whole_or_half_feet(v)


class QuantityRequest(BaseModel):
    # Zero or negative removes the line item.
    quantity: int


class DeliveryRequest(BaseModel):
    delivery_option_id: str


class ScheduleRequest(BaseModel):
    date: datetime.date | None = None
    time: str | None = None


class ContactRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    unit: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    notes: str = ""
