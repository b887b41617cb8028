from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from packages.shared.schemas.catalog_v1 import FullnessV1, WreathSizeV1
from pydantic import BaseModel, ConfigDict, Field, field_validator
from services.api.app.models.draft import whole_or_half_feet


class _Row(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class SpeciesOut(_Row):
    id: str
    name: str
    description: str
    sort_order: int
    visible: bool
    created_at: datetime


class VariantOut(_Row):
    id: str
    species_id: str
    fullness_type: FullnessV1
    image_url: str
    price_per_foot: Decimal
    available: bool


class HeightOut(_Row):
    id: str
    species_id: str
    height_feet: float
    price_per_foot: Decimal
    available: bool


class StandOut(_Row):
    id: str
    name: str
    description: str | None = None
    price: Decimal
    fits_up_to_feet: float | None = None
    visible: bool
    sort_order: int


class WreathOut(_Row):
    id: str
    size: WreathSizeV1
    title: str
    description: str | None = None
    price: Decimal
    visible: bool
    sort_order: int


class DeliveryOptionOut(_Row):
    id: str
    name: str
    description: str | None = None
    fee: Decimal
    visible: bool
    sort_order: int


class SpeciesOptionsOut(BaseModel):
    species: SpeciesOut
    variants: list[VariantOut]
    heights: list[HeightOut]
    default_fullness: FullnessV1 | None = None
    default_height_feet: float | None = None


class ScheduleWindowsOut(BaseModel):
    time_windows: list[str]
    earliest_date: date


# Admin write models. Update models only apply fields that were sent.


class SpeciesCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    sort_order: int = 0


class SpeciesUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    sort_order: int | None = None
    visible: bool | None = None


class VariantUpdate(BaseModel):
    image_url: str | None = None
    price_per_foot: Decimal | None = Field(None, ge=0)
    available: bool | None = None


class DefaultImageRequest(BaseModel):
    image_url: str


class HeightCreate(BaseModel):
    height_feet: float = Field(..., gt=0)
    price_per_foot: Decimal = Field(Decimal("0"), ge=0)

    @field_validator("height_feet")
    @classmethod
    def _whole_or_half_feet(cls, v: float) -> float:
        return whole_or_half_feet(v)


class HeightUpdate(BaseModel):
    price_per_foot: Decimal | None = Field(None, ge=0)
    available: bool | None = None


class StandCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    fits_up_to_feet: float | None = Field(None, gt=0)
    sort_order: int = 0


class StandUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    fits_up_to_feet: float | None = Field(None, gt=0)
    visible: bool | None = None
    sort_order: int | None = None


class WreathCreate(BaseModel):
    size: WreathSizeV1
    # Defaults to "<Size> Wreath".
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    sort_order: int = 0


class WreathUpdate(BaseModel):
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    visible: bool | None = None
    sort_order: int | None = None


class DeliveryOptionCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    fee: Decimal = Field(..., ge=0)
    sort_order: int = 0


class DeliveryOptionUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    fee: Decimal | None = Field(None, ge=0)
    visible: bool | None = None
    sort_order: int | None = None
