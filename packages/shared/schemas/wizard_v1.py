"""Shared checkout wizard view schema (v1).

Every wizard endpoint returns this payload. The storefront renders the current step,
the footer buttons and the running totals from it without computing anything itself.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class WizardStepV1(str, Enum):
    TREE = "tree"
    STAND = "stand"
    DELIVERY = "delivery"
    ADDONS = "addons"
    SCHEDULE = "schedule"
    CONTACT = "contact"
    REVIEW = "review"
    CONFIRMATION = "confirmation"


class TotalsLineV1(BaseModel):
    label: str
    amount: str


class TotalsV1(BaseModel):
    # Display values, rounded to cents.
    trees: str
    stands: str
    wreaths: str
    delivery_fee: str
    grand_total: str

    # Only the non-empty categories, in display order.
    lines: list[TotalsLineV1] = Field(default_factory=list)


class WizardViewV1(BaseModel):
    version: str = "1"
    session_id: str

    step: WizardStepV1
    sequence: list[WizardStepV1]

    can_go_back: bool
    can_go_next: bool
    next_label: str

    item_count: int
    draft: dict[str, Any] = Field(default_factory=dict)
    totals: TotalsV1

    # Set once the order is submitted.
    order_number: str | None = None
