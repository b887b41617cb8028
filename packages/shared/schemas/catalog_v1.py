"""Shared catalog and order enums (v1).

These values are stored in the database and sent to the storefront and admin clients.
They should remain stable once shipped.
"""

from __future__ import annotations

from enum import Enum


class FullnessV1(str, Enum):
    THIN = "thin"
    MEDIUM = "medium"
    FULL = "full"


# Display and default ordering of fullness tiers.
FULLNESS_ORDER: tuple[FullnessV1, ...] = (FullnessV1.THIN, FullnessV1.MEDIUM, FullnessV1.FULL)


class WreathSizeV1(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class OrderStatusV1(str, Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    CANCELED = "canceled"
