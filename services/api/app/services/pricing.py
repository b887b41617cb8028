"""Order price aggregation.

Amounts are Decimals and are summed at full precision. Rounding to cents happens only
when a value is displayed or persisted.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from packages.shared.schemas.wizard_v1 import TotalsLineV1, TotalsV1
from services.api.app.models.draft import OrderDraft, TreeItem

CENT = Decimal("0.01")
ZERO = Decimal("0")


class PricedLine(Protocol):
    # Draft line items and notification lines both fit.
    @property
    def unit_price(self) -> Decimal: ...

    @property
    def quantity(self) -> int: ...


@dataclass(frozen=True, slots=True)
class OrderTotals:
    trees: Decimal
    stands: Decimal
    wreaths: Decimal
    delivery_fee: Decimal

    @property
    def items(self) -> Decimal:
        return self.trees + self.stands + self.wreaths

    @property
    def grand_total(self) -> Decimal:
        return self.trees + self.stands + self.wreaths + self.delivery_fee


def unit_price(tree: TreeItem) -> Decimal:
    """Price per foot times height."""
    return tree.unit_price


def line_total(item: PricedLine) -> Decimal:
    return item.unit_price * item.quantity


def category_subtotal(items: Iterable[PricedLine]) -> Decimal:
    return sum((line_total(item) for item in items), ZERO)


def compute_totals(draft: OrderDraft) -> OrderTotals:
    return OrderTotals(
        trees=category_subtotal(draft.trees),
        stands=category_subtotal(draft.stands),
        wreaths=category_subtotal(draft.wreaths),
        delivery_fee=draft.delivery.fee if draft.delivery is not None else ZERO,
    )


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    return f"${round_money(amount):,.2f}"


def itemized_totals(draft: OrderDraft, totals: OrderTotals) -> list[TotalsLineV1]:
    """Display rows for the categories the draft actually holds."""

    lines: list[TotalsLineV1] = []
    if draft.trees:
        lines.append(TotalsLineV1(label="Trees", amount=format_money(totals.trees)))
    if draft.stands:
        lines.append(TotalsLineV1(label="Stands", amount=format_money(totals.stands)))
    if draft.wreaths:
        lines.append(TotalsLineV1(label="Wreaths", amount=format_money(totals.wreaths)))
    if draft.delivery is not None:
        lines.append(TotalsLineV1(label="Delivery", amount=format_money(totals.delivery_fee)))
    return lines


def totals_view(draft: OrderDraft) -> TotalsV1:
    """Display totals for a draft. Review and confirmation both render from this."""

    totals = compute_totals(draft)
    return TotalsV1(
        trees=str(round_money(totals.trees)),
        stands=str(round_money(totals.stands)),
        wreaths=str(round_money(totals.wreaths)),
        delivery_fee=str(round_money(totals.delivery_fee)),
        grand_total=str(round_money(totals.grand_total)),
        lines=itemized_totals(draft, totals),
    )
