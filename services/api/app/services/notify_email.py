"""Plain-text staff email for a new order."""

from __future__ import annotations

from decimal import Decimal

from services.api.app.models.notification import OrderNotification
from services.api.app.services.pricing import category_subtotal, format_money

RULE = "━" * 44


def _section(title: str) -> list[str]:
    return [RULE, title, RULE, ""]


def _line(label: str, quantity: int, unit_price: Decimal) -> str:
    return (
        f"  • {label} × {quantity}\n"
        f"    {format_money(unit_price)} each = {format_money(unit_price * quantity)}"
    )


def render_subject(n: OrderNotification) -> str:
    return f"New Order #{n.order_number} - {n.customer_name}"


def render_body(n: OrderNotification) -> str:
    lines: list[str] = [f"New Order Received - #{n.order_number}", ""]

    lines += _section("CUSTOMER INFORMATION")
    lines += [f"Name: {n.customer_name}", f"Email: {n.customer_email}", f"Phone: {n.customer_phone}", ""]

    lines += _section("DELIVERY DETAILS")
    lines += [
        "Address:",
        n.delivery_address,
        "",
        f"Preferred Date: {n.delivery_date}",
        f"Preferred Time: {n.delivery_time}",
        f"Delivery Option: {n.delivery_option}",
        "",
    ]

    lines += _section("ORDER ITEMS")
    if n.trees:
        lines.append("TREES:")
        for t in n.trees:
            label = f"{t.species_name} - {t.height_feet:g} ft ({t.fullness})"
            entry = _line(label, t.quantity, t.unit_price)
            if t.fresh_cut:
                first, rest = entry.split("\n", 1)
                entry = f"{first} - Fresh Cut\n{rest}"
            lines.append(entry)
        lines += ["", f"Trees Subtotal: {format_money(category_subtotal(n.trees))}", ""]
    if n.stands:
        lines.append("STANDS:")
        lines += [_line(s.name, s.quantity, s.unit_price) for s in n.stands]
        lines += ["", f"Stands Subtotal: {format_money(category_subtotal(n.stands))}", ""]
    if n.wreaths:
        lines.append("WREATHS:")
        lines += [_line(w.title, w.quantity, w.unit_price) for w in n.wreaths]
        lines += ["", f"Wreaths Subtotal: {format_money(category_subtotal(n.wreaths))}", ""]

    items_total = category_subtotal([*n.trees, *n.stands, *n.wreaths])
    lines += _section("PRICING SUMMARY")
    lines += [
        f"Items Total: {format_money(items_total)}",
        f"Delivery Fee: {format_money(n.delivery_fee)}",
        "",
        f"TOTAL: {format_money(n.total_amount)}",
    ]

    if n.notes:
        lines += [""] + _section("SPECIAL INSTRUCTIONS") + [n.notes]

    lines += ["", RULE]
    return "\n".join(lines) + "\n"
