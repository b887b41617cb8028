"""Turn a finished order draft into persisted order rows and notify staff."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from packages.shared.schemas.catalog_v1 import OrderStatusV1
from packages.shared.schemas.events import EventTypeV1
from services.api.app.db.models import Order, OrderStand, OrderTree, OrderWreath
from services.api.app.models.draft import ContactInfo, DeliverySelection, OrderDraft
from services.api.app.models.notification import (
    NotificationStand,
    NotificationTree,
    NotificationWreath,
    OrderNotification,
)
from services.api.app.services.notify_base import OrderNotifier
from services.api.app.services.order_events import log_order_event
from services.api.app.services.pricing import OrderTotals, compute_totals, round_money
from services.api.app.services.wizard import WizardError, missing_contact_fields
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Not specified"


class DraftIncompleteError(WizardError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Order is missing: {', '.join(missing)}")
        self.missing = missing


class OrderSubmissionError(WizardError):
    def __init__(self, stage: str, cause: Exception) -> None:
        super().__init__(f"Error submitting {stage}. Please try again.")
        self.stage = stage
        self.cause = cause


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    order_id: str
    order_number: str
    totals: OrderTotals
    notified: bool


def new_order_number(now: datetime | None = None) -> str:
    now = now or datetime.utcnow()
    return f"{now:%y%m%d}-{uuid4().hex[:6].upper()}"


def draft_missing_fields(draft: OrderDraft) -> list[str]:
    missing: list[str] = []
    if not draft.trees:
        missing.append("trees")
    if draft.delivery is None:
        missing.append("delivery")
    missing.extend(f"contact.{name}" for name in missing_contact_fields(draft.contact))
    return missing


def _require_delivery(draft: OrderDraft) -> DeliverySelection:
    if draft.delivery is None:
        raise DraftIncompleteError(["delivery"])
    return draft.delivery


def format_delivery_address(contact: ContactInfo) -> str:
    parts = [
        contact.street.strip(),
        contact.unit.strip(),
        f"{contact.city.strip()}, {contact.state.strip()} {contact.zip.strip()}",
    ]
    return "\n".join(p for p in parts if p)


def build_notification(order_number: str, draft: OrderDraft, totals: OrderTotals) -> OrderNotification:
    contact = draft.contact
    delivery = _require_delivery(draft)

    return OrderNotification(
        order_number=order_number,
        customer_name=f"{contact.first_name.strip()} {contact.last_name.strip()}".strip(),
        customer_email=contact.email.strip(),
        customer_phone=contact.phone.strip(),
        delivery_address=format_delivery_address(contact),
        delivery_date=(
            draft.schedule.date.strftime("%m/%d/%Y") if draft.schedule.date else NOT_SPECIFIED
        ),
        delivery_time=draft.schedule.time or NOT_SPECIFIED,
        trees=[
            NotificationTree(
                species_name=t.species_name,
                height_feet=t.height_feet,
                fullness=t.fullness.value,
                quantity=t.quantity,
                unit_price=t.unit_price,
                fresh_cut=t.fresh_cut,
            )
            for t in draft.trees
        ],
        stands=[
            NotificationStand(name=s.name, quantity=s.quantity, unit_price=s.unit_price)
            for s in draft.stands
        ],
        wreaths=[
            NotificationWreath(
                size=w.size, title=w.title, quantity=w.quantity, unit_price=w.unit_price
            )
            for w in draft.wreaths
        ],
        delivery_option=delivery.name,
        delivery_fee=delivery.fee,
        total_amount=round_money(totals.grand_total),
        notes=contact.notes.strip() or None,
    )


def _order_header(order_id: str, order_number: str, draft: OrderDraft, totals: OrderTotals) -> Order:
    contact = draft.contact
    delivery = _require_delivery(draft)

    return Order(
        id=order_id,
        order_number=order_number,
        delivery_option_id=delivery.id,
        delivery_fee=delivery.fee,
        preferred_delivery_date=draft.schedule.date,
        preferred_delivery_time=draft.schedule.time,
        customer_first_name=contact.first_name.strip(),
        customer_last_name=contact.last_name.strip(),
        customer_email=contact.email.strip(),
        customer_phone=contact.phone.strip(),
        delivery_street=contact.street.strip(),
        delivery_unit=contact.unit.strip() or None,
        delivery_city=contact.city.strip(),
        delivery_state=contact.state.strip(),
        delivery_zip=contact.zip.strip(),
        total_amount=round_money(totals.grand_total),
        status=OrderStatusV1.PENDING.value,
        notes=contact.notes.strip() or None,
    )


def _order_lines(
    order_id: str, draft: OrderDraft
) -> tuple[list[OrderTree], list[OrderStand], list[OrderWreath]]:
    trees = [
        OrderTree(
            id=uuid4().hex,
            order_id=order_id,
            species_id=t.species_id,
            fullness_type=t.fullness.value,
            height_feet=t.height_feet,
            unit_price=round_money(t.unit_price),
            quantity=t.quantity,
            fresh_cut=t.fresh_cut,
        )
        for t in draft.trees
    ]
    stands = [
        OrderStand(
            id=uuid4().hex,
            order_id=order_id,
            stand_id=s.stand_id,
            unit_price=s.unit_price,
            quantity=s.quantity,
            is_own_stand=s.is_own_stand,
        )
        for s in draft.stands
    ]
    wreaths = [
        OrderWreath(
            id=uuid4().hex,
            order_id=order_id,
            wreath_id=w.wreath_id,
            unit_price=w.unit_price,
            quantity=w.quantity,
        )
        for w in draft.wreaths
    ]
    return trees, stands, wreaths


def submit_order(db: Session, draft: OrderDraft, notifier: OrderNotifier | None) -> SubmissionResult:
    """Persist the order header and its line items, then notify staff.

    The header and every line-item batch are written in one transaction. If any write
    fails the whole order is rolled back, so a header never exists without its items.

    Notification happens after the commit and is best effort: a failure is logged and
    recorded as an order event but never undoes or fails the order.
    """

    missing = draft_missing_fields(draft)
    if missing:
        raise DraftIncompleteError(missing)

    totals = compute_totals(draft)
    order_id = uuid4().hex
    order_number = new_order_number()

    stage = "order"
    try:
        db.add(_order_header(order_id, order_number, draft, totals))
        db.flush()

        stage = "order items"
        for batch in _order_lines(order_id, draft):
            if batch:
                db.add_all(batch)
        db.flush()

        log_order_event(
            db,
            order_id=order_id,
            event_type=EventTypeV1.ORDER_CREATED,
            event_payload={
                "order_number": order_number,
                "total_amount": str(round_money(totals.grand_total)),
                "trees": len(draft.trees),
                "stands": len(draft.stands),
                "wreaths": len(draft.wreaths),
            },
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Writing %s failed; order %s rolled back", stage, order_number)
        raise OrderSubmissionError(stage, e) from e

    logger.info("Order %s created (total %s)", order_number, round_money(totals.grand_total))

    notification = build_notification(order_number, draft, totals)
    notified = _notify(db, order_id, notification, notifier)

    return SubmissionResult(
        order_id=order_id,
        order_number=order_number,
        totals=totals,
        notified=notified,
    )


def _notify(
    db: Session,
    order_id: str,
    notification: OrderNotification,
    notifier: OrderNotifier | None,
) -> bool:
    if notifier is None:
        event_type = EventTypeV1.NOTIFICATION_FAILED
        payload: dict = {"error": "No order notifier configured"}
        logger.warning("Order %s: no notifier configured, staff not notified", notification.order_number)
    else:
        try:
            result = notifier.send(notification)
        except Exception as e:
            event_type = EventTypeV1.NOTIFICATION_FAILED
            payload = {"channel": notifier.channel, "error": str(e)}
            logger.exception("Order %s: staff notification failed", notification.order_number)
        else:
            event_type = EventTypeV1.NOTIFICATION_SENT
            payload = {"channel": result.channel, "reference_id": result.reference_id}

    try:
        log_order_event(db, order_id=order_id, event_type=event_type, event_payload=payload)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Order %s: could not record notification outcome", notification.order_number)

    return event_type == EventTypeV1.NOTIFICATION_SENT
