from __future__ import annotations

from uuid import uuid4

from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import OrderEvent
from sqlalchemy.orm import Session


def log_order_event(
    db: Session,
    *,
    order_id: str,
    event_type: EventTypeV1,
    event_payload: dict,
) -> None:
    db.add(
        OrderEvent(
            id=uuid4().hex,
            entity_type=EntityTypeV1.ORDER.value,
            entity_id=order_id,
            event_type=event_type.value,
            event_payload_json=event_payload,
        )
    )
