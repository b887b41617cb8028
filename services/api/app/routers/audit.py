from __future__ import annotations

from fastapi import APIRouter, Depends
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1, EventV1
from services.api.app.db.deps import get_db
from services.api.app.services.catalog_admin import list_order_events
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/v1/admin/orders/{order_id}/events", response_model=list[EventV1])
def get_order_events(order_id: str, db: Session = Depends(get_db)) -> list[EventV1]:
    # Events are kept after an order is hard deleted, so an unknown order is not a 404.
    return [
        EventV1(
            id=e.id,
            entity_type=EntityTypeV1(e.entity_type),
            entity_id=e.entity_id,
            event_type=EventTypeV1(e.event_type),
            payload=e.event_payload_json or {},
            created_at=e.created_at.isoformat(),
        )
        for e in list_order_events(db, order_id)
    ]
