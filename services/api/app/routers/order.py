from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from packages.shared.schemas.catalog_v1 import OrderStatusV1
from services.api.app.db.deps import get_db
from services.api.app.models.order import OrderOut, OrderStatusRequest, OrderSummaryOut
from services.api.app.routers.admin import _raise_catalog_http_error
from services.api.app.services import catalog_admin
from sqlalchemy.orm import Session

router = APIRouter(prefix="/v1/admin")


@router.get("/orders", response_model=list[OrderOut])
def list_orders(
    status: OrderStatusV1 | None = None, db: Session = Depends(get_db)
) -> list[OrderOut]:
    return [OrderOut.model_validate(o) for o in catalog_admin.list_orders(db, status)]


@router.get("/orders/summary", response_model=OrderSummaryOut)
def order_summary(db: Session = Depends(get_db)) -> OrderSummaryOut:
    summary = catalog_admin.order_summary(db)
    return OrderSummaryOut(
        order_count=summary.order_count,
        revenue=summary.revenue,
        trees_sold=summary.trees_sold,
        by_status=summary.by_status,
    )


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)) -> OrderOut:
    try:
        order = catalog_admin.get_order(db, order_id)
    except Exception as e:
        _raise_catalog_http_error(e)
    return OrderOut.model_validate(order)


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def set_order_status(
    order_id: str, payload: OrderStatusRequest, db: Session = Depends(get_db)
) -> OrderOut:
    try:
        order = catalog_admin.set_order_status(db, order_id, payload.status)
    except Exception as e:
        _raise_catalog_http_error(e)
    return OrderOut.model_validate(order)


@router.delete("/orders/{order_id}", status_code=204)
def delete_order(order_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        catalog_admin.delete_order(db, order_id)
    except Exception as e:
        _raise_catalog_http_error(e)
    return Response(status_code=204)
