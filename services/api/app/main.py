"""Treelot API service entrypoint."""

import logging
import os

from fastapi import FastAPI

from services.api.app.db.init_db import init_db
from services.api.app.routers.admin import router as admin_router
from services.api.app.routers.audit import router as audit_router
from services.api.app.routers.catalog import router as catalog_router
from services.api.app.routers.order import router as order_router
from services.api.app.routers.wizard import router as wizard_router
from services.api.app.services.notify_factory import notifier_mode

logging.basicConfig(
    level=os.getenv("TREELOT_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Treelot API")

app.include_router(catalog_router)
app.include_router(wizard_router)
app.include_router(admin_router)
app.include_router(order_router)
app.include_router(audit_router)


@app.on_event("startup")
def _startup() -> None:
    init_db()
    if notifier_mode() == "mock":
        logger.warning(
            "TREELOT_NOTIFIER is mock: new orders are kept in memory and staff are not notified"
        )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
