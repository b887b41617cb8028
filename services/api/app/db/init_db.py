from __future__ import annotations

import logging
import os

from services.api.app.db.database import get_engine
from services.api.app.db.models import Base
from sqlalchemy import inspect

logger = logging.getLogger(__name__)


def _auto_create_enabled() -> bool:
    return os.getenv("TREELOT_DB_AUTO_CREATE", "true").strip().lower() in {"1", "true", "yes", "y"}


def init_db() -> None:
    """Create any missing catalog and order tables. Existing tables are left alone."""

    if not _auto_create_enabled():
        logger.info("Skipping table creation (TREELOT_DB_AUTO_CREATE is off)")
        return

    engine = get_engine()
    existing = set(inspect(engine).get_table_names())
    Base.metadata.create_all(bind=engine)

    created = sorted(set(Base.metadata.tables) - existing)
    if created:
        logger.info("Created tables: %s", ", ".join(created))
