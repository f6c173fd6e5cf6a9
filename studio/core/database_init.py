import logging

from studio.models import Base

from .db import get_engine

logger = logging.getLogger(__name__)


def init_database_schema() -> None:
    """Create any missing tables from the ORM metadata.

    Existing tables are left untouched; schema changes go through alembic.
    """

    try:
        Base.metadata.create_all(bind=get_engine(), checkfirst=True)
    except Exception as exc:
        logger.error("Failed to initialize database schema: %s", exc)
        raise
    logger.info("Database schema ready")
