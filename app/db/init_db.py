"""
Database initialization helpers.

Models are imported so their tables get registered on Base.metadata.
"""

import logging

from app.db.session import Database
from app.models.base import Base
from app.models import task, user  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(database: Database) -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    Base.metadata.create_all(bind=database.engine)
    logger.info("Tables ensured: %s", ", ".join(sorted(Base.metadata.tables)))
