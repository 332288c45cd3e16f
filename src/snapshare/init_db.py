"""Create the SnapShare tables in the configured database."""

import logging

from snapshare.core.logging import configure_logging
from snapshare.core.settings import settings
from snapshare.db.session import create_db_engine, create_tables

logger = logging.getLogger(__name__)


def init_db(database_url: str | None = None) -> None:
    """Initialize the database by creating all tables."""
    engine = create_db_engine(database_url or settings.database_url_sync, echo=settings.sql_debug)
    try:
        create_tables(engine)
    finally:
        engine.dispose()
    logger.info("Database initialized.")


if __name__ == "__main__":
    configure_logging(settings.log_level)
    init_db()
