import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

logger = logging.getLogger(__name__)


def create_db_engine(database_uri: str) -> Engine:
    connect_args = {}
    if database_uri.startswith("sqlite"):
        # The event loop thread and the threadpool share connections
        connect_args["check_same_thread"] = False
    return create_engine(database_uri, connect_args=connect_args, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """Create the memory and credential tables if they don't exist."""
    # make sure all SQLModel models are imported before creating tables
    from bruce import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")
