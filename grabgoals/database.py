import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from grabgoals.config import DATABASE_URL
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(url: str = DATABASE_URL):
    """Build an engine for device storage. In-memory SQLite shares one connection."""
    engine_args = {}
    if url.startswith("sqlite"):
        engine_args["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            engine_args["poolclass"] = StaticPool
    return create_engine(url, **engine_args, echo=False)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine) -> None:
    """Create the data/ directory if needed, then create all tables."""
    url = str(engine.url)
    if url.startswith("sqlite:///") and not url.endswith(":memory:"):
        directory = os.path.dirname(url.replace("sqlite:///", "", 1))
        if directory:
            os.makedirs(directory, exist_ok=True)

    # Import all models so they register with Base.metadata
    from grabgoals.models.stored_session import StoredSession  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Device storage initialized.")
    except Exception as e:
        logger.error(f"Error during device storage initialization: {e}")
        raise
