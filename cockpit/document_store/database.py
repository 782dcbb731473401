"""
Database engine and session management for the document store.
"""
import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Create declarative base
Base = declarative_base()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    SQLite engines share one connection across threads so that in-memory
    databases survive between sessions.
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        # Ensure the directory of a file database exists
        if url.database and url.database != ":memory:":
            directory = os.path.dirname(url.database)
            if directory:
                os.makedirs(directory, exist_ok=True)

        return create_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={
                "check_same_thread": False,
            },
        )

    # PostgreSQL configuration
    return create_engine(database_url, echo=echo)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine
    )


def create_tables(engine: Engine):
    """Create all document store tables."""
    Base.metadata.create_all(bind=engine)
    logger.debug(f"Document store tables ensured on {engine.url.render_as_string(hide_password=True)}")
