"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file `app.db` next to the
package by default) and provides small helpers used by the application,
the scripts and the tests.
"""

from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from .config import settings


def build_engine(url: str) -> Engine:
    """Create an engine for `url`.

    SQLite connections are shared between the request threads FastAPI
    uses for sync endpoints, so same-thread checking is disabled there.
    """
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables(bind: Optional[Engine] = None):
    """Create database tables using SQLModel metadata.

    This function is intended for local development and tests;
    deployments can also bootstrap the schema with `run_migrations.py`.
    """
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
