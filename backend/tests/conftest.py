from pathlib import Path
import os
import tempfile
import pytest

# Point the app at a throwaway SQLite file before anything imports it.
_DB_DIR = Path(tempfile.mkdtemp(prefix="grading-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"

from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel, Session, create_engine  # noqa: E402
from grading_system.database import engine, create_db_and_tables  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Ensure empty tables in the shared test database for every test."""
    SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    yield


@pytest.fixture
def session():
    """Session on a private in-memory database for repository/service tests."""
    mem_engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_db_and_tables(mem_engine)
    with Session(mem_engine) as s:
        yield s
