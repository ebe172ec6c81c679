# tests/conftest.py
import dataclasses
import sys
import pytest
from pathlib import Path

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from stacks.app import Services, Stacks
from stacks.config import CascadeMode, Settings
from stacks.db import Database


@pytest.fixture
def test_db_path(tmp_path):
    """Location of a fresh database file for one test"""
    return str(tmp_path / "test_stacks.db")


@pytest.fixture
def database(test_db_path):
    """Create a test database with the full schema"""
    db = Database(f"sqlite:///{test_db_path}", busy_timeout_ms=5000)
    db.init_db()
    yield db
    db.engine.dispose()


@pytest.fixture
def db_session(database):
    """Create a new database session for a test.

    Nothing is committed; tests that need separate transactions use the
    ``stacks`` fixture instead, never both.
    """
    session = database._SessionFactory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def services(db_session):
    """Every service wired together over the test session, unassigning on cascade"""
    return Services.build(db_session)


@pytest.fixture
def settings(test_db_path):
    return Settings(database_url=f"sqlite:///{test_db_path}", cascade_stale_after_seconds=0)


@pytest.fixture
def stacks(database, settings):
    """The engine over the test database, unassigning books on cascade"""
    return Stacks(database, settings)


@pytest.fixture
def deleting_stacks(database, settings):
    """The engine over the test database, deleting books on cascade"""
    return Stacks(database, dataclasses.replace(settings, cascade_mode=CascadeMode.DELETE))
