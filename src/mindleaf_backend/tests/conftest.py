"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys

# settings are read on import; keep hashing cheap and the default engine in memory
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AWS_S3_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure mindleaf_backend is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from mindleaf_backend.database import get_db
from mindleaf_backend.model import Base, UserRole
from mindleaf_backend.server import app
from mindleaf_backend.services.storage_service import LessonFileStorage, get_storage_service
from mindleaf_backend.tests.fixtures import make_user


@pytest.fixture
def db_session():
    """Session on a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def storage(tmp_path):
    """Local-only storage rooted in the test's temp dir."""
    return LessonFileStorage(client=None, bucket=None, uploads_dir=str(tmp_path / "uploads"))


@pytest.fixture
def client(db_session, storage):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage

    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin@mindleaf.io", UserRole.ADMIN)


@pytest.fixture
def creator(db_session):
    return make_user(db_session, "creator@mindleaf.io", UserRole.CREATOR)


@pytest.fixture
def student(db_session):
    return make_user(db_session, "student@mindleaf.io", UserRole.STUDENT)


@pytest.fixture
def other_student(db_session):
    return make_user(db_session, "other@mindleaf.io", UserRole.STUDENT)
