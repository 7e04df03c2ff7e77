"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Account / Person / Engagement factories and auth headers
- Local file storage in a temporary directory
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.deps import get_file_storage
from app.core.security import create_access_token, get_password_hash
from app.core.storage import LocalStorage
from app.crud.store import SqlAlchemyRecordStore
from app.models.account import Account, AccountRole
from app.models.engagement import Engagement
from app.models.person import Person
from app.services.authorization import Actor
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "Password123!"


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session):
    """Record store bound to the test session."""
    return SqlAlchemyRecordStore(db_session)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def client(db_session, upload_dir):
    """
    FastAPI test client with overridden database and storage dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: LocalStorage(str(upload_dir))

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_account(db_session):
    """Factory for committed accounts."""
    def _make(username, role=AccountRole.ALUMNI, is_active=True):
        account = Account(
            username=username,
            email=f"{username}@example.com",
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=role,
            is_active=is_active,
        )
        db_session.add(account)
        db_session.commit()
        db_session.refresh(account)
        return account
    return _make


@pytest.fixture
def make_person(db_session):
    """Factory for committed persons, optionally linked to an account."""
    counter = {"n": 0}

    def _make(account=None, **overrides):
        counter["n"] += 1
        fields = {
            "institution_id": f"NIM{counter['n']:04d}",
            "name": f"Alumnus {counter['n']}",
            "program": "Informatics",
            "cohort_year": 2020,
            "graduation_year": 2024,
            "email": f"alumnus{counter['n']}@example.com",
            "phone": "0812000000",
            "address": "Jl. Kampus 1",
            "account_id": account.id if account is not None else None,
            "is_deleted": False,
        }
        fields.update(overrides)
        person = Person(**fields)
        db_session.add(person)
        db_session.commit()
        db_session.refresh(person)
        return person
    return _make


@pytest.fixture
def make_engagement(db_session):
    """Factory for committed active engagements."""
    def _make(person, **overrides):
        fields = {
            "person_id": person.id,
            "employer": "Acme Corp",
            "position": "Software Engineer",
            "industry": "Technology",
            "location": "Jakarta",
            "salary_range": "10-15M",
            "start_date": date(2021, 1, 1),
            "end_date": None,
            "status": "active",
            "description": "Backend development",
        }
        fields.update(overrides)
        engagement = Engagement(**fields, is_deleted=False)
        db_session.add(engagement)
        db_session.commit()
        db_session.refresh(engagement)
        return engagement
    return _make


@pytest.fixture
def admin_account(make_account):
    return make_account("admin", role=AccountRole.ADMIN)


@pytest.fixture
def admin_actor(admin_account):
    return Actor.from_account(admin_account)


@pytest.fixture
def auth_headers():
    """Build a bearer Authorization header for an account."""
    def _headers(account):
        token = create_access_token(data={"sub": str(account.id), "role": account.role.value})
        return {"Authorization": f"Bearer {token}"}
    return _headers
