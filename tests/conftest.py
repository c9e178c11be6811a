"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- Seed companies and jobs
- FastAPI test client
- Auth tokens
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, DatabaseClient, get_db
from app.core.security import create_access_token
from app.crud.job import JobRepository
from app.models import Company, Job
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
def seeded_jobs(db_session):
    """
    Seed three companies and four jobs.

    Returns the job ids in title order (Job1..Job4).
    """
    db_session.add_all([
        Company(handle="c1", name="C1", num_employees=1, description="Desc1", logo_url="http://c1.img"),
        Company(handle="c2", name="C2", num_employees=2, description="Desc2", logo_url="http://c2.img"),
        Company(handle="c3", name="C3", num_employees=3, description="Desc3", logo_url="http://c3.img"),
    ])
    db_session.flush()

    jobs = [
        Job(title="Job1", salary=100, equity=Decimal("0.1"), company_handle="c1"),
        Job(title="Job2", salary=200, equity=Decimal("0.2"), company_handle="c1"),
        Job(title="Job3", salary=300, equity=Decimal("0"), company_handle="c1"),
        Job(title="Job4", salary=None, equity=None, company_handle="c1"),
    ]
    db_session.add_all(jobs)
    db_session.commit()

    return [job.id for job in jobs]


@pytest.fixture
def job_repository(db_session):
    """JobRepository bound to the test session."""
    return JobRepository(DatabaseClient(db_session))


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    return create_access_token({"username": "admin", "isAdmin": True})


@pytest.fixture
def user_token():
    return create_access_token({"username": "u1", "isAdmin": False})


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(user_token):
    return {"Authorization": f"Bearer {user_token}"}
