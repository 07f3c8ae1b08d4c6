"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown with seeded companies, jobs and users
- FastAPI test client
- Auth headers for a regular user and an admin
"""

import sqlite3
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, get_db
from jobly.core.security import create_access_token, get_password_hash
from jobly.models import Company, Job, User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# psycopg2 binds Decimal natively; sqlite3 needs to be told how
sqlite3.register_adapter(Decimal, str)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Hashing is slow; do it once per run
TEST_PASSWORD_HASH = get_password_hash("password1")


@pytest.fixture
def db_session():
    """
    Create a fresh, seeded database for each test.

    Seed data:
        companies c1, c2, c3 (1, 2, 3 employees)
        jobs Job1, Job2, Job3 under c1 (salary 100/200/300, equity 0.1/0.2/None)
        users u1 (regular) and admin (admin)
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()

    db.add_all([
        Company(handle="c1", name="C1", description="Desc1", num_employees=1, logo_url="http://c1.img"),
        Company(handle="c2", name="C2", description="Desc2", num_employees=2, logo_url="http://c2.img"),
        Company(handle="c3", name="C3", description="Desc3", num_employees=3, logo_url="http://c3.img"),
    ])
    db.flush()
    db.add_all([
        Job(title="Job1", salary=100, equity=Decimal("0.1"), company_handle="c1"),
        Job(title="Job2", salary=200, equity=Decimal("0.2"), company_handle="c1"),
        Job(title="Job3", salary=300, equity=None, company_handle="c1"),
        User(username="u1", hashed_password=TEST_PASSWORD_HASH, first_name="U1F",
             last_name="U1L", email="user1@user.com", is_admin=False),
        User(username="admin", hashed_password=TEST_PASSWORD_HASH, first_name="AdF",
             last_name="AdL", email="admin@user.com", is_admin=True),
    ])
    db.commit()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def job_ids(db_session):
    """Ids of Job1, Job2, Job3 in title order"""
    return [job.id for job in db_session.query(Job).order_by(Job.title).all()]


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
def user_headers():
    token = create_access_token({"sub": "u1", "is_admin": False})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    token = create_access_token({"sub": "admin", "is_admin": True})
    return {"Authorization": f"Bearer {token}"}
