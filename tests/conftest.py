import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.append(str(Path(__file__).resolve().parents[1]))
os.environ.setdefault("RATE_LIMIT_BACKEND", "memory")

from app.db.base import Base
from app.db.models import ProfessionalProfile, ServiceCategory, User, UserRole
from app.db.session import get_db
from app.main import app
from app.core.rate_limiter import rate_limiter
from app.core.security import get_password_hash

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CATEGORY_NAMES = ["Plumbing", "Electrical", "Carpentry", "Painting"]


@pytest.fixture(autouse=True)
def reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    rate_limiter.reset()


@pytest.fixture()
def client() -> TestClient:
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def categories() -> list[int]:
    db = TestingSessionLocal()
    try:
        rows = [ServiceCategory(name=name, description=None, is_active=True) for name in CATEGORY_NAMES]
        rows.append(ServiceCategory(name="Retired", description=None, is_active=False))
        db.add_all(rows)
        db.commit()
        return [row.id for row in rows]
    finally:
        db.close()


@pytest.fixture()
def professional_id() -> int:
    db = TestingSessionLocal()
    try:
        user = User(email="pro@example.com", hashed_password="x", role=UserRole.PROFESSIONAL.value)
        user.professional_profile = ProfessionalProfile(display_name="Pro", description=None)
        db.add(user)
        db.commit()
        return user.professional_profile.id
    finally:
        db.close()


@pytest.fixture()
def admin_headers(client) -> dict[str, str]:
    db = TestingSessionLocal()
    try:
        admin = User(
            email="admin@example.com",
            hashed_password=get_password_hash("StrongPass123"),
            role=UserRole.ADMIN.value,
        )
        db.add(admin)
        db.commit()
    finally:
        db.close()

    login = client.post("/auth/login", json={"email": "admin@example.com", "password": "StrongPass123"})
    return {"Authorization": f"Bearer {login.json()['access_token']}"}
