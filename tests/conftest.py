import os

# Settings are read once and cached, so the environment must be set
# before anything from dmp_booking is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import dmp_booking.models  # noqa: F401
from dmp_booking.core.deps import get_db
from dmp_booking.core.security import hash_password
from dmp_booking.core.session import issue_token
from dmp_booking.db.base import Base
from dmp_booking.main import app
from dmp_booking.models.enums import Role, UserStatus, ZoneStatus
from dmp_booking.models.user import User
from dmp_booking.models.zone import Zone
from dmp_booking.services.auth_service import session_for

PASSWORD = "password123"


@pytest.fixture()
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(role=Role.SUPPLIER, status=UserStatus.APPROVED, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=kwargs.pop("email", f"user{n}@example.com"),
            name=kwargs.pop("name", f"User {n}"),
            hashed_password=hash_password(kwargs.pop("password", PASSWORD)),
            role=role,
            status=status,
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_zone(db):
    counter = {"n": 0}

    def _make(status=ZoneStatus.AVAILABLE, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        zone = Zone(
            unique_identifier=kwargs.pop("unique_identifier", f"Z-{n:04d}"),
            city=kwargs.pop("city", "Moscow"),
            number=str(n),
            market=kwargs.pop("market", "Market 1"),
            main_macrozone=kwargs.pop("main_macrozone", "Drinks"),
            adjacent_macrozone=kwargs.pop("adjacent_macrozone", "Snacks, Dairy"),
            status=status,
            **kwargs,
        )
        db.add(zone)
        db.commit()
        db.refresh(zone)
        return zone

    return _make


@pytest.fixture()
def dmp_manager(make_user):
    return make_user(role=Role.DMP_MANAGER, email="dmp@example.com", name="DMP Manager")


@pytest.fixture()
def category_manager(make_user):
    return make_user(role=Role.CATEGORY_MANAGER, email="km@example.com", name="Category Manager", category="Drinks")


@pytest.fixture()
def supplier(make_user):
    return make_user(role=Role.SUPPLIER, email="supplier@example.com", name="Supplier LLC", inn="1234567890")


def auth_headers(user):
    return {"Authorization": f"Bearer {issue_token(session_for(user))}"}


def reload(db, model, record_id):
    db.expire_all()
    return db.get(model, record_id)
