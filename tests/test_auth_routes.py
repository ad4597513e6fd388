import pytest
from sqlalchemy import select

from conftest import PASSWORD, auth_headers, reload
from dmp_booking.core.config import get_settings
from dmp_booking.models.enums import Role, UserStatus
from dmp_booking.models.user import User


def register(client, **overrides):
    payload = {"email": "new@example.com", "name": "New User", "password": PASSWORD, "role": "SUPPLIER"}
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


def test_category_manager_registers_as_pending(client):
    r = register(client, role="CATEGORY_MANAGER", category="Drinks")

    assert r.status_code == 200
    user = r.json()["user"]
    assert user["role"] == "CATEGORY_MANAGER"
    assert user["status"] == "PENDING"


def test_supplier_registers_as_approved(client):
    r = register(client, inn="5000000001")

    assert r.status_code == 200
    assert r.json()["user"]["status"] == "APPROVED"


def test_supplier_needs_approval_when_configured(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "supplier_requires_approval", True)

    r = register(client)

    assert r.json()["user"]["status"] == "PENDING"


def test_register_ignores_fields_of_other_roles(client, db):
    r = register(client, role="CATEGORY_MANAGER", category="Drinks", inn="5000000002")

    user = reload(db, User, r.json()["user"]["id"])
    assert user.category == "Drinks"
    assert user.inn is None


def test_duplicate_email_is_rejected(client):
    register(client)
    r = register(client, email="NEW@example.com")

    assert r.status_code == 409
    assert r.json() == {"error": "Email already exists"}


def test_invalid_payload_is_a_400(client):
    r = register(client, role="ADMIN")

    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request"


def test_login_and_me(client, make_user):
    user = make_user(role=Role.CATEGORY_MANAGER, email="km@example.com", category="Drinks")

    r = client.post("/api/auth/login", json={"email": "km@example.com", "password": PASSWORD})
    assert r.status_code == 200
    token = r.json()["access_token"]
    assert r.json()["token_type"] == "bearer"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json() == {"id": user.id, "role": "CATEGORY_MANAGER", "status": "APPROVED", "category": "Drinks", "inn": None}


def test_login_with_wrong_password(client, make_user):
    make_user(email="s@example.com")

    r = client.post("/api/auth/login", json={"email": "s@example.com", "password": "wrong-password"})

    assert r.status_code == 401
    assert r.json() == {"error": "Invalid credentials"}


@pytest.mark.parametrize("status", [UserStatus.PENDING, UserStatus.REJECTED])
def test_login_refused_until_approved(client, make_user, status):
    make_user(role=Role.CATEGORY_MANAGER, status=status, email="km@example.com")

    r = client.post("/api/auth/login", json={"email": "km@example.com", "password": PASSWORD})

    assert r.status_code == 403
    assert r.json() == {"error": "Your account is pending approval or has been rejected"}


def test_approved_account_can_log_in(client, make_user, dmp_manager):
    km = make_user(role=Role.CATEGORY_MANAGER, status=UserStatus.PENDING, email="km@example.com")
    client.post(f"/api/dmp/approve-km/{km.id}", headers=auth_headers(dmp_manager))

    r = client.post("/api/auth/login", json={"email": "km@example.com", "password": PASSWORD})

    assert r.status_code == 200


def test_me_requires_session(client):
    r = client.get("/api/auth/me")

    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_profile_update_respects_role_fields(client, db, category_manager):
    r = client.put(
        "/api/user/update",
        json={"name": "Renamed", "category": "Dairy", "inn": "999"},
        headers=auth_headers(category_manager),
    )

    assert r.status_code == 200
    assert r.json()["name"] == "Renamed"
    assert r.json()["category"] == "Dairy"
    assert r.json()["inn"] is None
    assert reload(db, User, category_manager.id).status == UserStatus.APPROVED


def test_suppliers_listing(client, make_user, supplier):
    make_user(role=Role.SUPPLIER, name="Another Supplier", inn="2222222222")
    make_user(role=Role.SUPPLIER, name="No INN")

    r = client.get("/api/suppliers")

    assert r.status_code == 200
    assert r.json() == [
        {"inn": "2222222222", "name": "Another Supplier"},
        {"inn": "1234567890", "name": "Supplier LLC"},
    ]


def test_db_status(client):
    r = client.get("/api/db-status")

    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_dmp_manager_cannot_self_register(client, db, make_user):
    km = make_user(role=Role.CATEGORY_MANAGER, status=UserStatus.PENDING)

    r = register(client, email="boss@example.com", role="DMP_MANAGER")

    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request"
    assert db.execute(select(User).where(User.email == "boss@example.com")).scalar_one_or_none() is None

    login = client.post("/api/auth/login", json={"email": "boss@example.com", "password": PASSWORD})
    assert login.status_code == 401
    assert reload(db, User, km.id).status == UserStatus.PENDING


def test_app_lifespan_runs_without_creating_tables_outside_dev(client):
    with client:
        assert client.get("/api/db-status").status_code == 200
