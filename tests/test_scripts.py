from sqlalchemy import select

from dmp_booking.models.enums import Role, UserStatus
from dmp_booking.models.user import User
from dmp_booking.scripts.check_db import mask_database_url
from dmp_booking.scripts.seed import SEED_USERS, seed_users
from dmp_booking.scripts.update_category_manager import assign_category_to_managers, most_common_category


def test_seed_creates_one_approved_user_per_role(db):
    assert seed_users(db) == len(SEED_USERS)

    users = db.execute(select(User)).scalars().all()
    assert {u.role for u in users} == set(Role)
    assert {u.status for u in users} == {UserStatus.APPROVED}


def test_seed_skips_populated_database(db, make_user):
    make_user()

    assert seed_users(db) == 0


def test_mask_database_url():
    assert mask_database_url("postgresql://dmp:secret@db:5432/dmp") == "postgresql://***:***@db:5432/dmp"
    assert mask_database_url("sqlite:///./dmp_booking.db") == "sqlite:///./dmp_booking.db"


def test_assign_most_common_category(db, make_user, make_zone):
    make_zone(category="Drinks")
    make_zone(category="Drinks")
    make_zone(category="Dairy")
    km = make_user(role=Role.CATEGORY_MANAGER)
    supplier = make_user(role=Role.SUPPLIER)

    assert most_common_category(db) == "Drinks"
    assert assign_category_to_managers(db) == 1

    db.expire_all()
    assert db.get(User, km.id).category == "Drinks"
    assert db.get(User, supplier.id).category is None


def test_assign_category_without_zones(db, make_user):
    make_user(role=Role.CATEGORY_MANAGER)

    assert assign_category_to_managers(db) == 0
