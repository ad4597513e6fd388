from starlette.requests import Request

from dmp_booking.core.session import SessionUser
from dmp_booking.models.enums import Role, UserStatus
from dmp_booking.services.audit_service import client_meta, query_audit_log, record_audit, record_transition, redact
from dmp_booking.services.transition_service import TRANSITIONS


def make_request(headers):
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": ("10.0.0.5", 5000),
    }
    return Request(scope)


def test_redact_hides_personal_data_at_any_depth():
    changes = {"status": "APPROVED", "profile": {"email": "a@example.com", "inn": "1"}, "items": [{"password": "x"}]}

    assert redact(changes) == {
        "status": "APPROVED",
        "profile": {"email": "<redacted>", "inn": "<redacted>"},
        "items": [{"password": "<redacted>"}],
    }


def test_client_meta_prefers_forwarded_for():
    assert client_meta(make_request({"X-Forwarded-For": "1.2.3.4, 10.0.0.1", "User-Agent": "pytest"})) == ("1.2.3.4", "pytest")
    assert client_meta(make_request({})) == ("10.0.0.5", "")
    assert client_meta(None) == ("", "")


def test_zone_release_records_cleared_fields(db, dmp_manager):
    actor = SessionUser(id=dmp_manager.id, role=Role.DMP_MANAGER, status=UserStatus.APPROVED)

    entry = record_transition(db, TRANSITIONS["zone-available"], "z1", actor=actor)

    assert entry.action_type == "ZONE_AVAILABLE"
    assert entry.target_type == "zone"
    assert entry.changes == {"status": "AVAILABLE", "cleared": ["supplier", "brand"]}


def test_query_filters_and_orders_newest_first(db, dmp_manager, category_manager):
    dmp = SessionUser(id=dmp_manager.id, role=Role.DMP_MANAGER, status=UserStatus.APPROVED)
    km = SessionUser(id=category_manager.id, role=Role.CATEGORY_MANAGER, status=UserStatus.APPROVED)
    first = record_audit(db, actor=dmp, action_type="APPROVE_KM", target_type="user", target_id="u1")
    second = record_audit(db, actor=dmp, action_type="REJECT_KM", target_type="user", target_id="u2")
    record_audit(db, actor=km, action_type="KM_APPROVE_BOOKING", target_type="booking", target_id="b1")

    by_dmp = query_audit_log(db, actor_user_id=dmp_manager.id)
    assert [e.id for e in by_dmp] == [second.id, first.id]
    assert [e.target_id for e in query_audit_log(db, target_type="booking")] == ["b1"]
    assert len(query_audit_log(db, limit=1)) == 1
