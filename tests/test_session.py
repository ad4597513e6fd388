from datetime import datetime, timedelta, timezone

from jose import jwt

from dmp_booking.core.config import get_settings
from dmp_booking.core.security import check_password, decode_token, encode_token, hash_password
from dmp_booking.core.session import SessionUser, issue_token, session_from_token
from dmp_booking.models.enums import Role, UserStatus


def test_token_round_trip():
    session = SessionUser(id="u1", role=Role.SUPPLIER, status=UserStatus.APPROVED, inn="1234567890")

    assert session_from_token(issue_token(session)) == session


def test_missing_or_garbage_token_gives_no_session():
    assert session_from_token(None) is None
    assert session_from_token("") is None
    assert session_from_token("not-a-jwt") is None


def test_expired_token_gives_no_session():
    settings = get_settings()
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode(
        {"sub": "u1", "role": "DMP_MANAGER", "status": "APPROVED", "exp": int(past.timestamp())},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )

    assert session_from_token(token) is None


def test_token_signed_with_other_key_gives_no_session():
    token = jwt.encode({"sub": "u1", "role": "DMP_MANAGER", "status": "APPROVED"}, "another-key", algorithm="HS256")

    assert session_from_token(token) is None


def test_token_with_unknown_role_gives_no_session():
    token = encode_token("u1", {"role": "ADMIN", "status": "APPROVED"})

    assert session_from_token(token) is None


def test_password_hashing():
    hashed = hash_password("password123")

    assert hashed != "password123"
    assert check_password("password123", hashed) == (True, None)
    assert check_password("password124", hashed)[0] is False


def test_token_expiry_is_configurable():
    token = encode_token("u1", {"role": "SUPPLIER", "status": "APPROVED"}, expires_in=timedelta(seconds=-1))

    assert decode_token(token) is None


def test_subject_cannot_be_overridden_by_claims():
    payload = decode_token(encode_token("u1", {"sub": "someone-else"}))

    assert payload["sub"] == "u1"
