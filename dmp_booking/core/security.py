from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from jose import JWTError, jwt
from passlib.context import CryptContext

from dmp_booking.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=get_settings().bcrypt_rounds)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def check_password(password: str, hashed_password: str) -> tuple[bool, str | None]:
    """Verify a password and return (ok, new_hash).

    new_hash is set when the stored hash was made with outdated
    settings (e.g. fewer bcrypt rounds) and should replace it.
    """
    return pwd_context.verify_and_update(password, hashed_password)


def encode_token(subject: str, claims: Mapping[str, Any], expires_in: timedelta | None = None) -> str:
    settings = get_settings()
    issued = datetime.now(timezone.utc)
    expires = issued + (expires_in or timedelta(minutes=settings.access_token_exp_minutes))
    payload = {**claims, "sub": subject, "iat": int(issued.timestamp()), "exp": int(expires.timestamp())}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any] | None:
    """Signed, unexpired payload or None."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
