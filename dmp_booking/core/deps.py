from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from dmp_booking.core.session import SessionUser, session_from_token
from dmp_booking.db.session import SessionLocal
from dmp_booking.models.enums import Role

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_optional_session(token: str | None = Depends(oauth2_scheme)) -> SessionUser | None:
    return session_from_token(token)


def get_current_session(session: SessionUser | None = Depends(get_optional_session)) -> SessionUser:
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return session


def require_roles(*roles: Role) -> Callable:
    """Dependency factory for read endpoints restricted to some roles.

    Missing session and wrong role both answer 401 Unauthorized.
    """

    allowed = frozenset(roles)

    def dep(session: SessionUser | None = Depends(get_optional_session)) -> SessionUser:
        if session is None or session.role not in allowed:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        return session

    return dep
