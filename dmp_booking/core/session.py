from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from dmp_booking.core.security import decode_token, encode_token
from dmp_booking.models.enums import Role, UserStatus


@dataclass(frozen=True)
class SessionUser:
    """Authenticated identity attached to a request.

    Handlers receive it as an explicit argument (or None when the request
    carries no valid token).
    """

    id: str
    role: Role
    status: UserStatus
    category: Optional[str] = None
    inn: Optional[str] = None

    def claims(self) -> dict[str, Any]:
        return {"role": self.role.value, "status": self.status.value, "category": self.category, "inn": self.inn}

    @classmethod
    def from_claims(cls, payload: Mapping[str, Any]) -> "SessionUser":
        return cls(
            id=str(payload["sub"]),
            role=Role(payload["role"]),
            status=UserStatus(payload["status"]),
            category=payload.get("category"),
            inn=payload.get("inn"),
        )


def issue_token(session: SessionUser) -> str:
    return encode_token(session.id, session.claims())


def session_from_token(token: Optional[str]) -> Optional[SessionUser]:
    if not token:
        return None
    payload = decode_token(token)
    if payload is None:
        return None
    try:
        return SessionUser.from_claims(payload)
    except (KeyError, ValueError):
        # Signed but not ours: missing claims or an unknown role/status
        return None
