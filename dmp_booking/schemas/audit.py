from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from dmp_booking.models.enums import Role


class AuditEntryOut(BaseModel):
    id: str
    created_at: datetime
    actor_user_id: str | None
    actor_role: Role | None
    action_type: str
    target_type: str
    target_id: str
    summary: str
    changes: dict | None

    class Config:
        from_attributes = True


class AuditEntryDetailOut(AuditEntryOut):
    ip_address: str
    user_agent: str
