from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, Index, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from dmp_booking.db.base import Base
from dmp_booking.models.enums import Role


class AuditLog(Base):
    """Append-only trail of account, booking and zone changes."""

    __tablename__ = "audit_logs"
    __table_args__ = (Index("ix_audit_logs_target", "target_type", "target_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    actor_user_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    # Role at the time of the action; a later role change does not rewrite history
    actor_role: Mapped[Role | None] = mapped_column(Enum(Role, native_enum=False, length=32), nullable=True)

    action_type: Mapped[str] = mapped_column(String(64), nullable=False)
    target_type: Mapped[str] = mapped_column(String(32), nullable=False)  # user|booking|zone|request
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)

    summary: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    changes: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    ip_address: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    user_agent: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
