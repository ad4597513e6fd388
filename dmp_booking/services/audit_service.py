from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Mapping

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from dmp_booking.core.session import SessionUser
from dmp_booking.models.audit_log import AuditLog

if TYPE_CHECKING:
    from dmp_booking.services.transition_service import TransitionRule

logger = logging.getLogger(__name__)

# Personal data never lands in the audit trail
REDACTED_KEYS = frozenset({"password", "hashed_password", "email", "name", "inn", "access_token"})

MAX_AUDIT_ROWS = 500


def redact(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return {k: "<redacted>" if k in REDACTED_KEYS else redact(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [redact(v) for v in obj]
    return obj


def client_meta(request: Request | None) -> tuple[str, str]:
    """Return (ip, user agent), trusting the first X-Forwarded-For hop."""
    if request is None:
        return "", ""
    forwarded = request.headers.get("x-forwarded-for", "")
    ip = forwarded.split(",")[0].strip() or (request.client.host if request.client else "")
    return ip[:64], request.headers.get("user-agent", "")[:255]


def record_audit(
    db: Session,
    *,
    actor: SessionUser | None,
    action_type: str,
    target_type: str,
    target_id: str,
    summary: str = "",
    changes: Mapping[str, Any] | None = None,
    request: Request | None = None,
) -> AuditLog:
    ip, ua = client_meta(request)
    entry = AuditLog(
        actor_user_id=actor.id if actor else None,
        actor_role=actor.role if actor else None,
        action_type=action_type,
        target_type=target_type,
        target_id=str(target_id),
        summary=summary[:255],
        changes=redact(changes) if changes is not None else None,
        ip_address=ip,
        user_agent=ua,
    )
    db.add(entry)
    db.commit()
    logger.debug("Audit %s on %s %s", action_type, target_type, target_id)
    return entry


def record_transition(
    db: Session,
    rule: TransitionRule,
    record_id: str,
    *,
    actor: SessionUser,
    request: Request | None = None,
    extra_changes: Mapping[str, Any] | None = None,
) -> AuditLog:
    changes: dict[str, Any] = {"status": rule.target_status.value}
    if rule.cleared_fields:
        changes["cleared"] = list(rule.cleared_fields)
    if extra_changes:
        changes.update(extra_changes)
    return record_audit(
        db,
        actor=actor,
        action_type=rule.action_type,
        target_type=rule.entity,
        target_id=record_id,
        summary=rule.success_message,
        changes=changes,
        request=request,
    )


def query_audit_log(
    db: Session,
    *,
    since: datetime | None = None,
    until: datetime | None = None,
    actor_user_id: str | None = None,
    action_type: str | None = None,
    target_type: str | None = None,
    target_id: str | None = None,
    limit: int = MAX_AUDIT_ROWS,
) -> list[AuditLog]:
    q = select(AuditLog)
    if since:
        q = q.where(AuditLog.created_at >= since)
    if until:
        q = q.where(AuditLog.created_at <= until)
    if actor_user_id:
        q = q.where(AuditLog.actor_user_id == actor_user_id)
    if action_type:
        q = q.where(AuditLog.action_type == action_type)
    if target_type:
        q = q.where(AuditLog.target_type == target_type)
    if target_id:
        q = q.where(AuditLog.target_id == target_id)

    q = q.order_by(AuditLog.created_at.desc()).limit(min(limit, MAX_AUDIT_ROWS))
    return list(db.execute(q).scalars().all())
