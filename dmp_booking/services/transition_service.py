"""Role-gated status transitions.

A transition runs in three steps:

* ``authorize`` checks the explicit session against the rule's roles,
* ``execute`` applies a single point update through a ``StatusStore``,
* ``to_response`` maps the outcome to the wire payload.

The transition table below is configuration. Only the listed target
statuses can be reached. No rule returns an account to PENDING or a
booking to PENDING_KM.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol, Sequence

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dmp_booking.core.result import Err, Ok, Result
from dmp_booking.core.session import SessionUser
from dmp_booking.models.booking import Booking, BookingRequest
from dmp_booking.models.enums import BookingStatus, RequestStatus, Role, UserStatus, ZoneStatus
from dmp_booking.models.user import User
from dmp_booking.models.zone import Zone
from dmp_booking.services.audit_service import record_transition

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized"
NOT_FOUND_MESSAGE = "Record to update not found."
BULK_RECORD_ID = "bulk"


class FailureKind(str, enum.Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    EXECUTION = "EXECUTION"


FAILURE_STATUS_CODES = {
    FailureKind.UNAUTHORIZED: 401,
    FailureKind.EXECUTION: 500,
}


@dataclass(frozen=True)
class TransitionFailure:
    kind: FailureKind
    message: str


@dataclass(frozen=True)
class TransitionSuccess:
    record_id: str
    message: str


@dataclass(frozen=True)
class BulkTransitionSuccess:
    record_ids: tuple[str, ...]
    count: int
    message: str


@dataclass(frozen=True)
class TransitionRule:
    name: str
    entity: str
    target_status: enum.Enum
    allowed_roles: frozenset[Role]
    success_message: str
    cleared_fields: tuple[str, ...] = ()
    # Fields the caller may set alongside the status
    assignable_fields: tuple[str, ...] = ()

    @property
    def action_type(self) -> str:
        return self.name.upper().replace("-", "_")

    def values(self, assigned: Mapping[str, Any] | None = None) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.target_status}
        for field_name in self.cleared_fields:
            data[field_name] = None
        for field_name, value in (assigned or {}).items():
            if field_name not in self.assignable_fields:
                raise ValueError(f"{self.name} cannot assign {field_name}")
            data[field_name] = value
        return data


DMP_ONLY = frozenset({Role.DMP_MANAGER})
KM_ONLY = frozenset({Role.CATEGORY_MANAGER})
KM_OR_DMP = frozenset({Role.CATEGORY_MANAGER, Role.DMP_MANAGER})

TRANSITION_RULES: tuple[TransitionRule, ...] = (
    # Accounts
    TransitionRule("approve-km", "user", UserStatus.APPROVED, DMP_ONLY, "Category Manager approved successfully"),
    TransitionRule("reject-km", "user", UserStatus.REJECTED, DMP_ONLY, "Category Manager rejected successfully"),
    TransitionRule("approve-supplier", "user", UserStatus.APPROVED, DMP_ONLY, "Supplier approved successfully"),
    TransitionRule("reject-supplier", "user", UserStatus.REJECTED, DMP_ONLY, "Supplier rejected successfully"),
    # Bookings: category manager first, then DMP
    TransitionRule("km-approve-booking", "booking", BookingStatus.KM_APPROVED, KM_ONLY, "Booking approved successfully."),
    TransitionRule("km-reject-booking", "booking", BookingStatus.KM_REJECTED, KM_ONLY, "Booking rejected successfully."),
    TransitionRule("dmp-approve-booking", "booking", BookingStatus.DMP_APPROVED, DMP_ONLY, "Booking approved successfully."),
    TransitionRule("dmp-reject-booking", "booking", BookingStatus.DMP_REJECTED, DMP_ONLY, "Booking rejected successfully."),
    # Zones
    TransitionRule("zone-available", "zone", ZoneStatus.AVAILABLE, DMP_ONLY, "Zone status changed to AVAILABLE", cleared_fields=("supplier", "brand")),
    TransitionRule("zone-booked", "zone", ZoneStatus.BOOKED, DMP_ONLY, "Zone status changed to BOOKED"),
    TransitionRule("zone-unavailable", "zone", ZoneStatus.UNAVAILABLE, DMP_ONLY, "Zone status changed to UNAVAILABLE"),
    # Hand-assigning a supplier or brand takes the zone off the market
    TransitionRule("zone-assign", "zone", ZoneStatus.UNAVAILABLE, DMP_ONLY, "Zone updated", assignable_fields=("supplier", "brand")),
    # Booking requests
    TransitionRule("request-pending", "request", RequestStatus.PENDING, KM_OR_DMP, "Booking request status changed to PENDING"),
    TransitionRule("request-closed", "request", RequestStatus.CLOSED, KM_OR_DMP, "Booking request status changed to CLOSED"),
)

TRANSITIONS: dict[str, TransitionRule] = {rule.name: rule for rule in TRANSITION_RULES}


def rules_for(entity: str) -> list[TransitionRule]:
    return [rule for rule in TRANSITION_RULES if rule.entity == entity]


def find_rule(entity: str, status: str, roles: Iterable[Role] | None = None) -> TransitionRule | None:
    """Look up the rule reaching ``status`` on ``entity``.

    Rules that assign extra fields are never picked by status alone.
    When ``roles`` is given, a rule open to one of them is preferred.
    """
    candidates = [rule for rule in rules_for(entity) if rule.target_status.value == status and not rule.assignable_fields]
    if roles is not None:
        wanted = set(roles)
        for rule in candidates:
            if rule.allowed_roles & wanted:
                return rule
    return candidates[0] if candidates else None


def reachable_statuses(entity: str) -> list[str]:
    seen: list[str] = []
    for rule in rules_for(entity):
        if rule.target_status.value not in seen:
            seen.append(rule.target_status.value)
    return seen


# --- Store boundary ----------------------------------------------------------


class RecordNotFoundError(LookupError):
    def __init__(self, entity: str, record_id: str) -> None:
        super().__init__(NOT_FOUND_MESSAGE)
        self.entity = entity
        self.record_id = record_id


class StatusStore(Protocol):
    def update(self, entity: str, record_id: str, data: Mapping[str, Any]) -> None:
        ...

    def update_many(self, entity: str, record_ids: Sequence[str], data: Mapping[str, Any]) -> int:
        ...


ENTITY_MODELS = {
    "user": User,
    "booking": Booking,
    "zone": Zone,
    "request": BookingRequest,
}


class SqlAlchemyStatusStore:
    """Point updates by primary key, each committed on its own."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def update(self, entity: str, record_id: str, data: Mapping[str, Any]) -> None:
        model = ENTITY_MODELS[entity]
        try:
            result = self.db.execute(update(model).where(model.id == record_id).values(**data))
            if result.rowcount == 0:
                self.db.rollback()
                raise RecordNotFoundError(entity, record_id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def update_many(self, entity: str, record_ids: Sequence[str], data: Mapping[str, Any]) -> int:
        model = ENTITY_MODELS[entity]
        try:
            result = self.db.execute(update(model).where(model.id.in_(record_ids)).values(**data))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return result.rowcount


# --- Gate / executor / formatter ---------------------------------------------


def authorize(session: SessionUser | None, rule: TransitionRule) -> Result[SessionUser, TransitionFailure]:
    # No session and wrong role collapse into the same answer
    if session is None or session.role not in rule.allowed_roles:
        return Err(TransitionFailure(FailureKind.UNAUTHORIZED, UNAUTHORIZED_MESSAGE))
    return Ok(session)


def execute(
    store: StatusStore,
    rule: TransitionRule,
    record_id: str,
    assigned: Mapping[str, Any] | None = None,
) -> Result[TransitionSuccess, TransitionFailure]:
    try:
        store.update(rule.entity, record_id, rule.values(assigned))
    except (RecordNotFoundError, SQLAlchemyError) as exc:
        logger.warning("Transition %s failed for %s %s: %s", rule.name, rule.entity, record_id, exc)
        return Err(TransitionFailure(FailureKind.EXECUTION, str(exc)))

    logger.info("Transition %s applied to %s %s", rule.name, rule.entity, record_id)
    return Ok(TransitionSuccess(record_id=record_id, message=rule.success_message))


def execute_many(store: StatusStore, rule: TransitionRule, record_ids: Sequence[str]) -> Result[BulkTransitionSuccess, TransitionFailure]:
    """Apply one rule to many records in a single statement.

    Unknown ids are not an error; ``count`` says how many rows matched.
    """
    try:
        count = store.update_many(rule.entity, record_ids, rule.values())
    except SQLAlchemyError as exc:
        logger.warning("Bulk transition %s failed for %d %s records: %s", rule.name, len(record_ids), rule.entity, exc)
        return Err(TransitionFailure(FailureKind.EXECUTION, str(exc)))

    logger.info("Bulk transition %s applied to %d of %d %s records", rule.name, count, len(record_ids), rule.entity)
    return Ok(BulkTransitionSuccess(record_ids=tuple(record_ids), count=count, message=rule.success_message))


def run_transition(
    store: StatusStore,
    session: SessionUser | None,
    rule: TransitionRule,
    record_id: str,
    assigned: Mapping[str, Any] | None = None,
) -> Result[TransitionSuccess, TransitionFailure]:
    gate = authorize(session, rule)
    if isinstance(gate, Err):
        logger.warning("Transition %s refused for %s %s", rule.name, rule.entity, record_id)
        return gate
    return execute(store, rule, record_id, assigned)


def run_bulk_transition(
    store: StatusStore,
    session: SessionUser | None,
    rule: TransitionRule,
    record_ids: Sequence[str],
) -> Result[BulkTransitionSuccess, TransitionFailure]:
    gate = authorize(session, rule)
    if isinstance(gate, Err):
        logger.warning("Bulk transition %s refused for %d %s records", rule.name, len(record_ids), rule.entity)
        return gate
    return execute_many(store, rule, record_ids)


def to_response(result: Result[TransitionSuccess | BulkTransitionSuccess, TransitionFailure]) -> JSONResponse:
    if isinstance(result, Err):
        return JSONResponse(status_code=FAILURE_STATUS_CODES[result.error.kind], content={"error": result.error.message})
    if isinstance(result.value, BulkTransitionSuccess):
        return JSONResponse(content={"message": result.value.message, "count": result.value.count})
    return JSONResponse(content={"message": result.value.message})


def _audit_transition(
    db: Session,
    rule: TransitionRule,
    record_id: str,
    *,
    session: SessionUser,
    request: Request | None,
    extra_changes: Mapping[str, Any] | None = None,
) -> None:
    # The status update is already committed; a lost audit row must not
    # turn it into a reported failure.
    try:
        record_transition(db, rule, record_id, actor=session, request=request, extra_changes=extra_changes)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Audit write failed after %s on %s %s", rule.name, rule.entity, record_id)


def perform_transition(
    db: Session,
    rule: TransitionRule,
    record_id: str,
    *,
    session: SessionUser | None,
    request: Request | None = None,
    assigned: Mapping[str, Any] | None = None,
) -> JSONResponse:
    """Run a transition against the database and audit it on success."""
    result = run_transition(SqlAlchemyStatusStore(db), session, rule, record_id, assigned)
    if isinstance(result, Ok) and session is not None:
        _audit_transition(db, rule, record_id, session=session, request=request, extra_changes={"assigned": dict(assigned)} if assigned else None)
    return to_response(result)


def _refused_or_rule(entity: str, status: str, session: SessionUser | None, target: str) -> TransitionRule | JSONResponse:
    if session is None or not any(session.role in rule.allowed_roles for rule in rules_for(entity)):
        logger.warning("Status change on %s %s refused", entity, target)
        return to_response(Err(TransitionFailure(FailureKind.UNAUTHORIZED, UNAUTHORIZED_MESSAGE)))

    rule = find_rule(entity, status, roles=[session.role])
    if rule is None:
        return JSONResponse(status_code=400, content={"error": "Invalid status value", "valid_values": reachable_statuses(entity)})
    return rule


def perform_status_change(
    db: Session,
    entity: str,
    record_id: str,
    status: str,
    *,
    session: SessionUser | None,
    request: Request | None = None,
) -> JSONResponse:
    """Resolve the rule for a requested target status, then run it."""
    rule = _refused_or_rule(entity, status, session, record_id)
    if isinstance(rule, JSONResponse):
        return rule
    return perform_transition(db, rule, record_id, session=session, request=request)


def perform_bulk_status_change(
    db: Session,
    entity: str,
    record_ids: Sequence[str],
    status: str,
    *,
    session: SessionUser | None,
    request: Request | None = None,
) -> JSONResponse:
    """Same as ``perform_status_change`` for many records, audited as one entry."""
    record_ids = list(dict.fromkeys(record_ids))
    rule = _refused_or_rule(entity, status, session, f"{len(record_ids)} records")
    if isinstance(rule, JSONResponse):
        return rule

    result = run_bulk_transition(SqlAlchemyStatusStore(db), session, rule, record_ids)
    if isinstance(result, Ok) and session is not None:
        _audit_transition(
            db,
            rule,
            BULK_RECORD_ID,
            session=session,
            request=request,
            extra_changes={"record_ids": record_ids, "count": result.value.count},
        )
    return to_response(result)
