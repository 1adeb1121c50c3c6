import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, contains_eager, joinedload

from officer_duty.core.policy import Role, apply_scope, can_access_record, scope_for
from officer_duty.models.absence_request import AbsenceRequest
from officer_duty.models.notification import ABSENCE_APPROVED, ABSENCE_REJECTED, ABSENCE_SUBMITTED
from officer_duty.models.user import User
from officer_duty.schemas.absence_request import AbsenceRequestCreate
from officer_duty.services.notification_service import notify_reviewers, push_notification

logger = logging.getLogger(__name__)


def create_request(db: Session, officer: User, payload: AbsenceRequestCreate) -> AbsenceRequest:
    absence = AbsenceRequest(
        user_id=officer.id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
        status="pending"
    )
    db.add(absence)
    db.flush()

    notify_reviewers(
        db,
        department=officer.department,
        title="New absence request",
        message=f"{officer.display_name} requested absence from {absence.start_date} to {absence.end_date}.",
        event_type=ABSENCE_SUBMITTED,
        reference_type="absence_request",
        reference_id=absence.id,
        created_by=officer.id
    )
    db.commit()
    db.refresh(absence)

    logger.info("Absence request %s submitted by user %s", absence.id, officer.id)
    return absence


def list_my_requests(db: Session, officer: User) -> list[AbsenceRequest]:
    return (
        db.query(AbsenceRequest)
        .options(joinedload(AbsenceRequest.user))
        .filter(AbsenceRequest.user_id == officer.id)
        .order_by(AbsenceRequest.created_at.desc(), AbsenceRequest.id.desc())
        .all()
    )


def list_requests(db: Session, principal: User, status: Optional[str] = None) -> list[AbsenceRequest]:
    query = (
        db.query(AbsenceRequest)
        .join(User, AbsenceRequest.user_id == User.id)
        .options(contains_eager(AbsenceRequest.user))
    )
    query = apply_scope(
        query,
        scope_for(principal),
        owner_column=AbsenceRequest.user_id,
        department_column=User.department,
    )
    if status:
        query = query.filter(AbsenceRequest.status == status)
    return query.order_by(AbsenceRequest.created_at.desc(), AbsenceRequest.id.desc()).all()


def get_request(db: Session, principal: User, request_id: int) -> AbsenceRequest:
    absence = db.query(AbsenceRequest).filter(AbsenceRequest.id == request_id).first()
    if not absence or not can_access_record(principal, absence.user_id, absence.user.department):
        raise HTTPException(status_code=404, detail="Absence request not found")
    return absence


def decide_request(
    db: Session,
    reviewer: User,
    request_id: int,
    status: str,
    now: datetime
) -> AbsenceRequest:
    absence = get_request(db, reviewer, request_id)
    if absence.status != "pending":
        raise HTTPException(status_code=400, detail="Only pending absence requests can be approved or rejected")

    absence.status = status
    absence.reviewed_by = reviewer.id
    absence.reviewed_at = now

    push_notification(
        db,
        user_id=absence.user_id,
        title=f"Absence request {status}",
        message=f"Your absence request from {absence.start_date} to {absence.end_date} has been {status}.",
        event_type=ABSENCE_APPROVED if status == "approved" else ABSENCE_REJECTED,
        reference_type="absence_request",
        reference_id=absence.id,
        created_by=reviewer.id
    )
    db.commit()
    db.refresh(absence)

    logger.info("Absence request %s %s by user %s", absence.id, status, reviewer.id)
    return absence


def delete_request(db: Session, principal: User, request_id: int) -> None:
    absence = get_request(db, principal, request_id)
    if principal.role == Role.officer and absence.status != "pending":
        raise HTTPException(status_code=400, detail="Only pending absence requests can be withdrawn")

    db.delete(absence)
    db.commit()
    logger.info("Absence request %s deleted by user %s", request_id, principal.id)
