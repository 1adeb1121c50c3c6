import logging
from datetime import datetime, time

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from officer_duty.core.policy import Role, ScopeKind, scope_for
from officer_duty.models.absence_request import AbsenceRequest
from officer_duty.models.attendance import Attendance
from officer_duty.models.duty_assignment import ACTIVE_DUTY_STATUSES, DutyAssignment
from officer_duty.models.user import User

logger = logging.getLogger(__name__)

# Fixed for now; a clock-in after this local time counts as late.
LATE_CHECK_IN_THRESHOLD = time(9, 0)


def _distinct_users(query) -> int:
    return query.with_entities(func.count(func.distinct(Attendance.user_id))).scalar() or 0


def _attendance_counts(db: Session, now: datetime, officer_ids=None) -> tuple[int, int]:
    today = now.date()
    query = db.query(Attendance).filter(Attendance.date == today)
    if officer_ids is not None:
        query = query.filter(Attendance.user_id.in_(officer_ids))

    present = _distinct_users(query)
    late = _distinct_users(
        query.filter(Attendance.clock_in > datetime.combine(today, LATE_CHECK_IN_THRESHOLD))
    )
    return present, late


def get_admin_stats(db: Session, now: datetime) -> dict:
    present, late = _attendance_counts(db, now)
    pending = db.query(AbsenceRequest).filter(AbsenceRequest.status == "pending").count()

    return {
        "late_check_in_count": late,
        "present_today_count": present,
        "absence_request_count": pending,
    }


def get_supervisor_stats(db: Session, supervisor: User, now: datetime) -> dict:
    scope = scope_for(supervisor)
    if scope.kind is not ScopeKind.department:
        raise HTTPException(status_code=403, detail="Supervisor must have a department assigned")

    officer_ids = [
        officer_id
        for (officer_id,) in db.query(User.id).filter(
            User.role == Role.officer,
            User.department == scope.department
        ).all()
    ]
    logger.debug("Supervisor %s dashboard: %d officer(s) in %s", supervisor.id, len(officer_ids), scope.department)

    if not officer_ids:
        return {
            "late_check_in_count": 0,
            "present_today_count": 0,
            "absence_request_count": 0,
            "active_duty_assignments_count": 0,
            "total_officers_count": 0,
        }

    present, late = _attendance_counts(db, now, officer_ids)
    pending = db.query(AbsenceRequest).filter(
        AbsenceRequest.status == "pending",
        AbsenceRequest.user_id.in_(officer_ids)
    ).count()
    active_duty = db.query(DutyAssignment).filter(
        DutyAssignment.department == scope.department,
        DutyAssignment.status.in_(ACTIVE_DUTY_STATUSES)
    ).count()

    return {
        "late_check_in_count": late,
        "present_today_count": present,
        "absence_request_count": pending,
        "active_duty_assignments_count": active_duty,
        "total_officers_count": len(officer_ids),
    }
