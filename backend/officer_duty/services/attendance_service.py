import logging
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager

from officer_duty.core.clock_window import ClockWindowState, spans_midnight, to_minutes
from officer_duty.core.policy import apply_scope, can_access_record, scope_for
from officer_duty.models.attendance import Attendance, CLOCKED_IN, CLOCKED_OUT
from officer_duty.models.user import User
from officer_duty.schemas.attendance import AttendanceUpdate
from officer_duty.services.clock_settings_service import get_availability

logger = logging.getLogger(__name__)

ALREADY_CHECKED_IN = "You have already checked in today. Please check out first."
NOT_CHECKED_IN = "No check-in record found for today. Please check in first."


def _hhmm(value) -> str:
    return value.strftime("%H:%M")


def _naive_local(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _scoped_query(db: Session, principal: User):
    query = (
        db.query(Attendance)
        .join(User, Attendance.user_id == User.id)
        .options(contains_eager(Attendance.user))
    )
    return apply_scope(
        query,
        scope_for(principal),
        owner_column=Attendance.user_id,
        department_column=User.department,
    )


def _date_range(query, start_date: Optional[date], end_date: Optional[date]):
    if start_date:
        query = query.filter(Attendance.date >= start_date)
    if end_date:
        query = query.filter(Attendance.date <= end_date)
    return query


def get_open_record(db: Session, user_id: int, work_date: date) -> Optional[Attendance]:
    return db.query(Attendance).filter(
        Attendance.user_id == user_id,
        Attendance.date == work_date,
        Attendance.status == CLOCKED_IN
    ).first()


# ---------------- CLOCK IN / OUT ----------------

def check_in(db: Session, officer: User, now: datetime) -> Attendance:
    availability, settings_row = get_availability(db, now)
    if availability.state is not ClockWindowState.active:
        raise HTTPException(status_code=400, detail=availability.message)
    if not availability.can_clock_in:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Clock-in is only allowed from {_hhmm(settings_row.clock_in_start_time)} "
                f"until before {_hhmm(settings_row.clock_out_start_time)}"
            )
        )

    today = now.date()
    if get_open_record(db, officer.id, today):
        raise HTTPException(status_code=400, detail=ALREADY_CHECKED_IN)

    attendance = Attendance(
        user_id=officer.id,
        date=today,
        clock_in=now,
        status=CLOCKED_IN
    )
    db.add(attendance)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent check-in won the unique (user, date, open) slot
        db.rollback()
        raise HTTPException(status_code=400, detail=ALREADY_CHECKED_IN)
    db.refresh(attendance)

    logger.info("User %s checked in at %s", officer.id, now.isoformat(timespec="minutes"))
    return attendance


def check_out(db: Session, officer: User, now: datetime) -> Attendance:
    availability, settings_row = get_availability(db, now)
    if availability.state is not ClockWindowState.active:
        raise HTTPException(status_code=400, detail=availability.message)
    if not availability.can_clock_out:
        raise HTTPException(
            status_code=400,
            detail=f"Clock-out is only allowed from {_hhmm(settings_row.clock_out_start_time)} onwards"
        )

    today = now.date()
    attendance = get_open_record(db, officer.id, today)
    overnight = spans_midnight(
        to_minutes(settings_row.clock_in_start_time), to_minutes(settings_row.clock_out_start_time)
    )
    if attendance is None and overnight:
        # the open record was started before midnight
        attendance = get_open_record(db, officer.id, today - timedelta(days=1))
    if attendance is None:
        raise HTTPException(status_code=404, detail=NOT_CHECKED_IN)

    attendance.clock_out = now
    attendance.status = CLOCKED_OUT
    db.commit()
    db.refresh(attendance)

    logger.info("User %s checked out at %s", officer.id, now.isoformat(timespec="minutes"))
    return attendance


# ---------------- READ ----------------

def list_my_attendance(
    db: Session,
    officer: User,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> list[Attendance]:
    query = db.query(Attendance).filter(Attendance.user_id == officer.id)
    query = _date_range(query, start_date, end_date)
    return query.order_by(Attendance.date.desc(), Attendance.clock_in.desc()).all()


def list_attendance(
    db: Session,
    principal: User,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    officer_id: Optional[int] = None,
    status: Optional[str] = None
) -> list[Attendance]:
    query = _scoped_query(db, principal)
    if officer_id:
        query = query.filter(Attendance.user_id == officer_id)
    if status:
        query = query.filter(Attendance.status == status)
    query = _date_range(query, start_date, end_date)
    return query.order_by(Attendance.date.desc(), Attendance.clock_in.desc()).all()


def get_attendance(db: Session, principal: User, attendance_id: int) -> Attendance:
    attendance = db.query(Attendance).filter(Attendance.id == attendance_id).first()
    if not attendance or not can_access_record(principal, attendance.user_id, attendance.user.department):
        raise HTTPException(status_code=404, detail="Attendance record not found")
    return attendance


# ---------------- CORRECTIONS ----------------

def update_attendance(db: Session, principal: User, attendance_id: int, payload: AttendanceUpdate) -> Attendance:
    attendance = get_attendance(db, principal, attendance_id)

    data = payload.model_dump(exclude_unset=True)
    clock_in = _naive_local(data.get("clock_in", attendance.clock_in))
    clock_out = _naive_local(data.get("clock_out", attendance.clock_out))

    if clock_in is None:
        raise HTTPException(status_code=400, detail="clock_in cannot be empty")
    if clock_out is not None and clock_out < clock_in:
        raise HTTPException(status_code=400, detail="clock_out cannot be before clock_in")

    attendance.clock_in = clock_in
    attendance.date = clock_in.date()
    attendance.clock_out = clock_out
    attendance.status = CLOCKED_OUT if clock_out is not None else CLOCKED_IN

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="The officer already has an open attendance record for that date")
    db.refresh(attendance)

    logger.info("Attendance %s corrected by user %s", attendance.id, principal.id)
    return attendance


def delete_attendance(db: Session, principal: User, attendance_id: int) -> None:
    attendance = get_attendance(db, principal, attendance_id)
    db.delete(attendance)
    db.commit()
    logger.info("Attendance %s deleted by user %s", attendance_id, principal.id)
