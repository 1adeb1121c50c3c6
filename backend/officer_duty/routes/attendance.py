from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from officer_duty.core.dependencies import get_now, require_permission
from officer_duty.core.policy import Action, Resource
from officer_duty.database.session import get_db
from officer_duty.models.user import User
from officer_duty.schemas.attendance import AttendanceOut, AttendanceUpdate
from officer_duty.schemas.common import ApiResponse, ok
from officer_duty.services import attendance_service

router = APIRouter(prefix="/attendance", tags=["Attendance"])


# ---------------- CLOCK IN / OUT ----------------

@router.post("/checkin", response_model=ApiResponse[AttendanceOut], status_code=201)
def check_in(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: User = Depends(require_permission(Resource.attendance, Action.check_in)),
):
    attendance = attendance_service.check_in(db, current_user, now)
    return ok(attendance, "Checked in successfully")


@router.post("/checkout", response_model=ApiResponse[AttendanceOut])
def check_out(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: User = Depends(require_permission(Resource.attendance, Action.check_out)),
):
    attendance = attendance_service.check_out(db, current_user, now)
    return ok(attendance, "Checked out successfully")


# ---------------- READ ----------------

@router.get("/me", response_model=ApiResponse[list[AttendanceOut]])
def get_my_attendance(
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.attendance, Action.list_own)),
):
    return ok(attendance_service.list_my_attendance(db, current_user, start_date, end_date))


@router.get("", response_model=ApiResponse[list[AttendanceOut]])
def list_attendance(
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    officer_id: Optional[int] = Query(default=None),
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.attendance, Action.list)),
):
    return ok(attendance_service.list_attendance(
        db,
        current_user,
        start_date=start_date,
        end_date=end_date,
        officer_id=officer_id,
        status=status,
    ))


@router.get("/{attendance_id}", response_model=ApiResponse[AttendanceOut])
def get_attendance(
    attendance_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.attendance, Action.read)),
):
    return ok(attendance_service.get_attendance(db, current_user, attendance_id))


# ---------------- CORRECTIONS ----------------

@router.put("/{attendance_id}", response_model=ApiResponse[AttendanceOut])
def update_attendance(
    attendance_id: int,
    payload: AttendanceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.attendance, Action.update)),
):
    return ok(attendance_service.update_attendance(db, current_user, attendance_id, payload))


@router.delete("/{attendance_id}", response_model=ApiResponse[dict])
def delete_attendance(
    attendance_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.attendance, Action.delete)),
):
    attendance_service.delete_attendance(db, current_user, attendance_id)
    return ok({}, "Attendance record deleted")
