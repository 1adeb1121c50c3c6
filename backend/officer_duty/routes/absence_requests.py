from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from officer_duty.core.dependencies import get_now, require_permission
from officer_duty.core.policy import Action, Resource
from officer_duty.database.session import get_db
from officer_duty.models.user import User
from officer_duty.schemas.absence_request import AbsenceRequestCreate, AbsenceRequestOut, AbsenceStatusUpdate
from officer_duty.schemas.common import ApiResponse, ok
from officer_duty.services import absence_request_service

router = APIRouter(prefix="/absence-requests", tags=["Absence Requests"])


@router.post("", response_model=ApiResponse[AbsenceRequestOut], status_code=201)
def create_absence_request(
    payload: AbsenceRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.absence_requests, Action.create)),
):
    absence = absence_request_service.create_request(db, current_user, payload)
    return ok(absence, "Absence request submitted")


@router.get("/me", response_model=ApiResponse[list[AbsenceRequestOut]])
def get_my_absence_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.absence_requests, Action.list_own)),
):
    return ok(absence_request_service.list_my_requests(db, current_user))


@router.get("", response_model=ApiResponse[list[AbsenceRequestOut]])
def list_absence_requests(
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.absence_requests, Action.list)),
):
    return ok(absence_request_service.list_requests(db, current_user, status=status))


@router.get("/{request_id}", response_model=ApiResponse[AbsenceRequestOut])
def get_absence_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.absence_requests, Action.read)),
):
    return ok(absence_request_service.get_request(db, current_user, request_id))


@router.put("/{request_id}/status", response_model=ApiResponse[AbsenceRequestOut])
def decide_absence_request(
    request_id: int,
    payload: AbsenceStatusUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: User = Depends(require_permission(Resource.absence_requests, Action.decide)),
):
    absence = absence_request_service.decide_request(db, current_user, request_id, payload.status, now)
    return ok(absence, f"Absence request {payload.status}")


@router.delete("/{request_id}", response_model=ApiResponse[dict])
def delete_absence_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.absence_requests, Action.delete)),
):
    absence_request_service.delete_request(db, current_user, request_id)
    return ok({}, "Absence request deleted")
