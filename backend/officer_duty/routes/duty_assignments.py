from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from officer_duty.core.dependencies import require_permission
from officer_duty.core.policy import Action, Resource
from officer_duty.database.session import get_db
from officer_duty.models.user import User
from officer_duty.schemas.common import ApiResponse, ok
from officer_duty.schemas.duty_assignment import DutyAssignmentCreate, DutyAssignmentOut, DutyAssignmentUpdate
from officer_duty.services import duty_assignment_service

router = APIRouter(prefix="/duty-assignments", tags=["Duty Assignments"])


@router.get("", response_model=ApiResponse[list[DutyAssignmentOut]])
def list_duty_assignments(
    user_id: Optional[int] = Query(default=None),
    status: Optional[str] = Query(default=None),
    department: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.duty_assignments, Action.list)),
):
    return ok(duty_assignment_service.list_assignments(
        db,
        current_user,
        user_id=user_id,
        status=status,
        department=department,
    ))


@router.get("/me", response_model=ApiResponse[list[DutyAssignmentOut]])
def list_my_duty_assignments(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.duty_assignments, Action.list_own)),
):
    return ok(duty_assignment_service.list_my_assignments(db, current_user))


@router.get("/{assignment_id}", response_model=ApiResponse[DutyAssignmentOut])
def get_duty_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.duty_assignments, Action.read)),
):
    return ok(duty_assignment_service.get_assignment(db, current_user, assignment_id))


@router.post("", response_model=ApiResponse[DutyAssignmentOut], status_code=201)
def create_duty_assignment(
    payload: DutyAssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.duty_assignments, Action.create)),
):
    return ok(duty_assignment_service.create_assignment(db, current_user, payload))


@router.put("/{assignment_id}", response_model=ApiResponse[DutyAssignmentOut])
def update_duty_assignment(
    assignment_id: int,
    payload: DutyAssignmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.duty_assignments, Action.update)),
):
    return ok(duty_assignment_service.update_assignment(db, current_user, assignment_id, payload))


@router.delete("/{assignment_id}", response_model=ApiResponse[dict])
def delete_duty_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.duty_assignments, Action.delete)),
):
    duty_assignment_service.delete_assignment(db, current_user, assignment_id)
    return ok({}, "Duty assignment deleted")
