from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from officer_duty.core.dependencies import require_permission
from officer_duty.core.policy import Action, Resource
from officer_duty.database.session import get_db
from officer_duty.models.user import User
from officer_duty.schemas.common import ApiResponse, ok
from officer_duty.schemas.user import OfficerCreate, OfficerUpdate, PrincipalOut
from officer_duty.services import officer_service

router = APIRouter(prefix="/officers", tags=["Officers"])


@router.get("", response_model=ApiResponse[list[PrincipalOut]])
def list_officers(
    department: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.officers, Action.list)),
):
    return ok(officer_service.list_officers(db, current_user, department=department))


@router.get("/{officer_id}", response_model=ApiResponse[PrincipalOut])
def get_officer(
    officer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.officers, Action.read)),
):
    return ok(officer_service.get_officer(db, current_user, officer_id))


@router.post("", response_model=ApiResponse[PrincipalOut], status_code=201)
def create_officer(
    payload: OfficerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.officers, Action.create)),
):
    return ok(officer_service.create_officer(db, current_user, payload))


@router.put("/{officer_id}", response_model=ApiResponse[PrincipalOut])
def update_officer(
    officer_id: int,
    payload: OfficerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.officers, Action.update)),
):
    return ok(officer_service.update_officer(db, current_user, officer_id, payload))


@router.delete("/{officer_id}", response_model=ApiResponse[dict])
def delete_officer(
    officer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.officers, Action.delete)),
):
    officer_service.delete_officer(db, current_user, officer_id)
    return ok({}, "Officer deleted")
