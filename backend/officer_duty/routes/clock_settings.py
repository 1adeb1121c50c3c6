from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from officer_duty.core.dependencies import get_now, require_permission
from officer_duty.core.policy import Action, Resource
from officer_duty.database.session import get_db
from officer_duty.models.user import User
from officer_duty.schemas.clock_settings import (
    ClockAvailabilityOut,
    ClockSettingsCreate,
    ClockSettingsHistoryItem,
    ClockSettingsOut,
    ClockSettingsUpdate,
)
from officer_duty.schemas.common import ApiResponse, ok
from officer_duty.services import clock_settings_service

router = APIRouter(prefix="/clock-settings", tags=["Clock Settings"])


@router.get("", response_model=ApiResponse[ClockSettingsOut])
def get_active_clock_settings(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.clock_settings, Action.read)),
):
    settings_row = clock_settings_service.get_active_settings(db)
    if settings_row is None:
        return ok(None, "Clock settings not configured")
    return ok(settings_row)


@router.get("/availability", response_model=ApiResponse[ClockAvailabilityOut])
def get_clock_availability(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: User = Depends(require_permission(Resource.clock_settings, Action.read)),
):
    availability, settings_row = clock_settings_service.get_availability(db, now)
    return ok({
        "can_clock_in": availability.can_clock_in,
        "can_clock_out": availability.can_clock_out,
        "state": availability.state,
        "message": availability.message,
        "clock_settings": settings_row,
    })


@router.get("/history", response_model=ApiResponse[list[ClockSettingsHistoryItem]])
def get_clock_settings_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.clock_settings, Action.history)),
):
    return ok(clock_settings_service.get_history(db))


@router.get("/{settings_id}", response_model=ApiResponse[ClockSettingsOut])
def get_clock_settings(
    settings_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.clock_settings, Action.history)),
):
    return ok(clock_settings_service.get_settings(db, settings_id))


@router.post("", response_model=ApiResponse[ClockSettingsOut], status_code=201)
def create_clock_settings(
    payload: ClockSettingsCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.clock_settings, Action.create)),
):
    settings_row = clock_settings_service.create_settings(db, payload, current_user)
    return ok(settings_row, "Clock settings created")


@router.put("", response_model=ApiResponse[ClockSettingsOut])
def update_clock_settings(
    payload: ClockSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.clock_settings, Action.update)),
):
    settings_row = clock_settings_service.update_settings(db, payload, current_user)
    return ok(settings_row, "Clock settings updated")


@router.delete("/{settings_id}", response_model=ApiResponse[dict])
def delete_clock_settings(
    settings_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.clock_settings, Action.delete)),
):
    clock_settings_service.delete_settings(db, settings_id)
    return ok({}, "Clock settings deleted")
