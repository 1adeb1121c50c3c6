import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from officer_duty.core.clock_window import ClockAvailability, evaluate
from officer_duty.models.clock_settings import ClockSettings
from officer_duty.models.user import User
from officer_duty.schemas.clock_settings import ClockSettingsCreate, ClockSettingsUpdate

logger = logging.getLogger(__name__)


def get_active_settings(db: Session) -> Optional[ClockSettings]:
    return db.query(ClockSettings).filter(ClockSettings.is_active == True).first()  # noqa: E712


def get_latest_settings(db: Session) -> Optional[ClockSettings]:
    return db.query(ClockSettings).order_by(ClockSettings.created_at.desc(), ClockSettings.id.desc()).first()


def get_current_settings(db: Session) -> Optional[ClockSettings]:
    """The active row, else the most recent one (which is then disabled)."""
    return get_active_settings(db) or get_latest_settings(db)


def get_availability(db: Session, now: datetime) -> tuple[ClockAvailability, Optional[ClockSettings]]:
    settings_row = get_current_settings(db)
    return evaluate(now, settings_row), settings_row


def _deactivate_others(db: Session, keep_id: Optional[int] = None) -> None:
    query = db.query(ClockSettings).filter(ClockSettings.is_active == True)  # noqa: E712
    if keep_id is not None:
        query = query.filter(ClockSettings.id != keep_id)
    for row in query.all():
        row.is_active = False
    db.flush()


def _commit_or_conflict(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=400,
            detail="Another clock settings change is in progress. Please retry."
        )


def create_settings(db: Session, payload: ClockSettingsCreate, admin: User) -> ClockSettings:
    if payload.is_active:
        _deactivate_others(db)

    settings_row = ClockSettings(
        clock_in_start_time=payload.clock_in_start_time,
        clock_out_start_time=payload.clock_out_start_time,
        is_active=payload.is_active,
        created_by=admin.id,
    )
    db.add(settings_row)
    _commit_or_conflict(db)
    db.refresh(settings_row)

    logger.info(
        "Clock settings %s created by user %s (clock-in %s, clock-out %s, active=%s)",
        settings_row.id, admin.id, settings_row.clock_in_start_time,
        settings_row.clock_out_start_time, settings_row.is_active,
    )
    return settings_row


def update_settings(db: Session, payload: ClockSettingsUpdate, admin: User) -> ClockSettings:
    settings_row = None
    if payload.id is not None:
        settings_row = db.query(ClockSettings).filter(ClockSettings.id == payload.id).first()
    if settings_row is None:
        settings_row = get_latest_settings(db)
    if settings_row is None:
        raise HTTPException(status_code=404, detail="Clock settings not found. Please create settings first.")

    if payload.clock_in_start_time is not None:
        settings_row.clock_in_start_time = payload.clock_in_start_time
    if payload.clock_out_start_time is not None:
        settings_row.clock_out_start_time = payload.clock_out_start_time
    if payload.is_active is not None:
        if payload.is_active and not settings_row.is_active:
            _deactivate_others(db, keep_id=settings_row.id)
        settings_row.is_active = payload.is_active
    settings_row.updated_by = admin.id

    _commit_or_conflict(db)
    db.refresh(settings_row)

    logger.info("Clock settings %s updated by user %s (active=%s)", settings_row.id, admin.id, settings_row.is_active)
    return settings_row


def get_settings(db: Session, settings_id: int) -> ClockSettings:
    settings_row = db.query(ClockSettings).filter(ClockSettings.id == settings_id).first()
    if not settings_row:
        raise HTTPException(status_code=404, detail="Clock settings not found")
    return settings_row


def delete_settings(db: Session, settings_id: int) -> None:
    settings_row = get_settings(db, settings_id)
    db.delete(settings_row)
    db.commit()
    logger.info("Clock settings %s deleted", settings_id)


def get_history(db: Session) -> list[dict]:
    rows = (
        db.query(ClockSettings)
        .options(joinedload(ClockSettings.created_by_user), joinedload(ClockSettings.updated_by_user))
        .order_by(ClockSettings.created_at.desc(), ClockSettings.id.desc())
        .all()
    )

    return [
        {
            "id": row.id,
            "clock_in_start_time": row.clock_in_start_time,
            "clock_out_start_time": row.clock_out_start_time,
            "is_active": row.is_active,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
            "created_by": row.created_by_user,
            "updated_by": row.updated_by_user,
        }
        for row in rows
    ]
