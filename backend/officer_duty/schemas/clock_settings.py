from pydantic import BaseModel
from datetime import datetime, time
from typing import Optional

from officer_duty.core.clock_window import ClockWindowState
from officer_duty.schemas.common import PrincipalSummary


class ClockSettingsCreate(BaseModel):
    clock_in_start_time: time
    clock_out_start_time: time
    is_active: bool = True


class ClockSettingsUpdate(BaseModel):
    id: Optional[int] = None
    clock_in_start_time: Optional[time] = None
    clock_out_start_time: Optional[time] = None
    is_active: Optional[bool] = None


class ClockSettingsOut(BaseModel):
    id: int
    clock_in_start_time: time
    clock_out_start_time: time
    is_active: bool
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClockSettingsHistoryItem(BaseModel):
    id: int
    clock_in_start_time: time
    clock_out_start_time: time
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: PrincipalSummary | None = None
    updated_by: PrincipalSummary | None = None


class ClockAvailabilityOut(BaseModel):
    can_clock_in: bool
    can_clock_out: bool
    state: ClockWindowState
    message: str
    clock_settings: ClockSettingsOut | None = None
