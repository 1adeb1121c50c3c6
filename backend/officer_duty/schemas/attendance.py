from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional

from officer_duty.schemas.common import PrincipalSummary


class AttendanceUpdate(BaseModel):
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None


class AttendanceOut(BaseModel):
    id: int
    user_id: int
    date: date
    clock_in: datetime
    clock_out: Optional[datetime] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: PrincipalSummary | None = None

    class Config:
        from_attributes = True
