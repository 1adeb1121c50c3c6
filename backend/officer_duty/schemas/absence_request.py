from pydantic import BaseModel, field_validator, model_validator
from datetime import date, datetime
from typing import Optional

from officer_duty.models.absence_request import DECISION_STATUSES
from officer_duty.schemas.common import PrincipalSummary


# -------- CREATE --------
class AbsenceRequestCreate(BaseModel):
    start_date: date
    end_date: date
    reason: str

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Reason is required")
        return cleaned

    @model_validator(mode="after")
    def validate_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("Start date must be before or equal to end date")
        return self


class AbsenceStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: str):
        cleaned = value.strip().lower()
        if cleaned not in DECISION_STATUSES:
            raise ValueError("Please provide a valid status (approved or rejected)")
        return cleaned


# -------- RESPONSE --------
class AbsenceRequestOut(BaseModel):
    id: int
    user_id: int
    start_date: date
    end_date: date
    reason: str
    status: str
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: PrincipalSummary | None = None

    class Config:
        from_attributes = True
