from pydantic import BaseModel, field_validator
import datetime as dt
from datetime import date, datetime
from typing import Literal, Optional

from officer_duty.schemas.common import PrincipalSummary

DutyStatus = Literal["pending", "ongoing", "completed", "cancelled"]


class DutyAssignmentCreate(BaseModel):
    user_id: int
    date: date
    task_location: str
    department: Optional[str] = None
    status: DutyStatus = "pending"

    @field_validator("task_location")
    @classmethod
    def validate_task_location(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("task_location is required")
        return cleaned

    @field_validator("department", mode="before")
    @classmethod
    def normalize_department(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value


class DutyAssignmentUpdate(BaseModel):
    user_id: Optional[int] = None
    date: Optional[dt.date] = None
    task_location: Optional[str] = None
    department: Optional[str] = None
    status: Optional[DutyStatus] = None

    @field_validator("task_location")
    @classmethod
    def validate_optional_task_location(cls, value: Optional[str]):
        if value is None:
            return value
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("task_location cannot be empty")
        return cleaned

    @field_validator("department", mode="before")
    @classmethod
    def normalize_department(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value


class DutyAssignmentOut(BaseModel):
    id: int
    user_id: int
    date: date
    officer_name: str
    department: str
    task_location: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: PrincipalSummary | None = None

    class Config:
        from_attributes = True
