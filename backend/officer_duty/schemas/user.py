from pydantic import BaseModel, field_validator, model_validator
from datetime import datetime
from typing import Optional

from officer_duty.core.policy import Role


def _clean_username(value: str) -> str:
    cleaned = value.strip()
    if len(cleaned) < 3:
        raise ValueError("Username must be at least 3 characters")
    return cleaned


def _check_password(value: str) -> str:
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters")
    return value


class LoginRequest(BaseModel):
    username: str
    password: str

    @field_validator("username", "password")
    @classmethod
    def validate_non_empty(cls, value: str):
        if not value.strip():
            raise ValueError("Please provide username and password")
        return value


class RegisterRequest(BaseModel):
    username: str
    password: str
    role: Role = Role.officer
    full_name: Optional[str] = None
    department: Optional[str] = None

    @field_validator("full_name", "department", mode="before")
    @classmethod
    def normalize_optional_strings(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str):
        return _clean_username(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str):
        return _check_password(value)

    @model_validator(mode="after")
    def validate_supervisor_department(self):
        if self.role == Role.supervisor and not self.department:
            raise ValueError("Department is required for supervisors")
        return self


class AuthData(BaseModel):
    id: int
    username: str
    role: Role
    token: str


class PrincipalOut(BaseModel):
    id: int
    username: str
    role: Role
    full_name: Optional[str] = None
    department: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


# ---------------- OFFICER ROSTER ----------------

class OfficerCreate(BaseModel):
    username: str
    password: str
    full_name: Optional[str] = None
    department: Optional[str] = None

    @field_validator("full_name", "department", mode="before")
    @classmethod
    def normalize_optional_strings(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str):
        return _clean_username(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str):
        return _check_password(value)


class OfficerUpdate(BaseModel):
    full_name: Optional[str] = None
    department: Optional[str] = None
    password: Optional[str] = None

    @field_validator("full_name", "department", mode="before")
    @classmethod
    def normalize_optional_strings(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: Optional[str]):
        if value is None:
            return value
        return _check_password(value)
