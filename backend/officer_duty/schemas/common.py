from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from officer_duty.core.policy import Role

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


def ok(data: Any = None, message: str | None = None) -> dict:
    return {"success": True, "data": data, "message": message}


class PrincipalSummary(BaseModel):
    id: int
    username: str
    full_name: Optional[str] = None
    department: Optional[str] = None
    role: Role

    class Config:
        from_attributes = True
