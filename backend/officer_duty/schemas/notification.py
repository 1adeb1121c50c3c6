from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from officer_duty.schemas.common import PrincipalSummary


class NotificationOut(BaseModel):
    id: int
    title: str
    message: str
    event_type: Optional[str] = None
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    is_read: bool
    created_at: datetime
    sender: PrincipalSummary | None = None

    class Config:
        from_attributes = True
