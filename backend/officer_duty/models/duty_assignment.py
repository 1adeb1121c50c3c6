from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from officer_duty.database.base import Base

DUTY_STATUSES = ("pending", "ongoing", "completed", "cancelled")
ACTIVE_DUTY_STATUSES = ("pending", "ongoing")


class DutyAssignment(Base):
    __tablename__ = "duty_assignments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False)
    officer_name = Column(String(255), nullable=False)  # copied from the assignee at write time
    department = Column(String(255), nullable=False, index=True)
    task_location = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending | ongoing | completed | cancelled

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", foreign_keys=[user_id])
