from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from officer_duty.database.base import Base

# event_type values
DUTY_ASSIGNED = "duty_assigned"
ABSENCE_SUBMITTED = "absence_request_submitted"
ABSENCE_APPROVED = "absence_request_approved"
ABSENCE_REJECTED = "absence_request_rejected"


class Notification(Base):
    """A message for one principal, pointing back at the duty or absence row that raised it."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_unread", "user_id", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    event_type = Column(String(50), nullable=True)
    reference_type = Column(String(50), nullable=True)
    reference_id = Column(Integer, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    recipient = relationship("User", foreign_keys=[user_id])
    sender = relationship("User", foreign_keys=[created_by])
