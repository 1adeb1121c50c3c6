from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from officer_duty.database.base import Base

CLOCKED_IN = "clocked-in"
CLOCKED_OUT = "clocked-out"
ATTENDANCE_STATUSES = (CLOCKED_IN, CLOCKED_OUT)


class Attendance(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    clock_in = Column(DateTime, nullable=False)
    clock_out = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default=CLOCKED_IN)

    # True while the record is open, NULL once closed. NULLs never collide,
    # so the constraint below allows one open record per user and date.
    # No column default: a None set by the validator must reach the INSERT.
    open_marker = Column(Boolean, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", foreign_keys=[user_id])

    __table_args__ = (
        UniqueConstraint("user_id", "date", "open_marker", name="uq_attendance_one_open_per_day"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("status", CLOCKED_IN)
        super().__init__(**kwargs)

    @validates("status")
    def _sync_open_marker(self, key, value):
        if value not in ATTENDANCE_STATUSES:
            raise ValueError(f"Invalid attendance status: {value}")
        self.open_marker = True if value == CLOCKED_IN else None
        return value
