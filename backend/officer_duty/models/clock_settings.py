from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Time, UniqueConstraint
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from officer_duty.database.base import Base


class ClockSettings(Base):
    __tablename__ = "clock_settings"

    id = Column(Integer, primary_key=True, index=True)
    clock_in_start_time = Column(Time, nullable=False)
    clock_out_start_time = Column(Time, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Mirrors is_active as True/NULL so the unique constraint admits a
    # single active row. Set only through the validator below.
    active_marker = Column(Boolean, nullable=True)

    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    created_by_user = relationship("User", foreign_keys=[created_by])
    updated_by_user = relationship("User", foreign_keys=[updated_by])

    __table_args__ = (
        UniqueConstraint("active_marker", name="uq_clock_settings_single_active"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("is_active", True)
        super().__init__(**kwargs)

    @validates("is_active")
    def _sync_active_marker(self, key, value):
        value = bool(value)
        self.active_marker = True if value else None
        return value
