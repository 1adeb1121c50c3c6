from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import validates
from sqlalchemy.sql import func

from officer_duty.core.policy import Role
from officer_duty.database.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    role = Column(
        Enum(Role, name="user_role", native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.officer,
    )

    full_name = Column(String(255), nullable=True)
    department = Column(String(255), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates("department")
    def _normalize_department(self, key, value):
        if isinstance(value, str):
            value = value.strip() or None
        return value

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    def ensure_valid(self) -> None:
        """Supervisors are always scoped to a department."""
        if self.role == Role.supervisor and not self.department:
            raise ValueError("Department is required for supervisors")
