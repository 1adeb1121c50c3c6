import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from officer_duty.core.policy import Role, apply_scope, can_access_record, ensure_department_access, scope_for
from officer_duty.core.security import hash_password
from officer_duty.models.absence_request import AbsenceRequest
from officer_duty.models.attendance import Attendance
from officer_duty.models.duty_assignment import DutyAssignment
from officer_duty.models.notification import Notification
from officer_duty.models.user import User
from officer_duty.schemas.user import OfficerCreate, OfficerUpdate

logger = logging.getLogger(__name__)


def username_taken(db: Session, username: str) -> bool:
    return db.query(User.id).filter(User.username == username).first() is not None


def create_principal(
    db: Session,
    *,
    username: str,
    password: str,
    role: Role,
    full_name: str | None = None,
    department: str | None = None
) -> User:
    if username_taken(db, username):
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        full_name=full_name,
        department=department,
    )
    try:
        user.ensure_valid()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="User already exists")
    db.refresh(user)

    logger.info("Created %s principal %s (%s)", role.value, user.id, username)
    return user


def list_officers(db: Session, principal: User, department: Optional[str] = None) -> list[User]:
    query = apply_scope(
        db.query(User).filter(User.role == Role.officer),
        scope_for(principal),
        owner_column=User.id,
        department_column=User.department,
    )
    if department:
        query = query.filter(User.department == department)
    return query.order_by(User.full_name, User.username).all()


def get_officer(db: Session, principal: User, officer_id: int) -> User:
    officer = db.query(User).filter(User.id == officer_id, User.role == Role.officer).first()
    if not officer or not can_access_record(principal, officer.id, officer.department):
        raise HTTPException(status_code=404, detail="Officer not found")
    return officer


def create_officer(db: Session, principal: User, payload: OfficerCreate) -> User:
    department = payload.department
    if principal.role == Role.supervisor:
        department = department or principal.department
    ensure_department_access(principal, department)

    return create_principal(
        db,
        username=payload.username,
        password=payload.password,
        role=Role.officer,
        full_name=payload.full_name,
        department=department,
    )


def update_officer(db: Session, principal: User, officer_id: int, payload: OfficerUpdate) -> User:
    officer = get_officer(db, principal, officer_id)
    data = payload.model_dump(exclude_unset=True)

    if "full_name" in data:
        officer.full_name = data["full_name"]
    if "department" in data:
        officer.department = data["department"]
        ensure_department_access(principal, officer.department)
    if data.get("password"):
        officer.password_hash = hash_password(data["password"])

    db.commit()
    db.refresh(officer)

    logger.info("Officer %s updated by user %s", officer.id, principal.id)
    return officer


def delete_officer(db: Session, principal: User, officer_id: int) -> None:
    officer = get_officer(db, principal, officer_id)

    for model in (Attendance, AbsenceRequest, DutyAssignment, Notification):
        db.query(model).filter(model.user_id == officer.id).delete(synchronize_session=False)
    db.delete(officer)
    db.commit()

    logger.info("Officer %s deleted by user %s", officer_id, principal.id)
