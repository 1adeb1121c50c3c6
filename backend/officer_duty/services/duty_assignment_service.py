import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from officer_duty.core.policy import Role, apply_scope, can_access_record, ensure_department_access, scope_for
from officer_duty.models.duty_assignment import DutyAssignment
from officer_duty.models.notification import DUTY_ASSIGNED
from officer_duty.models.user import User
from officer_duty.schemas.duty_assignment import DutyAssignmentCreate, DutyAssignmentUpdate
from officer_duty.services.notification_service import push_notification

logger = logging.getLogger(__name__)


def _get_assignee(db: Session, principal: User, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.role != Role.officer:
        raise HTTPException(status_code=400, detail="User must be an officer")
    # the assignee must be on a roster the principal manages
    ensure_department_access(principal, user.department)
    return user


def _with_user(query):
    return query.options(joinedload(DutyAssignment.user))


def list_assignments(
    db: Session,
    principal: User,
    user_id: Optional[int] = None,
    status: Optional[str] = None,
    department: Optional[str] = None
) -> list[DutyAssignment]:
    query = apply_scope(
        _with_user(db.query(DutyAssignment)),
        scope_for(principal),
        owner_column=DutyAssignment.user_id,
        department_column=DutyAssignment.department,
    )
    if user_id:
        query = query.filter(DutyAssignment.user_id == user_id)
    if status:
        query = query.filter(DutyAssignment.status == status)
    if department:
        query = query.filter(DutyAssignment.department == department)
    return query.order_by(DutyAssignment.date.desc(), DutyAssignment.id.desc()).all()


def list_my_assignments(db: Session, officer: User) -> list[DutyAssignment]:
    return (
        _with_user(db.query(DutyAssignment))
        .filter(DutyAssignment.user_id == officer.id)
        .order_by(DutyAssignment.date.desc(), DutyAssignment.id.desc())
        .all()
    )


def get_assignment(db: Session, principal: User, assignment_id: int) -> DutyAssignment:
    assignment = _with_user(db.query(DutyAssignment)).filter(DutyAssignment.id == assignment_id).first()
    if not assignment or not can_access_record(principal, assignment.user_id, assignment.department):
        raise HTTPException(status_code=404, detail="Duty assignment not found")
    return assignment


def create_assignment(db: Session, principal: User, payload: DutyAssignmentCreate) -> DutyAssignment:
    officer = _get_assignee(db, principal, payload.user_id)
    department = payload.department or officer.department or ""
    ensure_department_access(principal, department)

    assignment = DutyAssignment(
        user_id=officer.id,
        date=payload.date,
        officer_name=officer.display_name,
        department=department,
        task_location=payload.task_location,
        status=payload.status,
    )
    db.add(assignment)
    db.flush()

    push_notification(
        db,
        user_id=officer.id,
        title="New duty assignment",
        message=f"You have been assigned to {assignment.task_location} on {assignment.date}.",
        event_type=DUTY_ASSIGNED,
        reference_type="duty_assignment",
        reference_id=assignment.id,
        created_by=principal.id,
    )
    db.commit()
    db.refresh(assignment)

    logger.info("Duty assignment %s created for officer %s by user %s", assignment.id, officer.id, principal.id)
    return assignment


def update_assignment(
    db: Session,
    principal: User,
    assignment_id: int,
    payload: DutyAssignmentUpdate
) -> DutyAssignment:
    assignment = get_assignment(db, principal, assignment_id)
    data = payload.model_dump(exclude_unset=True)

    new_user_id = data.pop("user_id", None)
    if new_user_id is not None and new_user_id != assignment.user_id:
        officer = _get_assignee(db, principal, new_user_id)
        assignment.user_id = officer.id
        assignment.officer_name = officer.display_name
        if not data.get("department") and officer.department:
            data["department"] = officer.department

    for field, value in data.items():
        if value is None:
            continue
        setattr(assignment, field, value)

    # the assignment may have moved department; it must stay within reach
    ensure_department_access(principal, assignment.department)

    db.commit()
    db.refresh(assignment)

    logger.info("Duty assignment %s updated by user %s", assignment.id, principal.id)
    return assignment


def delete_assignment(db: Session, principal: User, assignment_id: int) -> None:
    assignment = get_assignment(db, principal, assignment_id)
    db.delete(assignment)
    db.commit()
    logger.info("Duty assignment %s deleted by user %s", assignment_id, principal.id)
