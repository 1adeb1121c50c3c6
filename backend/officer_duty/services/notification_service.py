import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from officer_duty.core.policy import Role
from officer_duty.models.notification import Notification
from officer_duty.models.user import User

logger = logging.getLogger(__name__)

# Notifications are added to the caller's session and committed together
# with the write that triggered them.


def push_notification(db: Session, *, user_id: int, **fields) -> Notification:
    """Queue one notification; see ``push_notifications`` for the accepted fields."""
    return push_notifications(db, user_ids=[user_id], **fields)[0]


def push_notifications(
    db: Session,
    *,
    user_ids: Iterable[int],
    title: str,
    message: str,
    event_type: Optional[str] = None,
    reference_type: Optional[str] = None,
    reference_id: Optional[int] = None,
    created_by: Optional[int] = None
) -> List[Notification]:
    recipients = sorted({int(uid) for uid in user_ids if uid is not None})
    if not recipients:
        return []

    notifications = [
        Notification(
            user_id=recipient,
            title=title,
            message=message,
            event_type=event_type,
            reference_type=reference_type,
            reference_id=reference_id,
            created_by=created_by,
            is_read=False,
        )
        for recipient in recipients
    ]
    db.add_all(notifications)
    logger.debug("Queued %d notification(s) for event %s", len(notifications), event_type)
    return notifications


def notify_reviewers(
    db: Session,
    *,
    department: Optional[str],
    title: str,
    message: str,
    event_type: Optional[str] = None,
    reference_type: Optional[str] = None,
    reference_id: Optional[int] = None,
    created_by: Optional[int] = None
) -> List[Notification]:
    """Every admin, plus the supervisors of ``department``."""
    query = db.query(User.id).filter(User.role == Role.admin)
    reviewer_ids = [user_id for (user_id,) in query.all()]
    if department:
        reviewer_ids += [
            user_id
            for (user_id,) in db.query(User.id).filter(
                User.role == Role.supervisor,
                User.department == department
            ).all()
        ]
    return push_notifications(
        db,
        user_ids=reviewer_ids,
        title=title,
        message=message,
        event_type=event_type,
        reference_type=reference_type,
        reference_id=reference_id,
        created_by=created_by,
    )


def list_notifications(db: Session, user: User, *, unread_only: bool = False, limit: int = 25) -> List[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user.id)
    if unread_only:
        query = query.filter(Notification.is_read == False)  # noqa: E712
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def mark_read(db: Session, user: User, notification_id: int) -> Optional[Notification]:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user.id
    ).first()
    if not notification:
        return None

    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
    return notification
