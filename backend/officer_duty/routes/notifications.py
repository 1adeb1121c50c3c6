from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from officer_duty.core.dependencies import require_permission
from officer_duty.core.policy import Action, Resource
from officer_duty.database.session import get_db
from officer_duty.models.user import User
from officer_duty.schemas.common import ApiResponse, ok
from officer_duty.schemas.notification import NotificationOut
from officer_duty.services import notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/me", response_model=ApiResponse[list[NotificationOut]])
def get_my_notifications(
    limit: int = Query(default=25, ge=1, le=100),
    unread_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.notifications, Action.list_own))
):
    return ok(notification_service.list_notifications(
        db,
        current_user,
        unread_only=unread_only,
        limit=limit,
    ))


@router.patch("/{notification_id}/read", response_model=ApiResponse[NotificationOut])
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.notifications, Action.update))
):
    notification = notification_service.mark_read(db, current_user, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    return ok(notification, "Notification marked as read")
