from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from officer_duty.core.dependencies import get_now, require_permission
from officer_duty.core.policy import Action, Resource
from officer_duty.database.session import get_db
from officer_duty.models.user import User
from officer_duty.schemas.common import ApiResponse, ok
from officer_duty.schemas.dashboard import DashboardStats, SupervisorDashboardStats
from officer_duty.services import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=ApiResponse[DashboardStats])
def get_dashboard_stats(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: User = Depends(require_permission(Resource.dashboard, Action.read)),
):
    return ok(dashboard_service.get_admin_stats(db, now))


@router.get("/stats/supervisor", response_model=ApiResponse[SupervisorDashboardStats])
def get_supervisor_dashboard_stats(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: User = Depends(require_permission(Resource.supervisor_dashboard, Action.read)),
):
    return ok(dashboard_service.get_supervisor_stats(db, current_user, now))
