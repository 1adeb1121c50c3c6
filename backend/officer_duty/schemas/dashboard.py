from pydantic import BaseModel


class DashboardStats(BaseModel):
    late_check_in_count: int
    present_today_count: int
    absence_request_count: int


class SupervisorDashboardStats(DashboardStats):
    active_duty_assignments_count: int
    total_officers_count: int
