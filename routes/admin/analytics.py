# routes/admin/analytics.py
"""
Platform statistics endpoint for the admin dashboard.
Includes totals, recent activity and monthly user growth.
"""
from fastapi import APIRouter, Depends

from config.dependencies import get_admin
from config.security import require_admin
from model.user import Users
from schema.admin import DashboardStatsOut
from src.social.admin import AdminService

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStatsOut)
def get_dashboard_stats(
    _admin: Users = Depends(require_admin),
    admin: AdminService = Depends(get_admin),
):
    """
    Get platform statistics for admin analytics dashboard.

    Example:
        GET /v1/admin/dashboard/stats
    """
    return admin.dashboard_stats()
