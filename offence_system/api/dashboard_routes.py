"""
Dashboard Routes - Stat cards for both dashboards

Endpoints:
- GET /api/dashboard/admin - Collection-wide statistics (admin)
- GET /api/dashboard/user - Logged-in vehicle's offences and totals
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query

from offence_system.models.dashboard import AdminDashboardStats, UserDashboardResponse
from offence_system.models.session import Identity
from offence_system.offences.dashboard import UserDashboard
from offence_system.offences.services import OffenceServices

from .dependencies import get_services, require_admin, require_vehicle_owner

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/admin", response_model=AdminDashboardStats)
async def get_admin_dashboard(
    identity: Identity = Depends(require_admin),
    services: OffenceServices = Depends(get_services)
):
    """
    Admin statistics

    Totals, paid/pending sums, most common offence type and
    repeat offenders. Recomputed on every repository change.
    """
    return services.admin_dashboard.stats


@router.get("/user", response_model=UserDashboardResponse)
async def get_user_dashboard(
    status: Literal["all", "Paid", "Pending"] = Query("all"),
    identity: Identity = Depends(require_vehicle_owner),
    services: OffenceServices = Depends(get_services)
):
    """Offences and totals for the logged-in vehicle"""
    dashboard = UserDashboard(services.repository, identity.email)

    return UserDashboardResponse(
        stats=dashboard.stats,
        status_filter=status,
        offences=dashboard.offences(status),
    )
