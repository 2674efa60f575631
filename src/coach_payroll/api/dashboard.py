'''
API endpoints for the admin dashboard.
'''
from datetime import date
from typing import Annotated, Any
from fastapi import APIRouter, Depends, Query

from ..models import dashboard as dashboard_models
from ..services.dashboard_service import DashboardService

class DashboardAPI:
    """
    A class to encapsulate the dashboard endpoints.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/dashboard",
            tags=["Dashboard"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route("/stats", self.get_stats, methods=["GET"], response_model=dashboard_models.DashboardStats)
        self.router.add_api_route("/renewal-alerts", self.get_renewal_alerts, methods=["GET"], response_model=list[dashboard_models.RenewalAlert])

    async def get_stats(
        self,
        dashboard_service: Annotated[DashboardService, Depends(DashboardService)],
        as_of: Annotated[date | None, Query(description="Reference date, defaults to today")] = None
    ) -> Any:
        """Active coach and student counts and the expected monthly payout."""
        return await dashboard_service.get_stats(as_of)

    async def get_renewal_alerts(
        self,
        dashboard_service: Annotated[DashboardService, Depends(DashboardService)],
        as_of: Annotated[date | None, Query(description="Reference date, defaults to today")] = None
    ) -> list[Any]:
        """Packages that expired or expire within the alert window."""
        return await dashboard_service.get_renewal_alerts(as_of)

# Instantiate the class and export its router
dashboard_api = DashboardAPI()
router = dashboard_api.router
