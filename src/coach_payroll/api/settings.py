'''
API endpoints for the global payment settings.
'''
from typing import Annotated, Any
from fastapi import APIRouter, Depends

from ..models import payments as payment_models
from ..services.settings_service import SettingsService

class SettingsAPI:
    """
    A class to encapsulate endpoints for the payment settings.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/settings",
            tags=["Settings"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route("/", self.get_settings, methods=["GET"], response_model=payment_models.PaymentSettingsRead)
        self.router.add_api_route("/", self.update_settings, methods=["PUT"], response_model=payment_models.PaymentSettingsRead)

    async def get_settings(
        self,
        settings_service: Annotated[SettingsService, Depends(SettingsService)]
    ) -> Any:
        """Retrieves the monthly coach fee and the payment day."""
        return await settings_service.get_settings_for_api()

    async def update_settings(
        self,
        data: payment_models.PaymentSettingsUpdate,
        settings_service: Annotated[SettingsService, Depends(SettingsService)]
    ) -> Any:
        """Updates the monthly coach fee and/or the payment day."""
        return await settings_service.update_settings(data)

# Instantiate the class and export its router
settings_api = SettingsAPI()
router = settings_api.router
