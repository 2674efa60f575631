'''
API endpoints for coach transfers.
'''
from typing import Annotated, Any
from uuid import UUID
from fastapi import APIRouter, Depends, status

from ..models import roster as roster_models
from ..services.transfer_service import TransferService

class TransfersAPI:
    """
    A class to encapsulate endpoints for moving students between coaches.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/students",
            tags=["Coach Transfers"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/{student_id}/transfers",
                self.transfer_student,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=roster_models.TransferRead)
        self.router.add_api_route(
                "/{student_id}/transfers",
                self.get_transfer_history,
                methods=["GET"],
                response_model=list[roster_models.TransferRead])

    async def transfer_student(
        self,
        student_id: UUID,
        data: roster_models.TransferCreate,
        transfer_service: Annotated[TransferService, Depends(TransferService)]
    ) -> Any:
        """
        Transfers a student to a new coach from the given date on.
        """
        return await transfer_service.transfer_student_coach(student_id, data)

    async def get_transfer_history(
        self,
        student_id: UUID,
        transfer_service: Annotated[TransferService, Depends(TransferService)]
    ) -> list[Any]:
        """
        Retrieves a student's transfer history, newest first.
        """
        return await transfer_service.get_student_transfer_history(student_id)

# Instantiate the class and export its router
transfers_api = TransfersAPI()
router = transfers_api.router
