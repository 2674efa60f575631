'''
API endpoints for coach payouts and payment records.
'''
from datetime import date
from typing import Annotated, Any
from uuid import UUID
from fastapi import APIRouter, Depends, status, Query

from ..models import payments as payment_models
from ..services.payment_service import PaymentService

class PaymentsAPI:
    """
    A class to encapsulate endpoints for coach payments.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/payments",
            tags=["Payments"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/current-cycle",
                self.get_current_cycle,
                methods=["GET"],
                response_model=payment_models.PaymentCycle)
        self.router.add_api_route(
                "/records",
                self.list_payment_records,
                methods=["GET"],
                response_model=list[payment_models.PaymentRecordRead])
        self.router.add_api_route(
                "/records",
                self.save_payment_records,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=list[payment_models.PaymentRecordRead])
        self.router.add_api_route(
                "/records/{record_id}/mark-paid",
                self.mark_payment_as_paid,
                methods=["PATCH"],
                response_model=payment_models.PaymentRecordRead)

    async def get_current_cycle(
        self,
        payment_service: Annotated[PaymentService, Depends(PaymentService)],
        as_of: Annotated[date | None, Query(description="Compute the cycle containing this date instead of today")] = None
    ) -> Any:
        """
        Computes every coach's prorated payout for the current billing cycle.
        """
        return await payment_service.get_current_cycle_payments(as_of)

    async def list_payment_records(
        self,
        payment_service: Annotated[PaymentService, Depends(PaymentService)],
        coach_id: Annotated[UUID | None, Query(description="Optional filter for Coach ID")] = None
    ) -> list[Any]:
        """
        Retrieves saved payment records, newest first.
        """
        return await payment_service.get_payment_history(coach_id=coach_id)

    async def save_payment_records(
        self,
        data: payment_models.PaymentRecordsCreate,
        payment_service: Annotated[PaymentService, Depends(PaymentService)]
    ) -> list[Any]:
        """
        Saves a cycle's summaries as pending payment records.
        """
        return await payment_service.save_payment_records(data)

    async def mark_payment_as_paid(
        self,
        record_id: UUID,
        data: payment_models.PaymentMarkPaid,
        payment_service: Annotated[PaymentService, Depends(PaymentService)]
    ) -> Any:
        """
        Marks a pending payment record as paid.
        """
        return await payment_service.mark_payment_as_paid(record_id, data)

# Instantiate the class and export its router
payments_api = PaymentsAPI()
router = payments_api.router
