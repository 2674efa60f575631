'''

'''
from datetime import date, datetime, timezone
from typing import Optional, Annotated
from uuid import UUID
from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.engine import get_db_session
from ..database import models as db_models
from ..models import payments as payment_models
from ..models.base import round_money
from ..models.enums import PaymentStatus
from ..core.payroll import PayrollCalculator
from ..common.exceptions import ConfigurationError, DataIntegrityError
from ..common.logger import log
from .settings_service import SettingsService
from .providers import DatabaseSettingsProvider, DatabaseRosterProvider, DatabaseTransferHistoryProvider


class PaymentService:
    """
    Service for computing the current cycle's coach payouts and for the
    payment records those payouts are saved as.
    """
    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db_session)],
        settings_service: Annotated[SettingsService, Depends(SettingsService)]
    ):
        self.db = db
        self.settings_service = settings_service

    # --- 1. Payout Calculation ---

    async def get_current_cycle_payments(self, as_of: Optional[date] = None) -> payment_models.PaymentCycle:
        """
        Computes every coach's payout for the cycle containing `as_of`
        (defaults to today).
        """
        today = as_of or date.today()
        log.info(f"Calculating coach payments as of {today.isoformat()}.")

        transfer_provider = DatabaseTransferHistoryProvider(self.db)
        calculator = PayrollCalculator(
            DatabaseSettingsProvider(self.settings_service),
            DatabaseRosterProvider(self.db),
            transfer_provider,
        )
        try:
            await transfer_provider.load()
            return await calculator.calculate(today)
        except ConfigurationError as e:
            log.error(f"Payment settings are invalid: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Payment settings are invalid: {e}"
            )
        except DataIntegrityError as e:
            log.error(f"Payment calculation aborted: {e}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(e)
            )

    # --- 2. Payment Records ---

    async def _get_record_by_id_internal(self, record_id: UUID) -> db_models.PaymentRecords:
        record = await self.db.get(db_models.PaymentRecords, record_id)
        if record is None:
            log.warning(f"Tried to fetch non-existent payment record id: {record_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment record not found.")
        return record

    async def save_payment_records(
        self, data: payment_models.PaymentRecordsCreate
    ) -> list[payment_models.PaymentRecordRead]:
        """
        Persists each summary as a 'pending' payment record.
        Not idempotent: saving the same summaries twice creates two sets of records.
        """
        coach_ids = {summary.coach_id for summary in data.summaries}
        result = await self.db.execute(
            select(db_models.Coaches.id).filter(db_models.Coaches.id.in_(coach_ids))
        )
        missing = coach_ids - set(result.scalars().all())
        if missing:
            log.warning(f"Refusing to save payment records for unknown coaches: {missing}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Coach not found: {', '.join(sorted(str(c) for c in missing))}"
            )

        records = []
        try:
            for summary in data.summaries:
                record = db_models.PaymentRecords(
                    coach_id=summary.coach_id,
                    payment_date=data.payment_date,
                    total_amount=round_money(summary.total_amount),
                    student_count=summary.active_student_count,
                    breakdown=[
                        item.model_dump(mode='json', by_alias=True) for item in summary.breakdown
                    ],
                    status=PaymentStatus.PENDING.value,
                )
                self.db.add(record)
                records.append(record)
            await self.db.flush()
        except Exception as e:
            log.error(f"Database error while saving payment records: {e}", exc_info=True)
            raise

        log.info(f"Saved {len(records)} payment record(s) for payment date {data.payment_date.isoformat()}.")
        return [payment_models.PaymentRecordRead.model_validate(record) for record in records]

    async def mark_payment_as_paid(
        self, record_id: UUID, data: payment_models.PaymentMarkPaid
    ) -> payment_models.PaymentRecordRead:
        record = await self._get_record_by_id_internal(record_id)
        if record.status == PaymentStatus.PAID.value:
            log.warning(f"Payment record {record_id} is already marked as paid.")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Payment record is already marked as paid."
            )

        record.status = PaymentStatus.PAID.value
        record.paid_at = datetime.now(timezone.utc)
        record.paid_by = data.paid_by
        if data.notes is not None:
            record.notes = data.notes
        await self.db.flush()

        log.info(f"Payment record {record_id} marked as paid by {data.paid_by or 'unknown'}.")
        return payment_models.PaymentRecordRead.model_validate(record)

    async def get_payment_history(self, coach_id: Optional[UUID] = None) -> list[payment_models.PaymentRecordRead]:
        """All payment records, newest payment date first, optionally for one coach."""
        stmt = select(db_models.PaymentRecords).order_by(
            db_models.PaymentRecords.payment_date.desc(),
            db_models.PaymentRecords.created_at.desc()
        )
        if coach_id is not None:
            stmt = stmt.filter(db_models.PaymentRecords.coach_id == coach_id)
        try:
            result = await self.db.execute(stmt)
            records = result.scalars().all()
        except Exception as e:
            log.error(f"Database error while fetching payment history: {e}", exc_info=True)
            raise
        return [payment_models.PaymentRecordRead.model_validate(record) for record in records]
