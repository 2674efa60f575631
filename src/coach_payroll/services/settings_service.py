'''

'''
from typing import Annotated
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.engine import get_db_session
from ..database import models as db_models
from ..models import payments as payment_models
from ..common.logger import log
from ..common.config import settings


class SettingsService:
    """
    Service for the single-row global payment settings.
    The row is created with the configured defaults on first access.
    """
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db_session)]):
        self.db = db

    async def _get_settings_orm(self) -> db_models.SystemSettings:
        try:
            result = await self.db.execute(select(db_models.SystemSettings).limit(1))
            row = result.scalars().first()
            if row is None:
                log.info("No system settings found. Initializing defaults.")
                row = db_models.SystemSettings(
                    coach_monthly_fee=settings.DEFAULT_COACH_MONTHLY_FEE,
                    global_payment_day=settings.DEFAULT_PAYMENT_DAY,
                )
                self.db.add(row)
                await self.db.flush()
                await self.db.refresh(row)
            return row
        except Exception as e:
            log.error(f"Database error while loading system settings: {e}", exc_info=True)
            raise

    async def get_payment_settings(self) -> payment_models.PaymentSettings:
        """Snapshot of the settings as consumed by the payment calculation."""
        row = await self._get_settings_orm()
        return payment_models.PaymentSettings(
            monthly_fee=row.coach_monthly_fee,
            payment_day=row.global_payment_day,
        )

    async def get_settings_for_api(self) -> payment_models.PaymentSettingsRead:
        row = await self._get_settings_orm()
        return payment_models.PaymentSettingsRead(
            monthly_fee=row.coach_monthly_fee,
            payment_day=row.global_payment_day,
            updated_at=row.updated_at,
        )

    async def update_settings(self, update: payment_models.PaymentSettingsUpdate) -> payment_models.PaymentSettingsRead:
        row = await self._get_settings_orm()
        if update.monthly_fee is not None:
            row.coach_monthly_fee = update.monthly_fee
        if update.payment_day is not None:
            row.global_payment_day = update.payment_day
        await self.db.flush()
        log.info(f"System settings updated: monthly fee={row.coach_monthly_fee}, payment day={row.global_payment_day}.")
        return await self.get_settings_for_api()
