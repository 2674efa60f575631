'''

'''
from datetime import date
from typing import Optional, Annotated
from fastapi import Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.engine import get_db_session
from ..database import models as db_models
from ..models import dashboard as dashboard_models
from ..models.enums import RenewalStatus
from ..common.config import settings
from ..common.logger import log
from .settings_service import SettingsService


class DashboardService:
    """
    Read-only summaries over the roster: headline counts and the students
    whose packages need renewing.
    """
    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db_session)],
        settings_service: Annotated[SettingsService, Depends(SettingsService)]
    ):
        self.db = db
        self.settings_service = settings_service

    async def _count(self, stmt) -> int:
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def get_stats(self, as_of: Optional[date] = None) -> dashboard_models.DashboardStats:
        today = as_of or date.today()
        try:
            active_coaches = await self._count(
                select(func.count()).select_from(db_models.Coaches).filter(db_models.Coaches.is_active.is_(True))
            )
            active_students = await self._count(
                select(func.count()).select_from(db_models.Students).filter(db_models.Students.is_active.is_(True))
            )
            on_package = await self._count(
                select(func.count()).select_from(db_models.Students).filter(
                    db_models.Students.is_active.is_(True),
                    db_models.Students.package_start_date <= today,
                    db_models.Students.package_end_date >= today,
                )
            )
        except Exception as e:
            log.error(f"Database error while computing dashboard stats: {e}", exc_info=True)
            raise

        payment_settings = await self.settings_service.get_payment_settings()
        return dashboard_models.DashboardStats(
            as_of=today,
            active_coaches=active_coaches,
            active_students=active_students,
            students_on_package=on_package,
            expected_monthly_payment=payment_settings.monthly_fee * on_package,
        )

    async def get_renewal_alerts(self, as_of: Optional[date] = None) -> list[dashboard_models.RenewalAlert]:
        """
        Active students whose package has already ended or ends within
        RENEWAL_ALERT_DAYS of `as_of` (defaults to today), soonest first.
        """
        today = as_of or date.today()
        horizon = settings.RENEWAL_ALERT_DAYS

        stmt = select(db_models.Students, db_models.Coaches).outerjoin(
            db_models.Coaches, db_models.Coaches.id == db_models.Students.coach_id
        ).filter(
            db_models.Students.is_active.is_(True)
        ).order_by(
            db_models.Students.package_end_date, db_models.Students.created_at
        )
        try:
            result = await self.db.execute(stmt)
            rows = result.all()
        except Exception as e:
            log.error(f"Database error while fetching renewal alerts: {e}", exc_info=True)
            raise

        alerts = []
        for student, coach in rows:
            days_remaining = (student.package_end_date - today).days
            if days_remaining > horizon:
                continue
            alerts.append(dashboard_models.RenewalAlert(
                student_id=student.id,
                student_name=student.full_name,
                email=student.email,
                phone=student.phone,
                package_months=student.package_months,
                package_start_date=student.package_start_date,
                package_end_date=student.package_end_date,
                coach_id=student.coach_id,
                coach_name=coach.full_name if coach is not None else None,
                days_remaining=days_remaining,
                status=RenewalStatus.EXPIRED if days_remaining < 0 else RenewalStatus.EXPIRING,
            ))
        log.info(f"{len(alerts)} renewal alert(s) as of {today.isoformat()}.")
        return alerts
