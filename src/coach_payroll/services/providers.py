'''
Database-backed snapshot providers for the payment calculation.
'''
from collections import defaultdict
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import models as db_models
from ..models import payments as payment_models
from ..models.roster import Coach, Student, Transfer
from ..common.logger import log
from .settings_service import SettingsService


class DatabaseSettingsProvider:
    def __init__(self, settings_service: SettingsService):
        self.settings_service = settings_service

    async def get(self) -> payment_models.PaymentSettings:
        return await self.settings_service.get_payment_settings()


class DatabaseRosterProvider:
    """
    Lists coaches (archived ones included, so historical transfers still
    resolve) in creation order, and the active students.
    """
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_coaches(self) -> list[Coach]:
        stmt = select(db_models.Coaches).order_by(
            db_models.Coaches.created_at, db_models.Coaches.id
        )
        result = await self.db.execute(stmt)
        return [
            Coach(id=row.id, display_name=row.full_name)
            for row in result.scalars().all()
        ]

    async def list_active_students(self) -> list[Student]:
        stmt = select(db_models.Students).filter(
            db_models.Students.is_active.is_(True)
        ).order_by(db_models.Students.created_at, db_models.Students.id)
        result = await self.db.execute(stmt)
        return [
            Student(
                id=row.id,
                name=row.full_name,
                current_coach_id=row.coach_id,
                package_start=row.package_start_date,
                package_end=row.package_end_date,
            )
            for row in result.scalars().all()
        ]


class DatabaseTransferHistoryProvider:
    """
    Serves per-student transfer histories from a snapshot loaded with a
    single query, so concurrent `for_student` calls never touch the session.
    """
    def __init__(self, db: AsyncSession):
        self.db = db
        self._by_student: dict[UUID, list[Transfer]] | None = None

    async def load(self) -> None:
        """Loads the complete transfer history of every active student."""
        stmt = select(db_models.CoachTransfers).join(
            db_models.Students, db_models.Students.id == db_models.CoachTransfers.student_id
        ).filter(db_models.Students.is_active.is_(True))
        result = await self.db.execute(stmt)

        by_student: dict[UUID, list[Transfer]] = defaultdict(list)
        for row in result.scalars().all():
            by_student[row.student_id].append(Transfer(
                student_id=row.student_id,
                old_coach_id=row.old_coach_id,
                new_coach_id=row.new_coach_id,
                transfer_date=row.transfer_date,
                sequence=row.id,
                notes=row.notes,
            ))
        self._by_student = dict(by_student)
        log.info(f"Loaded {sum(len(v) for v in by_student.values())} transfer(s) for {len(by_student)} student(s).")

    async def for_student(self, student_id: UUID) -> list[Transfer]:
        if self._by_student is None:
            raise RuntimeError("Transfer history snapshot not loaded; call load() first.")
        return list(self._by_student.get(student_id, []))
