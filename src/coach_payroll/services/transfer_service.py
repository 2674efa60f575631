'''

'''
from datetime import date
from typing import Annotated, Optional
from uuid import UUID
from fastapi import Depends, HTTPException, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.engine import get_db_session
from ..database import models as db_models
from ..models import roster as roster_models
from ..common.logger import log


class TransferService:
    """
    Service for reassigning students to coaches.
    Transfers are append-only: they are recorded, never edited or deleted.
    """
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db_session)]):
        self.db = db

    # --- 1. Internal Fetchers ---

    async def _get_student_internal(self, student_id: UUID) -> db_models.Students:
        student = await self.db.get(db_models.Students, student_id)
        if student is None:
            log.warning(f"Tried to fetch non-existent student id: {student_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found.")
        return student

    async def _get_coach_internal(self, coach_id: UUID) -> db_models.Coaches:
        coach = await self.db.get(db_models.Coaches, coach_id)
        if coach is None:
            log.warning(f"Tried to fetch non-existent coach id: {coach_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Coach not found.")
        return coach

    async def _get_latest_transfer_date(self, student_id: UUID) -> Optional[date]:
        stmt = select(func.max(db_models.CoachTransfers.transfer_date)).filter(
            db_models.CoachTransfers.student_id == student_id
        )
        result = await self.db.execute(stmt)
        return result.scalar()

    # --- 2. Public Methods ---

    async def transfer_student_coach(
        self, student_id: UUID, data: roster_models.TransferCreate
    ) -> roster_models.TransferRead:
        """
        Moves a student to a new coach from `transfer_date` on.
        The student's current coach becomes the transfer's old coach, and
        the student is reassigned in the same transaction.
        """
        student = await self._get_student_internal(student_id)
        new_coach = await self._get_coach_internal(data.new_coach_id)

        if not new_coach.is_active:
            log.warning(f"Rejected transfer of student {student_id} to archived coach {new_coach.id}.")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot transfer a student to an archived coach."
            )
        if student.coach_id == new_coach.id:
            log.warning(f"Rejected transfer of student {student_id} to their current coach {new_coach.id}.")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Student is already assigned to this coach."
            )

        latest = await self._get_latest_transfer_date(student.id)
        if latest is not None and data.transfer_date < latest:
            log.warning(f"Rejected back-dated transfer of student {student_id}: {data.transfer_date} is before the last transfer on {latest}.")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Transfer date cannot be earlier than the student's last transfer ({latest.isoformat()})."
            )

        try:
            transfer = db_models.CoachTransfers(
                student_id=student.id,
                old_coach_id=student.coach_id,
                new_coach_id=new_coach.id,
                transfer_date=data.transfer_date,
                notes=data.notes,
            )
            self.db.add(transfer)
            student.coach_id = new_coach.id
            await self.db.flush()
        except Exception as e:
            log.error(f"Database error while transferring student {student_id}: {e}", exc_info=True)
            raise

        log.info(f"Student {student_id} transferred from coach {transfer.old_coach_id} to {transfer.new_coach_id} effective {data.transfer_date.isoformat()}.")
        return roster_models.TransferRead.model_validate(transfer)

    async def get_student_transfer_history(self, student_id: UUID) -> list[roster_models.TransferRead]:
        """A student's transfers, newest first (same-day ties: latest recorded first)."""
        await self._get_student_internal(student_id)
        stmt = select(db_models.CoachTransfers).filter(
            db_models.CoachTransfers.student_id == student_id
        ).order_by(
            db_models.CoachTransfers.transfer_date.desc(),
            db_models.CoachTransfers.id.desc()
        )
        result = await self.db.execute(stmt)
        return [roster_models.TransferRead.model_validate(row) for row in result.scalars().all()]
