'''
Roster models: coaches, students and the coach-transfer history.
'''
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from .base import CamelModel

# --- 1. Snapshot Models (input of the payment calculation) ---

class Coach(CamelModel):
    """
    A coach as seen by the payment calculation: identity + display name.
    """
    id: UUID
    display_name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.display_name


class Student(CamelModel):
    """
    Immutable snapshot of an active student and their package window.
    Both package dates are inclusive calendar dates.
    """
    id: UUID
    name: str
    current_coach_id: UUID
    package_start: date
    package_end: date

    model_config = ConfigDict(frozen=True)

    def __repr__(self) -> str:
        return (f"Student(id={self.id!r}, name={self.name!r}, "
                f"package={self.package_start.isoformat()}..{self.package_end.isoformat()})")


class Transfer(CamelModel):
    """
    A recorded reassignment of a student from one coach to another.

    `sequence` is assigned when the transfer is recorded and breaks ties
    between transfers dated on the same day.
    """
    student_id: UUID
    old_coach_id: UUID
    new_coach_id: UUID
    transfer_date: date
    sequence: int = 0
    notes: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def sort_key(self) -> tuple[date, int]:
        return (self.transfer_date, self.sequence)


# --- 2. API Input Models ---

class TransferCreate(CamelModel):
    """
    Validates the request body for moving a student to a new coach.
    """
    new_coach_id: UUID
    transfer_date: date
    notes: Optional[str] = Field(default=None, max_length=2000)


# --- 3. API Output Models ---

class TransferRead(CamelModel):
    """
    The API model for one entry of a student's transfer history.
    """
    id: int
    student_id: UUID
    old_coach_id: UUID
    new_coach_id: UUID
    transfer_date: date
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
