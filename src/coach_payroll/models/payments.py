'''
Payment models: settings, cycle windows, work periods and the per-coach
payout summaries produced by the payment calculation.
'''
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field, computed_field, model_validator

from .base import CamelModel, Money
from .enums import PaymentStatus

# --- 1. Settings ---

class PaymentSettings(CamelModel):
    """
    The global payment configuration, loaded once per computation.
    Range checks happen in the core so they surface as ConfigurationError.
    """
    monthly_fee: Decimal
    payment_day: int

    model_config = ConfigDict(frozen=True)


class PaymentSettingsUpdate(CamelModel):
    """
    Validates a settings update. Omitted fields are left unchanged.
    """
    monthly_fee: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    payment_day: Optional[int] = Field(default=None, ge=1, le=31)


class PaymentSettingsRead(CamelModel):
    monthly_fee: Money
    payment_day: int
    updated_at: Optional[datetime] = None


# --- 2. Calculation Values ---

class CycleWindow(CamelModel):
    """
    One billing cycle: from the day after the previous payment date up to
    and including the upcoming payment date.
    """
    start: date
    end: date

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def length_days(self) -> int:
        return (self.end - self.start).days + 1

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"


class WorkPeriod(CamelModel):
    """
    A maximal contiguous date range during which one coach is responsible
    for a given student. Both ends are inclusive.
    """
    coach_id: UUID
    start: date
    end: date

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def _check_order(self) -> 'WorkPeriod':
        if self.start > self.end:
            raise ValueError(f"WorkPeriod start {self.start} is after end {self.end}")
        return self

    @computed_field
    @property
    def days_worked(self) -> int:
        return (self.end - self.start).days + 1


# --- 3. Output Models ---

class BreakdownItem(CamelModel):
    """
    One student's contribution to a coach's payout.
    """
    student_id: UUID
    student_name: str
    amount: Money
    days_worked: int


class CoachPaymentSummary(CamelModel):
    """
    The payout owed to one coach for one cycle.
    `total_amount` is accumulated at full precision and only rounded on output.
    """
    coach_id: UUID
    coach_name: str
    active_student_count: int
    total_amount: Money
    breakdown: list[BreakdownItem]


class PaymentCycle(CamelModel):
    """
    The API envelope of one payment calculation.
    """
    cycle_start: date
    cycle_end: date
    payment_date: date
    summaries: list[CoachPaymentSummary]


# --- 4. Payment Records (persisted payouts) ---

class PaymentRecordsCreate(CamelModel):
    """
    Validates the request body for saving a cycle's summaries as records.
    """
    payment_date: date
    summaries: list[CoachPaymentSummary] = Field(..., min_length=1)


class PaymentMarkPaid(CamelModel):
    paid_by: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None


class PaymentRecordRead(CamelModel):
    """
    The API model for a saved payment record.
    """
    id: UUID
    coach_id: UUID
    payment_date: date
    total_amount: Money
    student_count: int
    breakdown: list[BreakdownItem]
    status: PaymentStatus
    paid_at: Optional[datetime] = None
    paid_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
