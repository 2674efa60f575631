'''
Orchestration of one payment calculation.

Settings + roster -> billing cycle -> per-student work periods -> per-coach
summaries. The whole pipeline is a pure function of the snapshot it loads
at the start, so re-running it on unchanged data gives the same output.
'''
import asyncio
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Mapping, Protocol, Sequence
from uuid import UUID

from ..common.exceptions import ConfigurationError, DataIntegrityError
from ..common.logger import log
from ..models.payments import PaymentCycle, PaymentSettings
from ..models.roster import Coach, Student, Transfer
from .aggregator import PaymentAggregator
from .billing_cycle import BillingCycleResolver, validate_payment_day
from .periods import StudentPeriodSplitter

# --- Consumed Contracts ---

class SettingsProvider(Protocol):
    async def get(self) -> PaymentSettings: ...


class RosterProvider(Protocol):
    async def list_coaches(self) -> list[Coach]: ...

    async def list_active_students(self) -> list[Student]: ...


class TransferHistoryProvider(Protocol):
    async def for_student(self, student_id: UUID) -> list[Transfer]: ...


# --- Validation ---

def validate_settings(payment_settings: PaymentSettings) -> None:
    """Raises ConfigurationError before any computation starts."""
    try:
        fee_is_positive = Decimal(payment_settings.monthly_fee) > 0
    except (InvalidOperation, TypeError, ValueError):
        fee_is_positive = False
    if not fee_is_positive:
        raise ConfigurationError(f"Monthly fee must be a positive amount, got {payment_settings.monthly_fee!r}.")
    validate_payment_day(payment_settings.payment_day)


def check_roster_integrity(
    coaches: Sequence[Coach],
    students: Sequence[Student],
    transfers_by_student: Mapping[UUID, Sequence[Transfer]],
) -> None:
    """
    Every coach a student or transfer points at must be in the roster.
    Any miss aborts the whole calculation.
    """
    known = {coach.id for coach in coaches}
    for student in students:
        if student.current_coach_id not in known:
            log.error(f"Student {student.id} is assigned to unknown coach {student.current_coach_id}.")
            raise DataIntegrityError(
                f"Student {student.id} is assigned to coach {student.current_coach_id}, which is not in the roster.",
                coach_id=student.current_coach_id,
                student_id=student.id,
            )
        for transfer in transfers_by_student.get(student.id, ()):
            for coach_id in (transfer.old_coach_id, transfer.new_coach_id):
                if coach_id not in known:
                    log.error(f"Transfer of student {student.id} on {transfer.transfer_date} references unknown coach {coach_id}.")
                    raise DataIntegrityError(
                        f"Transfer of student {student.id} on {transfer.transfer_date.isoformat()} "
                        f"references coach {coach_id}, which is not in the roster.",
                        coach_id=coach_id,
                        student_id=student.id,
                    )


# --- Pure Calculation ---

def calculate_payment_cycle(
    payment_settings: PaymentSettings,
    coaches: Sequence[Coach],
    students: Sequence[Student],
    transfers_by_student: Mapping[UUID, Sequence[Transfer]],
    today: date,
) -> PaymentCycle:
    """
    Computes the payouts for the cycle containing `today` from an
    in-memory snapshot.
    """
    validate_settings(payment_settings)
    cycle = BillingCycleResolver().resolve(today, payment_settings.payment_day)
    check_roster_integrity(coaches, students, transfers_by_student)

    splitter = StudentPeriodSplitter()
    per_student_periods = []
    for student in students:
        periods = splitter.split(student, transfers_by_student.get(student.id, ()), cycle)
        if not periods:
            log.info(f"Student {student.id} has no active days in cycle {cycle}; skipping.")
            continue
        per_student_periods.append((student, periods))

    summaries = PaymentAggregator(payment_settings.monthly_fee).aggregate(coaches, per_student_periods)
    log.info(f"Calculated payouts for {len(summaries)} coach(es) over {len(per_student_periods)} active student(s) in cycle {cycle}.")
    return PaymentCycle(
        cycle_start=cycle.start,
        cycle_end=cycle.end,
        payment_date=cycle.end,
        summaries=summaries,
    )


# --- Orchestrator ---

class PayrollCalculator:
    """
    Loads a snapshot from the providers and runs the calculation on it.
    Transfer histories are fetched concurrently, one request per student.
    """

    def __init__(
        self,
        settings_provider: SettingsProvider,
        roster_provider: RosterProvider,
        transfer_provider: TransferHistoryProvider,
    ):
        self.settings_provider = settings_provider
        self.roster_provider = roster_provider
        self.transfer_provider = transfer_provider

    async def calculate(self, today: date) -> PaymentCycle:
        payment_settings = await self.settings_provider.get()
        validate_settings(payment_settings)

        coaches = await self.roster_provider.list_coaches()
        students = await self.roster_provider.list_active_students()

        histories = await asyncio.gather(
            *(self.transfer_provider.for_student(student.id) for student in students)
        )
        transfers_by_student = {
            student.id: list(history) for student, history in zip(students, histories)
        }

        return calculate_payment_cycle(payment_settings, coaches, students, transfers_by_student, today)
