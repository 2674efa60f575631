'''
Folding per-student work periods into per-coach payout summaries.
'''
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from ..common.exceptions import DataIntegrityError
from ..common.logger import log
from ..models.payments import BreakdownItem, CoachPaymentSummary, WorkPeriod
from ..models.roster import Coach, Student
from .periods import prorate


class CoachAccumulator:
    """Running total and ordered breakdown for one coach."""

    def __init__(self, coach: Coach):
        self.coach = coach
        self.total = Decimal(0)
        self.breakdown: list[BreakdownItem] = []

    def add(self, student: Student, period: WorkPeriod, amount: Decimal) -> None:
        self.breakdown.append(BreakdownItem(
            student_id=student.id,
            student_name=student.name,
            amount=amount,
            days_worked=period.days_worked,
        ))
        self.total += amount

    def to_summary(self) -> CoachPaymentSummary:
        return CoachPaymentSummary(
            coach_id=self.coach.id,
            coach_name=self.coach.display_name,
            active_student_count=len({item.student_id for item in self.breakdown}),
            total_amount=self.total,
            breakdown=list(self.breakdown),
        )


class PaymentAggregator:
    """
    Builds one CoachPaymentSummary per coach that worked in the cycle,
    in roster order. Amounts stay unrounded until serialization.
    """

    def __init__(self, monthly_fee: Decimal):
        self.monthly_fee = Decimal(monthly_fee)

    def aggregate(
        self,
        coaches: Iterable[Coach],
        per_student_periods: Iterable[tuple[Student, list[WorkPeriod]]],
    ) -> list[CoachPaymentSummary]:
        # dicts keep insertion order, so this is the roster order
        accumulators: dict[UUID, CoachAccumulator] = {
            coach.id: CoachAccumulator(coach) for coach in coaches
        }

        for student, periods in per_student_periods:
            for period in periods:
                accumulator = accumulators.get(period.coach_id)
                if accumulator is None:
                    log.error(f"Work period for student {student.id} references unknown coach {period.coach_id}.")
                    raise DataIntegrityError(
                        f"Student {student.id} has days attributed to coach {period.coach_id}, "
                        f"which is not in the roster.",
                        coach_id=period.coach_id,
                        student_id=student.id,
                    )
                accumulator.add(student, period, prorate(self.monthly_fee, period.days_worked))

        return [acc.to_summary() for acc in accumulators.values() if acc.breakdown]
