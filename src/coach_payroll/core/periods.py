'''
Splitting one student's active days in a cycle into per-coach work periods.
'''
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from ..models.payments import CycleWindow, WorkPeriod
from ..models.roster import Student, Transfer

# Proration always uses a 30-day reference month, whatever the real month length.
REFERENCE_MONTH_DAYS = 30

ONE_DAY = timedelta(days=1)


def days_inclusive(start: date, end: date) -> int:
    return (end - start).days + 1


def prorate(monthly_fee: Decimal, days_worked: int) -> Decimal:
    """Amount owed for `days_worked` days, unrounded."""
    return Decimal(monthly_fee) / REFERENCE_MONTH_DAYS * days_worked


def sort_transfers(transfers: Iterable[Transfer]) -> list[Transfer]:
    """Oldest first; same-day transfers keep the order they were recorded in."""
    return sorted(transfers, key=lambda t: t.sort_key)


class StudentPeriodSplitter:
    """
    Intersects a student's package window with a cycle and attributes every
    day of the intersection to exactly one coach, using the student's
    complete (unsorted) transfer history.

    The transfer date itself is the new coach's first owned day; the old
    coach is paid through the day before.
    """

    def work_window(self, student: Student, cycle: CycleWindow) -> Optional[tuple[date, date]]:
        """Returns (work_start, work_end), or None when the student is not active in the cycle."""
        work_start = max(student.package_start, cycle.start)
        work_end = min(student.package_end, cycle.end)
        if work_start > work_end:
            return None
        return work_start, work_end

    def coach_at(self, student: Student, ordered: list[Transfer], day: date) -> UUID:
        """
        The coach owning the student at the start of `day`, reconstructed
        from the history before that day.
        """
        before = [t for t in ordered if t.transfer_date < day]
        if before:
            return before[-1].new_coach_id
        if ordered:
            # Nothing happened before `day`: the first transfer's old coach
            # is the original assignment.
            return ordered[0].old_coach_id
        return student.current_coach_id

    def split(self, student: Student, transfers: Iterable[Transfer], cycle: CycleWindow) -> list[WorkPeriod]:
        window = self.work_window(student, cycle)
        if window is None:
            return []
        work_start, work_end = window

        ordered = sort_transfers(transfers)
        coach_at_work_start = self.coach_at(student, ordered, work_start)
        relevant = [t for t in ordered if work_start <= t.transfer_date <= work_end]

        if not relevant:
            return [WorkPeriod(coach_id=coach_at_work_start, start=work_start, end=work_end)]

        # (coach_id, start, end) candidates, possibly empty ranges
        candidates: list[tuple[UUID, date, date]] = []

        first = relevant[0]
        if work_start < first.transfer_date:
            candidates.append((coach_at_work_start, work_start, first.transfer_date - ONE_DAY))

        for current, following in zip(relevant, relevant[1:]):
            end = min(following.transfer_date - ONE_DAY, work_end)
            candidates.append((current.new_coach_id, current.transfer_date, end))

        last = relevant[-1]
        candidates.append((last.new_coach_id, last.transfer_date, work_end))

        return self._merge_adjacent(
            WorkPeriod(coach_id=coach_id, start=start, end=end)
            for coach_id, start, end in candidates
            if start <= end
        )

    @staticmethod
    def _merge_adjacent(periods: Iterable[WorkPeriod]) -> list[WorkPeriod]:
        """Joins back-to-back periods of the same coach so every period is maximal."""
        merged: list[WorkPeriod] = []
        for period in periods:
            previous = merged[-1] if merged else None
            if (previous is not None
                    and previous.coach_id == period.coach_id
                    and previous.end + ONE_DAY == period.start):
                merged[-1] = WorkPeriod(coach_id=period.coach_id, start=previous.start, end=period.end)
            else:
                merged.append(period)
        return merged
