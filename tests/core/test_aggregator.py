'''
testing the per-coach aggregation of work periods
'''
import pytest
from datetime import date
from decimal import Decimal

from coach_payroll.common.exceptions import DataIntegrityError
from coach_payroll.core.aggregator import PaymentAggregator
from coach_payroll.models.payments import WorkPeriod
from coach_payroll.models.roster import Coach, Student

from tests.constants import (
    COACH_ALICE_ID, COACH_BORIS_ID, COACH_CLARA_ID, UNKNOWN_COACH_ID,
    STUDENT_EMRE_ID, STUDENT_FATMA_ID, STUDENT_GOKHAN_ID,
)

ROSTER = [
    Coach(id=COACH_ALICE_ID, display_name="Alice Aydin"),
    Coach(id=COACH_BORIS_ID, display_name="Boris Bulut"),
    Coach(id=COACH_CLARA_ID, display_name="Clara Cetin"),
]


def make_student(student_id, name) -> Student:
    return Student(
        id=student_id,
        name=name,
        current_coach_id=COACH_ALICE_ID,
        package_start=date(2024, 1, 1),
        package_end=date(2024, 12, 31),
    )


def period(coach_id, start: date, end: date) -> WorkPeriod:
    return WorkPeriod(coach_id=coach_id, start=start, end=end)


EMRE = make_student(STUDENT_EMRE_ID, "Emre Eren")
FATMA = make_student(STUDENT_FATMA_ID, "Fatma Foster")
GOKHAN = make_student(STUDENT_GOKHAN_ID, "Gokhan Gul")


@pytest.fixture
def aggregator() -> PaymentAggregator:
    return PaymentAggregator(Decimal("1100.00"))


class TestAggregate:

    def test_roster_order_and_idle_coaches(self, aggregator: PaymentAggregator):
        """Clara has no periods and must not appear; Alice stays ahead of Boris."""
        summaries = aggregator.aggregate(ROSTER, [
            (FATMA, [period(COACH_BORIS_ID, date(2024, 5, 1), date(2024, 5, 10))]),
            (EMRE, [period(COACH_ALICE_ID, date(2024, 4, 29), date(2024, 5, 28))]),
        ])
        assert [s.coach_id for s in summaries] == [COACH_ALICE_ID, COACH_BORIS_ID]
        assert summaries[0].coach_name == "Alice Aydin"
        assert summaries[0].total_amount == Decimal("1100.00")

    def test_breakdown_follows_student_order(self, aggregator: PaymentAggregator):
        summaries = aggregator.aggregate(ROSTER, [
            (EMRE, [period(COACH_BORIS_ID, date(2024, 5, 1), date(2024, 5, 2))]),
            (FATMA, [
                period(COACH_ALICE_ID, date(2024, 4, 29), date(2024, 5, 13)),
                period(COACH_BORIS_ID, date(2024, 5, 14), date(2024, 5, 28)),
            ]),
        ])
        boris = summaries[1]
        assert [item.student_name for item in boris.breakdown] == ["Emre Eren", "Fatma Foster"]
        assert [item.days_worked for item in boris.breakdown] == [2, 15]
        assert boris.active_student_count == 2

    def test_student_counted_once_per_coach(self, aggregator: PaymentAggregator):
        summaries = aggregator.aggregate(ROSTER, [
            (GOKHAN, [
                period(COACH_ALICE_ID, date(2024, 4, 29), date(2024, 5, 4)),
                period(COACH_BORIS_ID, date(2024, 5, 5), date(2024, 5, 9)),
                period(COACH_ALICE_ID, date(2024, 5, 10), date(2024, 5, 28)),
            ]),
        ])
        alice = summaries[0]
        assert len(alice.breakdown) == 2
        assert alice.active_student_count == 1

    def test_totals_are_rounded_only_on_output(self, aggregator: PaymentAggregator):
        """
        Three single days at 1100/30 each round to 36.67, but the total is
        exactly 110.00, not 110.01.
        """
        summaries = aggregator.aggregate(ROSTER, [
            (student, [period(COACH_CLARA_ID, date(2024, 5, 1), date(2024, 5, 1))])
            for student in (EMRE, FATMA, GOKHAN)
        ])
        payload = summaries[0].model_dump(mode="json", by_alias=True)
        assert [item["amount"] for item in payload["breakdown"]] == ["36.67", "36.67", "36.67"]
        assert payload["totalAmount"] == "110.00"

    def test_unknown_coach_aborts(self, aggregator: PaymentAggregator):
        with pytest.raises(DataIntegrityError) as exc_info:
            aggregator.aggregate(ROSTER, [
                (EMRE, [period(COACH_ALICE_ID, date(2024, 5, 1), date(2024, 5, 28))]),
                (FATMA, [period(UNKNOWN_COACH_ID, date(2024, 5, 1), date(2024, 5, 28))]),
            ])
        assert exc_info.value.coach_id == UNKNOWN_COACH_ID
        assert exc_info.value.student_id == STUDENT_FATMA_ID

    def test_nothing_to_pay(self, aggregator: PaymentAggregator):
        assert aggregator.aggregate(ROSTER, []) == []


class TestSerialization:

    def test_summary_wire_format(self, aggregator: PaymentAggregator):
        summaries = aggregator.aggregate(ROSTER, [
            (GOKHAN, [period(COACH_BORIS_ID, date(2024, 4, 29), date(2024, 5, 8))]),
        ])
        payload = summaries[0].model_dump(mode="json", by_alias=True)
        assert payload == {
            "coachId": str(COACH_BORIS_ID),
            "coachName": "Boris Bulut",
            "activeStudentCount": 1,
            "totalAmount": "366.67",
            "breakdown": [{
                "studentId": str(STUDENT_GOKHAN_ID),
                "studentName": "Gokhan Gul",
                "amount": "366.67",
                "daysWorked": 10,
            }],
        }
