"""
Tests for the Dashboard API endpoints.
"""
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient

from coach_payroll.models import dashboard as dashboard_models
from coach_payroll.models.enums import RenewalStatus

from tests.constants import COACH_BORIS_ID, STUDENT_GOKHAN_ID, AS_OF, GOKHAN_PACKAGE_END


class TestDashboardAPI:

    def test_stats(self, client: TestClient, mock_dashboard_service):
        mock_dashboard_service.get_stats.return_value = dashboard_models.DashboardStats(
            as_of=AS_OF,
            active_coaches=3,
            active_students=4,
            students_on_package=2,
            expected_monthly_payment=Decimal("2200"),
        )

        response = client.get("/dashboard/stats", params={"as_of": AS_OF.isoformat()})

        assert response.status_code == 200
        assert response.json() == {
            "asOf": "2024-05-10",
            "activeCoaches": 3,
            "activeStudents": 4,
            "studentsOnPackage": 2,
            "expectedMonthlyPayment": "2200.00",
        }
        mock_dashboard_service.get_stats.assert_awaited_once_with(AS_OF)

    def test_renewal_alerts(self, client: TestClient, mock_dashboard_service):
        mock_dashboard_service.get_renewal_alerts.return_value = [dashboard_models.RenewalAlert(
            student_id=STUDENT_GOKHAN_ID,
            student_name="Gokhan Gul",
            email="gokhan@students.test",
            package_months=3,
            package_start_date=date(2024, 2, 9),
            package_end_date=GOKHAN_PACKAGE_END,
            coach_id=COACH_BORIS_ID,
            coach_name="Boris Bulut",
            days_remaining=-2,
            status=RenewalStatus.EXPIRED,
        )]

        response = client.get("/dashboard/renewal-alerts")

        assert response.status_code == 200
        alert = response.json()[0]
        assert alert["studentId"] == str(STUDENT_GOKHAN_ID)
        assert alert["packageEndDate"] == "2024-05-08"
        assert alert["daysRemaining"] == -2
        assert alert["status"] == "expired"
        mock_dashboard_service.get_renewal_alerts.assert_awaited_once_with(None)

    def test_bad_date_is_rejected(self, client: TestClient):
        response = client.get("/dashboard/renewal-alerts", params={"as_of": "yesterday"})
        assert response.status_code == 422
