'''
Dashboard models: roster counts and package renewal alerts.
'''
from datetime import date
from typing import Optional
from uuid import UUID

from .base import CamelModel, Money
from .enums import RenewalStatus


class DashboardStats(CamelModel):
    """
    Headline numbers for the admin dashboard.
    `expected_monthly_payment` is one full monthly fee per student whose
    package is running on the reference date.
    """
    as_of: date
    active_coaches: int
    active_students: int
    students_on_package: int
    expected_monthly_payment: Money


class RenewalAlert(CamelModel):
    student_id: UUID
    student_name: str
    email: str
    phone: Optional[str] = None
    package_months: int
    package_start_date: date
    package_end_date: date
    coach_id: UUID
    coach_name: Optional[str] = None
    days_remaining: int
    status: RenewalStatus
