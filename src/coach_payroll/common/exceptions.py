"""
This file contains custom, application-specific exceptions.
"""

class PayrollError(Exception):
    """Base class for faults raised by the payment calculation."""
    pass

class ConfigurationError(PayrollError):
    """Raised when the payment settings (fee or payment day) are unusable."""
    pass

class DataIntegrityError(PayrollError):
    """Raised when a student or transfer references a coach missing from the roster."""
    def __init__(self, message: str, coach_id=None, student_id=None):
        super().__init__(message)
        self.coach_id = coach_id
        self.student_id = student_id
