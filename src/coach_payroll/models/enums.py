'''

'''
import enum


class PaymentStatus(str, enum.Enum):
    """Lifecycle of a saved payment record."""
    PENDING = 'pending'
    PAID = 'paid'


class RenewalStatus(str, enum.Enum):
    """Where a student's package stands relative to its end date."""
    EXPIRING = 'expiring'
    EXPIRED = 'expired'
