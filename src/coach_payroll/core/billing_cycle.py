'''
Billing cycle resolution.

A cycle runs from the day after the previous payment date up to and
including the current/upcoming payment date. The payment day is clamped to
the last day of short months (day 30 in February becomes the 28th/29th).
'''
import calendar
from datetime import date, timedelta

from ..common.exceptions import ConfigurationError
from ..common.logger import log
from ..models.payments import CycleWindow


def validate_payment_day(payment_day: int) -> None:
    if isinstance(payment_day, bool) or not isinstance(payment_day, int) or not 1 <= payment_day <= 31:
        raise ConfigurationError(f"Payment day must be an integer between 1 and 31, got {payment_day!r}.")


def clamped_payment_date(year: int, month: int, payment_day: int) -> date:
    """
    Returns the payment date in the given month, clamping the payment day
    to the month's last day. `month` may overflow 1..12 in either direction;
    it is normalised with the matching year rollover.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(payment_day, last_day))


class BillingCycleResolver:
    """
    Derives the current/upcoming billing cycle window from the configured
    payment day and 'today'.
    """

    def resolve(self, today: date, payment_day: int) -> CycleWindow:
        validate_payment_day(payment_day)

        # 1. The payment date we are currently accumulating for (>= today)
        cycle_end = clamped_payment_date(today.year, today.month, payment_day)
        if cycle_end < today:
            cycle_end = clamped_payment_date(today.year, today.month + 1, payment_day)

        # 2. The previous payment date is one calendar month before cycle_end
        previous_end = clamped_payment_date(cycle_end.year, cycle_end.month - 1, payment_day)
        cycle_start = previous_end + timedelta(days=1)

        cycle = CycleWindow(start=cycle_start, end=cycle_end)
        log.info(f"Resolved billing cycle {cycle} for today={today.isoformat()} (payment day {payment_day}).")
        return cycle
