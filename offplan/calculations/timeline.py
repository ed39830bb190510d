"""Calendar anchoring for elapsed-month offsets."""

from datetime import date

from dateutil.relativedelta import relativedelta

from ..models.deal import DealParameters


def booking_date(params: DealParameters) -> date:
    """First day of the booking month."""
    return date(params.booking_year, params.booking_month, 1)


def handover_date(params: DealParameters) -> date:
    """First day of the handover month."""
    return date(params.handover_year, params.resolved_handover_month, 1)


def month_to_date(params: DealParameters, elapsed_months: int) -> date:
    """Calendar month (first day) reached after a number of months from booking.

    Args:
        params: Deal parameters.
        elapsed_months: Whole months since booking.

    Returns:
        Date of the first day of that month.
    """
    return booking_date(params) + relativedelta(months=elapsed_months)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end (negative if end is earlier)."""
    delta = relativedelta(date(end.year, end.month, 1), date(start.year, start.month, 1))
    return delta.years * 12 + delta.months


def months_to_year_end(params: DealParameters, calendar_year: int) -> int:
    """Months from booking to the end of a calendar year.

    Booking is anchored at the start of the booking month, so a January
    booking reaches the end of its first year at month 12.
    """
    return (calendar_year - params.booking_year) * 12 + 13 - params.booking_month


def calendar_year_of(params: DealParameters, elapsed_months: int) -> int:
    """Calendar year containing the month that starts at an elapsed offset."""
    return month_to_date(params, elapsed_months).year
