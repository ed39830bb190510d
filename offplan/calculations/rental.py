"""Rental income models for long-term lease and short-term (nightly) letting."""

from dataclasses import dataclass
from typing import Optional

from ..models.deal import DealParameters, ShortTermRentalConfig
from ..models.lookups import DAYS_PER_YEAR


@dataclass
class RentalIncome:
    """Income for one period of a rental strategy."""

    gross: float
    expenses: float
    net: float


def calculate_long_term_income(
    params: DealParameters,
    years_since_handover: int = 0,
    months_active: int = 12,
) -> RentalIncome:
    """Calculate long-term lease income for one year.

    Net = gross annual rent - service charges, pro-rated by the months the
    unit is rentable that year.
    - Gross rent: base price x yield %, grown by rent_growth_rate per
      year since handover
    - Service charges: per-sqft charge x unit size (not grown)

    Args:
        params: Deal parameters.
        years_since_handover: Whole calendar years since the handover year.
        months_active: Months of the year with the unit rentable (0-12).

    Returns:
        RentalIncome pro-rated to months_active.
    """
    fraction = months_active / 12
    gross_annual = (
        params.base_price
        * params.rental_yield_percent / 100
        * (1 + params.rent_growth_rate / 100) ** years_since_handover
    )
    service_charges = params.annual_service_charges

    gross = gross_annual * fraction
    expenses = service_charges * fraction
    return RentalIncome(gross=gross, expenses=expenses, net=gross - expenses)


def calculate_short_term_income(
    config: ShortTermRentalConfig,
    years_since_handover: int = 0,
    months_active: int = 12,
    adr_growth_rate: float = 0.0,
) -> RentalIncome:
    """Calculate short-term rental income for one year.

    Net = ADR x 365 x occupancy % x (1 - operating % - management %)

    Args:
        config: Nightly rental assumptions.
        years_since_handover: Whole calendar years since the handover year.
        months_active: Months of the year with the unit rentable (0-12).
        adr_growth_rate: Annual ADR growth (%).

    Returns:
        RentalIncome pro-rated to months_active.
    """
    fraction = months_active / 12
    adr = config.average_daily_rate * (1 + adr_growth_rate / 100) ** years_since_handover
    gross = adr * DAYS_PER_YEAR * config.occupancy_percent / 100 * fraction
    net = gross * config.net_margin
    return RentalIncome(gross=gross, expenses=gross - net, net=net)


def airbnb_income(
    params: DealParameters,
    years_since_handover: int,
    months_active: int,
) -> Optional[RentalIncome]:
    """Short-term income when the comparison is enabled, else None."""
    if not params.airbnb_enabled:
        return None
    return calculate_short_term_income(
        params.short_term_rental,
        years_since_handover=years_since_handover,
        months_active=months_active,
        adr_growth_rate=params.adr_growth_rate,
    )
