"""Yearly projection engine.

Walks calendar years from the booking year to the end of the hold horizon
and produces one snapshot per year:
- Construction years: value grows along the price curve, no income
- Handover year: partial-year income from the handover month
- Growth / mature years: full-year income, phased appreciation

Property value and equity deployed come from price_curve and
payment_schedule, never from formulas local to this module.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..models.deal import DealParameters
from ..models.engine_config import EngineConfig, DEFAULT_ENGINE_CONFIG
from ..models.lookups import NEVER_PAYS_OFF
from .payment_schedule import build_payment_schedule, _equity_deployed_at
from .price_curve import handover_price, _price_at
from .rental import airbnb_income, calculate_long_term_income
from .timeline import months_to_year_end

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Appreciation regime of a projection year."""
    CONSTRUCTION = "construction"
    GROWTH = "growth"
    MATURE = "mature"


@dataclass
class YearlyProjection:
    """Snapshot of a single calendar year."""

    year: int  # 1-indexed year of the hold
    calendar_year: int
    elapsed_months: int  # Valuation mark (end of year, or end of horizon)
    phase: Phase
    is_handover: bool
    months_active: int  # Months of rental income in this year

    property_value: float
    equity_deployed: float

    # Long-term lease (None during construction)
    gross_rent: Optional[float] = None
    service_charges: Optional[float] = None
    net_income: Optional[float] = None
    cumulative_net_income: float = 0.0
    is_break_even: bool = False

    # Short-term rental (None when disabled or during construction)
    airbnb_gross_income: Optional[float] = None
    airbnb_net_income: Optional[float] = None
    airbnb_cumulative_net_income: float = 0.0
    is_airbnb_break_even: bool = False

    @property
    def is_construction(self) -> bool:
        return self.phase == Phase.CONSTRUCTION

    @property
    def is_partial(self) -> bool:
        """True for income years with fewer than 12 active months."""
        return not self.is_construction and self.months_active < 12


@dataclass
class HoldAnalysis:
    """Annualized hold metrics, based on the first full post-handover year."""

    total_capital_invested: float  # All price payments + entry costs

    first_full_year: Optional[int]  # Calendar year, None if the horizon has none
    first_full_year_net_income: float
    rental_yield_on_investment: float  # %
    years_to_pay_off: float  # NEVER_PAYS_OFF when income <= 0
    break_even_year: Optional[int]

    airbnb_first_full_year_net_income: Optional[float] = None
    airbnb_rental_yield_on_investment: Optional[float] = None
    airbnb_years_to_pay_off: Optional[float] = None
    airbnb_break_even_year: Optional[int] = None


@dataclass
class ProjectionResult:
    """Complete yearly projection for a deal."""

    projections: List[YearlyProjection]
    hold_analysis: HoldAnalysis
    total_months: int
    handover_price: float
    total_entry_costs: float
    horizon_end_month: int
    airbnb_enabled: bool = False

    def get_year(self, calendar_year: int) -> YearlyProjection:
        """Get the projection for a calendar year."""
        for projection in self.projections:
            if projection.calendar_year == calendar_year:
                return projection
        raise KeyError(f"Calendar year {calendar_year} is outside the projection")

    def get_phase_years(self, phase: Phase) -> List[YearlyProjection]:
        """Get all projection years in a given phase."""
        return [p for p in self.projections if p.phase == phase]

    @property
    def handover_projection(self) -> YearlyProjection:
        return next(p for p in self.projections if p.is_handover)

    @property
    def final_projection(self) -> YearlyProjection:
        return self.projections[-1]

    @property
    def total_net_income(self) -> float:
        return self.final_projection.cumulative_net_income

    @property
    def total_airbnb_net_income(self) -> float:
        return self.final_projection.airbnb_cumulative_net_income


def _years_to_pay_off(capital: float, annual_income: float) -> float:
    """Years of income needed to recover capital.

    Returns NEVER_PAYS_OFF only when income is zero or negative; long
    paybacks are reported as computed.
    """
    if annual_income <= 0:
        return NEVER_PAYS_OFF
    return capital / annual_income


def _yield_on_investment(capital: float, annual_income: float) -> float:
    if capital <= 0:
        return 0.0
    return annual_income / capital * 100


def _calculate_hold_analysis(
    projections: List[YearlyProjection],
    total_capital: float,
    airbnb_enabled: bool,
) -> HoldAnalysis:
    """Derive hold metrics from the first full post-handover year.

    The handover year is skipped even when it has 12 active months: a
    pro-rated year would understate the annual return.
    """
    first_full = next(
        (p for p in projections
         if not p.is_construction and not p.is_handover and p.months_active == 12),
        None,
    )
    break_even = next((p for p in projections if p.is_break_even), None)

    income = first_full.net_income if first_full is not None else 0.0
    analysis = HoldAnalysis(
        total_capital_invested=total_capital,
        first_full_year=first_full.calendar_year if first_full is not None else None,
        first_full_year_net_income=income,
        rental_yield_on_investment=_yield_on_investment(total_capital, income),
        years_to_pay_off=_years_to_pay_off(total_capital, income),
        break_even_year=break_even.calendar_year if break_even is not None else None,
    )

    if airbnb_enabled:
        airbnb = first_full.airbnb_net_income if first_full is not None else 0.0
        airbnb_break_even = next((p for p in projections if p.is_airbnb_break_even), None)
        analysis.airbnb_first_full_year_net_income = airbnb
        analysis.airbnb_rental_yield_on_investment = _yield_on_investment(total_capital, airbnb)
        analysis.airbnb_years_to_pay_off = _years_to_pay_off(total_capital, airbnb)
        analysis.airbnb_break_even_year = (
            airbnb_break_even.calendar_year if airbnb_break_even is not None else None
        )

    return analysis


def project_yearly(
    params: DealParameters,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ProjectionResult:
    """Run the year-by-year value and cashflow projection.

    Args:
        params: Deal parameters.
        config: Engine configuration (horizon length).

    Returns:
        ProjectionResult with one YearlyProjection per calendar year.

    Raises:
        InvalidDealError: If params are invalid.
        ValueError: If the configured horizon is invalid.
    """
    params.require_valid()
    config.require_valid()

    if params.show_airbnb_comparison and params.short_term_rental is None:
        logger.warning("Short-term comparison requested without a short-term rental config")

    total_months = params.total_months
    handover_year = params.handover_year
    horizon_end = total_months + config.horizon_years * 12
    last_year = handover_year + config.horizon_years
    if params.resolved_handover_month == 1:
        # Horizon ends on a year boundary
        last_year -= 1
    growth_end = total_months + params.growth_period_years * 12

    schedule = build_payment_schedule(params)
    total_entry_costs = schedule.entry_costs.total
    total_capital = schedule.property_total + total_entry_costs
    airbnb_enabled = params.airbnb_enabled

    logger.debug(
        "Projecting %d-%d: %d construction months, horizon ends at month %d",
        params.booking_year, last_year, total_months, horizon_end,
    )

    projections: List[YearlyProjection] = []
    cumulative = 0.0
    airbnb_cumulative = 0.0
    break_even_reached = False
    airbnb_break_even_reached = False

    for calendar_year in range(params.booking_year, last_year + 1):
        year_end = months_to_year_end(params, calendar_year)
        mark = min(year_end, horizon_end)

        is_construction = calendar_year < handover_year
        is_handover = calendar_year == handover_year

        if is_construction:
            phase = Phase.CONSTRUCTION
            months_active = 0
        else:
            phase = Phase.MATURE if mark > growth_end else Phase.GROWTH
            months_active = max(0, mark - max(year_end - 12, total_months))

        projection = YearlyProjection(
            year=calendar_year - params.booking_year + 1,
            calendar_year=calendar_year,
            elapsed_months=mark,
            phase=phase,
            is_handover=is_handover,
            months_active=months_active,
            property_value=_price_at(mark, params),
            equity_deployed=_equity_deployed_at(mark, params),
        )

        if not is_construction:
            years_since_handover = calendar_year - handover_year

            income = calculate_long_term_income(params, years_since_handover, months_active)
            cumulative += income.net
            projection.gross_rent = income.gross
            projection.service_charges = income.expenses
            projection.net_income = income.net
            if not break_even_reached and cumulative >= total_capital:
                projection.is_break_even = True
                break_even_reached = True

            airbnb = airbnb_income(params, years_since_handover, months_active)
            if airbnb is not None:
                airbnb_cumulative += airbnb.net
                projection.airbnb_gross_income = airbnb.gross
                projection.airbnb_net_income = airbnb.net
                if not airbnb_break_even_reached and airbnb_cumulative >= total_capital:
                    projection.is_airbnb_break_even = True
                    airbnb_break_even_reached = True

        projection.cumulative_net_income = cumulative
        projection.airbnb_cumulative_net_income = airbnb_cumulative
        projections.append(projection)

    hold_analysis = _calculate_hold_analysis(projections, total_capital, airbnb_enabled)

    return ProjectionResult(
        projections=projections,
        hold_analysis=hold_analysis,
        total_months=total_months,
        handover_price=handover_price(params),
        total_entry_costs=total_entry_costs,
        horizon_end_month=horizon_end,
        airbnb_enabled=airbnb_enabled,
    )
