"""Strategy comparison, hold IRR and text summaries."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np
import numpy_financial as npf

from ..models.deal import DealParameters
from ..models.lookups import NEVER_PAYS_OFF
from .payment_schedule import build_payment_schedule
from .projection import ProjectionResult
from .timeline import calendar_year_of


class RentalStrategy(str, Enum):
    """How the unit is let after handover."""
    LONG_TERM = "long_term"
    SHORT_TERM = "short_term"


@dataclass
class StrategyComparison:
    """Long-term lease vs short-term rental over the projection horizon."""

    long_term_total_income: float
    short_term_total_income: float

    long_term_first_full_year_income: float
    short_term_first_full_year_income: float

    long_term_years_to_pay_off: float
    short_term_years_to_pay_off: float

    long_term_break_even_year: Optional[int]
    short_term_break_even_year: Optional[int]

    better_strategy: RentalStrategy
    income_difference: float  # Short-term total - long-term total


def compare_strategies(result: ProjectionResult) -> StrategyComparison:
    """Compare long-term and short-term rental over the horizon.

    Args:
        result: Projection with the short-term comparison enabled.

    Returns:
        StrategyComparison with totals and the better strategy
        (long-term wins ties).

    Raises:
        ValueError: If the projection has no short-term figures.
    """
    if not result.airbnb_enabled:
        raise ValueError("Projection has no short-term rental figures to compare")

    hold = result.hold_analysis
    long_term_total = result.total_net_income
    short_term_total = result.total_airbnb_net_income
    difference = short_term_total - long_term_total

    return StrategyComparison(
        long_term_total_income=long_term_total,
        short_term_total_income=short_term_total,
        long_term_first_full_year_income=hold.first_full_year_net_income,
        short_term_first_full_year_income=hold.airbnb_first_full_year_net_income,
        long_term_years_to_pay_off=hold.years_to_pay_off,
        short_term_years_to_pay_off=hold.airbnb_years_to_pay_off,
        long_term_break_even_year=hold.break_even_year,
        short_term_break_even_year=hold.airbnb_break_even_year,
        better_strategy=(
            RentalStrategy.SHORT_TERM if difference > 0 else RentalStrategy.LONG_TERM
        ),
        income_difference=difference,
    )


def hold_cash_flows(params: DealParameters, result: ProjectionResult) -> np.ndarray:
    """Annual cash flows of holding the unit to the end of the horizon.

    One flow per projection year:
    - Outflows: payment plan events and entry costs dated in that year
    - Inflows: long-term net income, plus the final year's property value

    Payments dated after the horizon are charged to the final year.
    """
    schedule = build_payment_schedule(params)
    years = [p.calendar_year for p in result.projections]
    first_year, last_year = years[0], years[-1]

    flows = np.zeros(len(years))
    for event in schedule.events:
        year = min(calendar_year_of(params, event.month), last_year)
        flows[year - first_year] -= event.amount

    for i, projection in enumerate(result.projections):
        if projection.net_income is not None:
            flows[i] += projection.net_income

    flows[-1] += result.final_projection.property_value
    return flows


def calculate_hold_irr(params: DealParameters, result: ProjectionResult) -> Optional[float]:
    """Annual IRR of buying, renting long-term and selling at the horizon.

    Args:
        params: Deal parameters the projection was run with.
        result: Yearly projection.

    Returns:
        IRR as a decimal (0.12 = 12%), or None when the solver finds none.
    """
    flows = hold_cash_flows(params, result)
    irr = npf.irr(flows)
    if irr is None or math.isnan(irr):
        return None
    return float(irr)


def format_projection_table(result: ProjectionResult) -> str:
    """Format the yearly projection as a text table.

    Args:
        result: Yearly projection.

    Returns:
        Formatted string table.
    """
    show_airbnb = result.airbnb_enabled
    width = 104 if show_airbnb else 88

    header = (
        f"{'Year':<6} {'Phase':<13} {'Months':>6} {'Value':>14} {'Equity':>14} "
        f"{'Net Rent':>14} {'Cumulative':>14}"
    )
    if show_airbnb:
        header += f" {'Short-Term':>14}"

    lines = [
        "=" * width,
        "YEARLY PROJECTION",
        "=" * width,
        header,
        "-" * width,
    ]

    for p in result.projections:
        phase = "handover" if p.is_handover else p.phase.value
        net_income = "-" if p.net_income is None else f"{p.net_income:,.0f}"
        line = (
            f"{p.calendar_year:<6} {phase:<13} {p.months_active:>6} "
            f"{p.property_value:>14,.0f} {p.equity_deployed:>14,.0f} "
            f"{net_income:>14} {p.cumulative_net_income:>14,.0f}"
        )
        if show_airbnb:
            airbnb = "-" if p.airbnb_net_income is None else f"{p.airbnb_net_income:,.0f}"
            line += f" {airbnb:>14}"
        if p.is_break_even:
            line += "  *break-even"
        lines.append(line)

    hold = result.hold_analysis
    lines.extend([
        "-" * width,
        f"{'Handover Price':<30} {result.handover_price:>16,.0f}",
        f"{'Capital Invested':<30} {hold.total_capital_invested:>16,.0f}",
        f"{'Yield on Investment':<30} {hold.rental_yield_on_investment:>15.2f}%",
        f"{'Years to Pay Off':<30} {hold.years_to_pay_off:>16.1f}",
        "=" * width,
    ])

    return "\n".join(lines)


def format_comparison_table(comparison: StrategyComparison) -> str:
    """Format a strategy comparison as a text table.

    Args:
        comparison: Strategy comparison result.

    Returns:
        Formatted string table.
    """
    c = comparison

    def payoff(years: float) -> str:
        return "never" if years == NEVER_PAYS_OFF else f"{years:.1f}"

    def year(value: Optional[int]) -> str:
        return "-" if value is None else str(value)

    lines: List[str] = [
        "=" * 60,
        "STRATEGY COMPARISON",
        "=" * 60,
        "",
        f"{'Metric':<25} {'Long-Term':>15} {'Short-Term':>15}",
        "-" * 60,
        f"{'Total Net Income':<25} {c.long_term_total_income:>15,.0f} {c.short_term_total_income:>15,.0f}",
        f"{'First Full Year':<25} {c.long_term_first_full_year_income:>15,.0f} "
        f"{c.short_term_first_full_year_income:>15,.0f}",
        f"{'Years to Pay Off':<25} {payoff(c.long_term_years_to_pay_off):>15} "
        f"{payoff(c.short_term_years_to_pay_off):>15}",
        f"{'Break-Even Year':<25} {year(c.long_term_break_even_year):>15} "
        f"{year(c.short_term_break_even_year):>15}",
        "",
        "-" * 60,
        f"{'Income Difference':<25} {c.income_difference:>+15,.0f}",
        f"{'Better Strategy':<25} {c.better_strategy.value:>15}",
        "=" * 60,
    ]

    return "\n".join(lines)
