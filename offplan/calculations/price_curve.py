"""Property value as a function of months elapsed since booking.

The same curve feeds the yearly projection and every exit quote, so a
projection row and an exit at the same month always show the same price.

Three regimes:
1. Construction (0 <= m <= total_months): power curve from base price to
   the handover price, base + (handover - base) * (m / total) ** 0.7
2. Growth: annual compounding at growth_appreciation for
   growth_period_years after handover
3. Mature: annual compounding at mature_appreciation afterwards

Fractional years compound with a fractional exponent.
"""

from typing import Iterable

import numpy as np

from ..models.deal import DealParameters
from ..models.lookups import PRICE_CURVE_EXPONENT


def handover_price(params: DealParameters) -> float:
    """Value at handover: construction CAGR over the construction period.

    Example:
        >>> # 1,000,000 at 10% over 24 months
        >>> handover_price(params)
        1210000.0
    """
    return params.base_price * (1 + params.appreciation_rate / 100) ** (params.total_months / 12)


def _price_at(elapsed_months: float, params: DealParameters) -> float:
    """Price curve without validation."""
    if elapsed_months < 0:
        raise ValueError(f"elapsed_months must be >= 0, got {elapsed_months}")

    total_months = params.total_months
    base_price = params.base_price
    at_handover = handover_price(params)

    if elapsed_months <= total_months:
        progress = elapsed_months / total_months
        return base_price + (at_handover - base_price) * progress ** PRICE_CURVE_EXPONENT

    years_after_handover = (elapsed_months - total_months) / 12
    growth_years = min(years_after_handover, params.growth_period_years)
    mature_years = max(0.0, years_after_handover - params.growth_period_years)

    return (
        at_handover
        * (1 + params.growth_appreciation / 100) ** growth_years
        * (1 + params.mature_appreciation / 100) ** mature_years
    )


def price_at(elapsed_months: float, params: DealParameters) -> float:
    """Property value after a number of months from booking.

    Args:
        elapsed_months: Months since booking (fractional allowed).
        params: Deal parameters.

    Returns:
        Projected property value.

    Raises:
        ValueError: If elapsed_months is negative.
        InvalidDealError: If params are invalid.
    """
    params.require_valid()
    return _price_at(elapsed_months, params)


def price_curve(params: DealParameters, months: Iterable[float]) -> np.ndarray:
    """Sample the price curve at several months (e.g. for a growth chart).

    Args:
        params: Deal parameters.
        months: Elapsed months to evaluate.

    Returns:
        Array of prices, one per requested month.
    """
    params.require_valid()
    return np.array([_price_at(m, params) for m in months], dtype=float)


def sample_months(params: DealParameters, horizon_years: int, points_per_year: int = 4) -> np.ndarray:
    """Evenly spaced months from booking to horizon_years after handover."""
    end = params.total_months + horizon_years * 12
    count = max(2, int((end / 12) * points_per_year) + 1)
    return np.linspace(0, end, count)
