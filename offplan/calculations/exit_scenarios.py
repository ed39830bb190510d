"""Exit scenario evaluator: sell the unit at any elapsed month.

Price and equity come from price_curve and payment_schedule, the same
functions the yearly projection uses, so an exit at a year-end mark shows
exactly the projection row for that year.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from ..models.deal import DealParameters
from ..models.engine_config import EngineConfig, DEFAULT_ENGINE_CONFIG
from .payment_schedule import _equity_deployed_at, threshold_equity
from .price_curve import _price_at

logger = logging.getLogger(__name__)

# Exit points as % of the construction period
DEFAULT_EXIT_PERCENTS = (50, 60, 70, 80, 90, 100)


class ReturnRating(str, Enum):
    """Rating of an annualized return on equity."""
    EXCELLENT = "excellent"  # >= 25%
    GOOD = "good"  # >= 15%
    FAIR = "fair"  # >= 10%
    LOW = "low"


def rate_annualized_roe(annualized_roe: float) -> ReturnRating:
    if annualized_roe >= 25:
        return ReturnRating.EXCELLENT
    if annualized_roe >= 15:
        return ReturnRating.GOOD
    if annualized_roe >= 10:
        return ReturnRating.FAIR
    return ReturnRating.LOW


@dataclass
class ExitScenario:
    """Profit and return of selling at a given elapsed month."""

    exit_months: int
    exit_price: float
    appreciation_percent: float  # Exit price vs base price

    # Capital
    equity_deployed: float
    equity_percent: float  # Of base price
    entry_costs: float
    total_capital: float  # Equity + entry costs

    # Profit
    profit: float  # Exit price - base price
    true_profit: float  # After entry costs
    agent_commission: float
    noc_fee: float
    exit_costs: float
    net_profit: float  # After entry and exit costs

    # Returns (%)
    roe: float
    true_roe: float
    net_roe: float
    display_roe: float
    annualized_roe: float

    # Developer resale threshold (informational)
    threshold_equity: float
    advance_required: float
    is_threshold_met: bool

    is_speculative: bool  # Beyond the projection horizon

    @property
    def exit_years(self) -> float:
        return self.exit_months / 12

    @property
    def rating(self) -> ReturnRating:
        return rate_annualized_roe(self.annualized_roe)


def _percent_of(amount: float, base: float) -> float:
    if base <= 0:
        return 0.0
    return amount / base * 100


def evaluate_exit(
    exit_months: int,
    params: DealParameters,
    total_entry_costs: Optional[float] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ExitScenario:
    """Evaluate selling the unit after a number of months from booking.

    Returns are reported three ways:
    - roe: price gain over equity deployed
    - true_roe: gain after entry costs over equity + entry costs
    - net_roe: as true_roe, also after exit costs (agent commission, NOC)

    display_roe is net_roe when there are exit costs, else true_roe.

    Args:
        exit_months: Months since booking. Months beyond the horizon
            extrapolate the mature-phase CAGR and are flagged speculative.
        params: Deal parameters.
        total_entry_costs: Entry costs to charge (defaults to DLD + Oqood).
        config: Engine configuration (horizon, agent commission).

    Returns:
        ExitScenario for that month.

    Raises:
        ValueError: If exit_months is negative.
        InvalidDealError: If params are invalid.

    Example:
        >>> scenario = evaluate_exit(24, params)  # Exit at handover
        >>> scenario.exit_price
        1210000.0
    """
    if exit_months < 0:
        raise ValueError(f"exit_months must be >= 0, got {exit_months}")
    params.require_valid()

    base_price = params.base_price
    entry_costs = params.total_entry_costs if total_entry_costs is None else total_entry_costs

    exit_price = _price_at(exit_months, params)
    equity_deployed = _equity_deployed_at(exit_months, params)

    profit = exit_price - base_price
    true_profit = profit - entry_costs
    total_capital = equity_deployed + entry_costs

    roe = _percent_of(profit, equity_deployed)
    true_roe = _percent_of(true_profit, total_capital)

    # Exit costs
    agent_commission = 0.0
    if params.exit_agent_commission_enabled:
        agent_commission = exit_price * config.exit_agent_commission_percent / 100
    noc_fee = params.exit_noc_fee
    exit_costs = agent_commission + noc_fee

    net_profit = true_profit - exit_costs
    net_roe = _percent_of(net_profit, total_capital)
    display_roe = net_roe if exit_costs != 0 else true_roe

    annualized_roe = display_roe / (exit_months / 12) if exit_months > 0 else 0.0

    required = threshold_equity(params)
    horizon_end = params.total_months + config.horizon_years * 12

    return ExitScenario(
        exit_months=exit_months,
        exit_price=exit_price,
        appreciation_percent=_percent_of(profit, base_price),
        equity_deployed=equity_deployed,
        equity_percent=_percent_of(equity_deployed, base_price),
        entry_costs=entry_costs,
        total_capital=total_capital,
        profit=profit,
        true_profit=true_profit,
        agent_commission=agent_commission,
        noc_fee=noc_fee,
        exit_costs=exit_costs,
        net_profit=net_profit,
        roe=roe,
        true_roe=true_roe,
        net_roe=net_roe,
        display_roe=display_roe,
        annualized_roe=annualized_roe,
        threshold_equity=required,
        advance_required=max(0.0, required - equity_deployed),
        is_threshold_met=equity_deployed >= required,
        is_speculative=exit_months > horizon_end,
    )


def evaluate_exits(
    months: Iterable[int],
    params: DealParameters,
    total_entry_costs: Optional[float] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> List[ExitScenario]:
    """Evaluate several exit points, in the order given."""
    return [evaluate_exit(m, params, total_entry_costs, config) for m in months]


def auto_exit_months(total_months: int) -> List[int]:
    """Three default exit points for a construction period.

    Roughly 50% and 67% of construction, and 6 months before handover
    (never earlier than month 12). Points are kept in order at least
    3 months apart.

    Example:
        >>> auto_exit_months(36)
        [18, 24, 30]
    """
    exit3 = max(12, total_months - 6)
    exit1 = max(6, round(total_months * 0.5))
    exit2 = max(exit1 + 3, round(total_months * 0.67))
    return [
        min(exit1, exit3 - 6),
        min(max(exit2, exit1 + 3), exit3 - 3),
        exit3,
    ]


def exit_percent_scenarios(
    params: DealParameters,
    percents: Sequence[float] = DEFAULT_EXIT_PERCENTS,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> List[ExitScenario]:
    """Exits at percentages of the construction period.

    Args:
        params: Deal parameters.
        percents: Construction percentages (100 = handover).
        config: Engine configuration.

    Returns:
        One ExitScenario per percentage.
    """
    params.require_valid()
    months = [round(params.total_months * p / 100) for p in percents]
    logger.debug("Exit scenarios at months %s", months)
    return evaluate_exits(months, params, config=config)


def best_exit(scenarios: Sequence[ExitScenario]) -> Optional[ExitScenario]:
    """Scenario with the highest annualized return, None when empty."""
    if not scenarios:
        return None
    return max(scenarios, key=lambda s: s.annualized_roe)
