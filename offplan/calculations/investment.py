"""Unified entry point: one call runs every calculation for a deal."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..models.deal import DealParameters
from ..models.engine_config import EngineConfig, DEFAULT_ENGINE_CONFIG
from ..models.mortgage import MortgageParameters
from .exit_scenarios import ExitScenario, auto_exit_months, evaluate_exits
from .mortgage import MortgageAnalysis, analyze_mortgage
from .payment_schedule import EntryCosts, PaymentSchedule, build_payment_schedule
from .projection import ProjectionResult, project_yearly

logger = logging.getLogger(__name__)


@dataclass
class InvestmentResult:
    """Everything the engine derives from one set of deal parameters."""

    params: DealParameters
    schedule: PaymentSchedule
    projection: ProjectionResult
    mortgage: Optional[MortgageAnalysis] = None
    exit_scenarios: List[ExitScenario] = field(default_factory=list)

    @property
    def entry_costs(self) -> EntryCosts:
        return self.schedule.entry_costs

    @property
    def has_mortgage(self) -> bool:
        return self.mortgage is not None


def _stress_test_rent(projection: ProjectionResult) -> tuple:
    """Monthly gross rent and service charges of the first full year."""
    first_full_year = projection.hold_analysis.first_full_year
    if first_full_year is None:
        return 0.0, 0.0
    year = projection.get_year(first_full_year)
    return year.gross_rent / 12, year.service_charges / 12


def calculate_investment(
    params: DealParameters,
    mortgage: Optional[MortgageParameters] = None,
    exit_months: Optional[Sequence[int]] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> InvestmentResult:
    """Calculate a complete off-plan investment.

    This is the single entry point for presentation layers: payment
    schedule, yearly projection, mortgage analysis and exits all come from
    one pass over the same validated inputs.

    Args:
        params: Deal parameters.
        mortgage: Mortgage parameters; analysed only when enabled.
        exit_months: Exit points to evaluate (default: three auto exits
            across the construction period).
        config: Engine configuration.

    Returns:
        InvestmentResult with every derived entity.

    Raises:
        InvalidDealError: If params are invalid.
        InvalidMortgageError: If an enabled mortgage is invalid.
        ValueError: If config or an exit month is invalid.
    """
    params.require_valid()
    config.require_valid()

    schedule = build_payment_schedule(params)
    projection = project_yearly(params, config)

    mortgage_analysis = None
    if mortgage is not None and mortgage.enabled:
        monthly_rent, monthly_service_charges = _stress_test_rent(projection)
        mortgage_analysis = analyze_mortgage(
            mortgage,
            base_price=params.base_price,
            pre_handover_percent=params.pre_handover_percent,
            monthly_rent=monthly_rent,
            monthly_service_charges=monthly_service_charges,
            config=config,
        )

    if exit_months is None:
        exit_months = auto_exit_months(params.total_months)
    exits = evaluate_exits(exit_months, params, schedule.entry_costs.total, config)

    logger.debug(
        "Investment: %d projection years, mortgage=%s, %d exits",
        len(projection.projections), mortgage_analysis is not None, len(exits),
    )

    return InvestmentResult(
        params=params,
        schedule=schedule,
        projection=projection,
        mortgage=mortgage_analysis,
        exit_scenarios=exits,
    )
