"""Scenario matrix runner for stress-testing deal assumptions.

Uses the unified entry point (calculate_investment) for every variation.
"""

import logging
from dataclasses import dataclass
from itertools import product
from typing import Iterable, Iterator, List, Optional, Sequence

from .models.deal import DealParameters
from .models.engine_config import EngineConfig, DEFAULT_ENGINE_CONFIG
from .models.mortgage import MortgageParameters
from .calculations.investment import InvestmentResult, calculate_investment
from .calculations.metrics import calculate_hold_irr

logger = logging.getLogger(__name__)

DEFAULT_APPRECIATION_RATES = (6.0, 8.0, 10.0, 12.0, 15.0)
DEFAULT_RENTAL_YIELDS = (5.0, 6.0, 7.0, 8.0)


@dataclass
class ScenarioVariation:
    """One set of overridden assumptions."""

    name: str
    appreciation_rate: float
    rental_yield_percent: float
    financing_percent: Optional[float] = None  # None = keep the base mortgage

    def apply(
        self,
        params: DealParameters,
        mortgage: Optional[MortgageParameters],
    ) -> tuple:
        """Return (params, mortgage) with this variation's overrides."""
        varied_params = params.copy(
            appreciation_rate=self.appreciation_rate,
            rental_yield_percent=self.rental_yield_percent,
        )
        if self.financing_percent is None:
            return varied_params, mortgage
        base_mortgage = mortgage if mortgage is not None else MortgageParameters()
        return varied_params, base_mortgage.copy(
            enabled=True, financing_percent=self.financing_percent
        )


@dataclass
class ScenarioMatrixResult:
    """Result of running one variation."""

    variation: ScenarioVariation
    result: InvestmentResult
    hold_irr: Optional[float]  # None when the IRR solver finds no root

    @property
    def last_exit_roe(self) -> float:
        """Display ROE of the latest evaluated exit."""
        return self.result.exit_scenarios[-1].display_roe

    @property
    def gap_amount(self) -> float:
        mortgage = self.result.mortgage
        return mortgage.gap_amount if mortgage is not None else 0.0


def generate_variations(
    appreciation_rates: Sequence[float] = DEFAULT_APPRECIATION_RATES,
    rental_yields: Sequence[float] = DEFAULT_RENTAL_YIELDS,
    financing_percents: Sequence[Optional[float]] = (None,),
) -> Iterator[ScenarioVariation]:
    """Generate every combination of the assumption grids.

    Args:
        appreciation_rates: Construction CAGRs (%) to test.
        rental_yields: Gross rental yields (%) to test.
        financing_percents: Loan-to-value percentages; None keeps the
            base mortgage unchanged.

    Yields:
        ScenarioVariation for each combination.
    """
    for appreciation, rental_yield, financing in product(
        appreciation_rates, rental_yields, financing_percents
    ):
        parts = [f"A{appreciation:g}", f"Y{rental_yield:g}"]
        if financing is not None:
            parts.append(f"F{financing:g}")

        yield ScenarioVariation(
            name="-".join(parts),
            appreciation_rate=appreciation,
            rental_yield_percent=rental_yield,
            financing_percent=financing,
        )


def _irr_sort_key(result: ScenarioMatrixResult) -> tuple:
    # Results without an IRR sort last
    if result.hold_irr is None:
        return (1, 0.0)
    return (0, -result.hold_irr)


def run_scenario_matrix(
    params: DealParameters,
    variations: Optional[Iterable[ScenarioVariation]] = None,
    mortgage: Optional[MortgageParameters] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> List[ScenarioMatrixResult]:
    """Run every variation and collect the results.

    Args:
        params: Base deal parameters (copied for each variation).
        variations: Variations to test. Defaults to the full default grid.
        mortgage: Base mortgage parameters.
        config: Engine configuration.

    Returns:
        List of ScenarioMatrixResult, sorted by hold IRR (descending).
    """
    if variations is None:
        variations = generate_variations()

    results: List[ScenarioMatrixResult] = []
    for variation in variations:
        varied_params, varied_mortgage = variation.apply(params, mortgage)
        result = calculate_investment(varied_params, varied_mortgage, config=config)
        results.append(ScenarioMatrixResult(
            variation=variation,
            result=result,
            hold_irr=calculate_hold_irr(varied_params, result.projection),
        ))

    logger.info("Scenario matrix: ran %d variations", len(results))
    results.sort(key=_irr_sort_key)
    return results


def format_matrix_results(
    results: List[ScenarioMatrixResult],
    show_top_n: int = 10,
) -> str:
    """Format matrix results as a text table.

    Args:
        results: Scenario matrix results (assumed sorted).
        show_top_n: Number of top results to show.

    Returns:
        Formatted string table.
    """
    lines = [
        "=" * 90,
        "SCENARIO MATRIX RESULTS (sorted by hold IRR)",
        "=" * 90,
        "",
        f"{'Rank':<6} {'Scenario':<20} {'Hold IRR':>10} {'Exit ROE':>10} "
        f"{'Yield on Inv.':>14} {'Gap':>14}",
        "-" * 90,
    ]

    for i, r in enumerate(results[:show_top_n], 1):
        irr = "n/a" if r.hold_irr is None else f"{r.hold_irr:.2%}"
        hold = r.result.projection.hold_analysis
        lines.append(
            f"{i:<6} {r.variation.name:<20} {irr:>10} "
            f"{r.last_exit_roe:>9.1f}% {hold.rental_yield_on_investment:>13.2f}% "
            f"{r.gap_amount:>14,.0f}"
        )

    lines.append("-" * 90)
    lines.append(f"\nTotal variations tested: {len(results)}")
    if results and results[0].hold_irr is not None:
        lines.append(f"Best variation: {results[0].variation.name} ({results[0].hold_irr:.2%})")
    lines.append("=" * 90)

    return "\n".join(lines)


def find_minimum_appreciation(
    params: DealParameters,
    target_irr: float,
    appreciation_rates: Sequence[float] = DEFAULT_APPRECIATION_RATES,
    mortgage: Optional[MortgageParameters] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> Optional[ScenarioMatrixResult]:
    """Find the lowest construction appreciation that reaches a hold IRR.

    The deal's own rental yield is kept fixed.

    Args:
        params: Base deal parameters.
        target_irr: Required hold IRR as a decimal (0.10 = 10%).
        appreciation_rates: Candidate appreciation rates (%).
        mortgage: Base mortgage parameters.
        config: Engine configuration.

    Returns:
        The lowest-appreciation result meeting the target, or None.
    """
    variations = generate_variations(
        appreciation_rates=sorted(appreciation_rates),
        rental_yields=(params.rental_yield_percent,),
    )
    results = run_scenario_matrix(params, variations, mortgage, config)

    meeting_target = [
        r for r in results if r.hold_irr is not None and r.hold_irr >= target_irr
    ]
    if not meeting_target:
        return None
    return min(meeting_target, key=lambda r: r.variation.appreciation_rate)
