#!/usr/bin/env python3
"""Example script to run the off-plan investment engine on a sample deal."""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from offplan.models.deal import (
    DealParameters,
    PaymentMilestone,
    ShortTermRentalConfig,
    TriggerType,
)
from offplan.models.mortgage import MortgageParameters
from offplan.calculations.investment import calculate_investment
from offplan.calculations.metrics import (
    calculate_hold_irr,
    compare_strategies,
    format_comparison_table,
    format_projection_table,
)
from offplan.scenarios import (
    find_minimum_appreciation,
    format_matrix_results,
    generate_variations,
    run_scenario_matrix,
)


def get_sample_deal() -> DealParameters:
    """Get a 40/60 two-bedroom deal handing over mid-2028."""
    return DealParameters(
        base_price=1_850_000,
        downpayment_percent=10,
        pre_handover_percent=40,
        additional_payments=[
            PaymentMilestone(TriggerType.TIME, 6, 10, label="6 months"),
            PaymentMilestone(TriggerType.CONSTRUCTION, 50, 10, label="50% construction"),
            PaymentMilestone(TriggerType.CONSTRUCTION, 80, 10, label="80% construction"),
        ],
        booking_month=3,
        booking_year=2025,
        handover_quarter=3,
        handover_year=2028,
        oqood_fee=5_000,
        eoi_fee=50_000,
        appreciation_rate=12,
        rental_yield_percent=6.5,
        service_charge_per_sqft=18,
        unit_size_sqft=1_250,
        short_term_rental=ShortTermRentalConfig(average_daily_rate=950, occupancy_percent=72),
        show_airbnb_comparison=True,
        exit_agent_commission_enabled=True,
    )


def run_single_deal():
    """Run the full calculation for the sample deal."""
    print("\n" + "=" * 60)
    print("OFF-PLAN INVESTMENT ENGINE")
    print("Sample Deal")
    print("=" * 60 + "\n")

    params = get_sample_deal()
    mortgage = MortgageParameters(enabled=True, financing_percent=60)
    result = calculate_investment(params, mortgage)

    print("Payment schedule:")
    for event in result.schedule.events:
        print(f"  {event.payment_date:%b %Y}  {event.label:<20} {event.amount:>14,.0f}")
    print(f"  {'Due at booking':<29} {result.schedule.today_total:>14,.0f}")

    print("\n" + format_projection_table(result.projection))
    print("\n" + format_comparison_table(compare_strategies(result.projection)))

    irr = calculate_hold_irr(params, result.projection)
    print(f"\nHold IRR: {'n/a' if irr is None else f'{irr:.2%}'}")

    print("\nExits:")
    for scenario in result.exit_scenarios:
        print(
            f"  Month {scenario.exit_months:>3}: price {scenario.exit_price:>12,.0f} "
            f"ROE {scenario.display_roe:>6.1f}% ({scenario.annualized_roe:.1f}%/yr, "
            f"{scenario.rating.value})"
        )

    analysis = result.mortgage
    print("\nMortgage:")
    print(f"  Loan {analysis.loan_amount:,.0f}, payment {analysis.monthly_payment:,.0f}/month")
    if analysis.has_gap:
        print(f"  Gap at handover: {analysis.gap_amount:,.0f} ({analysis.gap_percent:.0f}%)")
    for s in analysis.stress_scenarios:
        print(f"  {s.rate:.1f}%: coverage {s.coverage_ratio:.2f} ({s.status.value})")


def run_matrix():
    """Run the appreciation x yield scenario matrix."""
    print("\n" + "=" * 60)
    print("SCENARIO MATRIX ANALYSIS")
    print("=" * 60 + "\n")

    params = get_sample_deal()
    results = run_scenario_matrix(params, generate_variations())
    print(format_matrix_results(results, show_top_n=15))

    minimum = find_minimum_appreciation(params, target_irr=0.10)
    if minimum:
        print(f"\nLowest appreciation for a 10% hold IRR: {minimum.variation.appreciation_rate:g}%")
    else:
        print("\nNo tested appreciation rate reaches a 10% hold IRR.")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Off-plan investment engine")
    parser.add_argument(
        "--matrix",
        action="store_true",
        help="Run the scenario matrix",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show engine debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    run_single_deal()

    if args.matrix:
        run_matrix()

    print("\nDone.")


if __name__ == "__main__":
    main()
