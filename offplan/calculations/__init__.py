"""Calculation modules for the off-plan investment engine."""

from .timeline import (
    booking_date,
    handover_date,
    month_to_date,
    months_between,
    months_to_year_end,
    calendar_year_of,
)
from .payment_schedule import (
    PaymentKind,
    PaymentEvent,
    EntryCosts,
    PaymentSchedule,
    construction_percent_at,
    equity_deployed_at,
    equity_percent_at,
    calculate_entry_costs,
    build_payment_schedule,
    threshold_equity,
    month_when_threshold_met,
)
from .price_curve import handover_price, price_at, price_curve, sample_months
from .rental import (
    RentalIncome,
    calculate_long_term_income,
    calculate_short_term_income,
)
from .projection import (
    Phase,
    YearlyProjection,
    HoldAnalysis,
    ProjectionResult,
    project_yearly,
)
from .mortgage import (
    CoverageStatus,
    AmortizationYear,
    StressScenario,
    MortgageAnalysis,
    calculate_monthly_payment,
    build_amortization_schedule,
    run_stress_test,
    analyze_mortgage,
    max_loan_for_coverage,
)
from .exit_scenarios import (
    ReturnRating,
    ExitScenario,
    evaluate_exit,
    evaluate_exits,
    auto_exit_months,
    exit_percent_scenarios,
    best_exit,
)

# Unified entry point
from .investment import InvestmentResult, calculate_investment
from .metrics import (
    RentalStrategy,
    StrategyComparison,
    compare_strategies,
    calculate_hold_irr,
    format_projection_table,
    format_comparison_table,
)

__all__ = [
    "booking_date",
    "handover_date",
    "month_to_date",
    "months_between",
    "months_to_year_end",
    "calendar_year_of",
    "PaymentKind",
    "PaymentEvent",
    "EntryCosts",
    "PaymentSchedule",
    "construction_percent_at",
    "equity_deployed_at",
    "equity_percent_at",
    "calculate_entry_costs",
    "build_payment_schedule",
    "threshold_equity",
    "month_when_threshold_met",
    "handover_price",
    "price_at",
    "price_curve",
    "sample_months",
    "RentalIncome",
    "calculate_long_term_income",
    "calculate_short_term_income",
    "Phase",
    "YearlyProjection",
    "HoldAnalysis",
    "ProjectionResult",
    "project_yearly",
    "CoverageStatus",
    "AmortizationYear",
    "StressScenario",
    "MortgageAnalysis",
    "calculate_monthly_payment",
    "build_amortization_schedule",
    "run_stress_test",
    "analyze_mortgage",
    "max_loan_for_coverage",
    "ReturnRating",
    "ExitScenario",
    "evaluate_exit",
    "evaluate_exits",
    "auto_exit_months",
    "exit_percent_scenarios",
    "best_exit",
    "InvestmentResult",
    "calculate_investment",
    "RentalStrategy",
    "StrategyComparison",
    "compare_strategies",
    "calculate_hold_irr",
    "format_projection_table",
    "format_comparison_table",
]
