"""Tabular views of engine results as pandas DataFrames.

Values are copied unchanged; rounding and currency formatting are left to
whoever renders the frames.
"""

from typing import Sequence

import pandas as pd

from ..calculations.exit_scenarios import ExitScenario
from ..calculations.mortgage import MortgageAnalysis
from ..calculations.payment_schedule import PaymentSchedule
from ..calculations.projection import ProjectionResult


def projection_to_dataframe(result: ProjectionResult) -> pd.DataFrame:
    """Yearly projection, one row per calendar year.

    Short-term columns are included only when the comparison is enabled.
    """
    projections = result.projections

    data = {}

    # === TIMELINE ===
    data["Year"] = [p.year for p in projections]
    data["Calendar Year"] = [p.calendar_year for p in projections]
    data["Elapsed Months"] = [p.elapsed_months for p in projections]
    data["Phase"] = [p.phase.value for p in projections]
    data["Handover"] = [p.is_handover for p in projections]
    data["Months Active"] = [p.months_active for p in projections]

    # === VALUE ===
    data["Property Value"] = [p.property_value for p in projections]
    data["Equity Deployed"] = [p.equity_deployed for p in projections]

    # === LONG-TERM ===
    data["Gross Rent"] = [p.gross_rent for p in projections]
    data["Service Charges"] = [p.service_charges for p in projections]
    data["Net Income"] = [p.net_income for p in projections]
    data["Cumulative Net Income"] = [p.cumulative_net_income for p in projections]
    data["Break-Even"] = [p.is_break_even for p in projections]

    # === SHORT-TERM ===
    if result.airbnb_enabled:
        data["Short-Term Gross"] = [p.airbnb_gross_income for p in projections]
        data["Short-Term Net"] = [p.airbnb_net_income for p in projections]
        data["Short-Term Cumulative"] = [p.airbnb_cumulative_net_income for p in projections]
        data["Short-Term Break-Even"] = [p.is_airbnb_break_even for p in projections]

    return pd.DataFrame(data)


def payment_schedule_to_dataframe(schedule: PaymentSchedule) -> pd.DataFrame:
    """Payment events in month order."""
    return pd.DataFrame({
        "Month": [e.month for e in schedule.events],
        "Date": [e.payment_date for e in schedule.events],
        "Label": [e.label for e in schedule.events],
        "Kind": [e.kind.value for e in schedule.events],
        "Percent": [e.percent for e in schedule.events],
        "Amount": [e.amount for e in schedule.events],
    })


def amortization_to_dataframe(analysis: MortgageAnalysis) -> pd.DataFrame:
    """Yearly amortization schedule."""
    rows = analysis.amortization_schedule
    return pd.DataFrame({
        "Year": [r.year for r in rows],
        "Principal": [r.yearly_principal for r in rows],
        "Interest": [r.yearly_interest for r in rows],
        "Principal Paid (cum)": [r.principal_paid for r in rows],
        "Interest Paid (cum)": [r.interest_paid for r in rows],
        "Balance": [r.balance for r in rows],
    })


def stress_scenarios_to_dataframe(analysis: MortgageAnalysis) -> pd.DataFrame:
    """Rate stress test, one row per stressed rate."""
    rows = analysis.stress_scenarios
    return pd.DataFrame({
        "Rate": [s.rate for s in rows],
        "Monthly Payment": [s.monthly_payment for s in rows],
        "Net Cashflow": [s.net_cashflow for s in rows],
        "Coverage": [s.coverage_ratio for s in rows],
        "Status": [s.status.value for s in rows],
    })


def exit_scenarios_to_dataframe(scenarios: Sequence[ExitScenario]) -> pd.DataFrame:
    """Exit scenarios, one row per exit month."""
    return pd.DataFrame({
        "Exit Month": [s.exit_months for s in scenarios],
        "Exit Price": [s.exit_price for s in scenarios],
        "Equity Deployed": [s.equity_deployed for s in scenarios],
        "Total Capital": [s.total_capital for s in scenarios],
        "Profit": [s.profit for s in scenarios],
        "True Profit": [s.true_profit for s in scenarios],
        "Exit Costs": [s.exit_costs for s in scenarios],
        "Net Profit": [s.net_profit for s in scenarios],
        "ROE": [s.roe for s in scenarios],
        "True ROE": [s.true_roe for s in scenarios],
        "Net ROE": [s.net_roe for s in scenarios],
        "Display ROE": [s.display_roe for s in scenarios],
        "Annualized ROE": [s.annualized_roe for s in scenarios],
        "Threshold Met": [s.is_threshold_met for s in scenarios],
        "Speculative": [s.is_speculative for s in scenarios],
    })
