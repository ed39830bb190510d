"""Excel workbook export of a complete investment calculation."""

import io
from dataclasses import dataclass
from typing import Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils.dataframe import dataframe_to_rows

from ..calculations.investment import InvestmentResult
from .tables import (
    amortization_to_dataframe,
    exit_scenarios_to_dataframe,
    payment_schedule_to_dataframe,
    projection_to_dataframe,
    stress_scenarios_to_dataframe,
)


@dataclass
class WorkbookConfig:
    """Configuration for workbook generation."""
    include_summary: bool = True
    include_payment_schedule: bool = True
    include_projection: bool = True
    include_exits: bool = True
    include_mortgage: bool = True
    project_name: str = "Off-Plan Investment"
    report_date: Optional[str] = None  # Printed as given; never read from the clock


def _add_header_style(ws, row: int, cols: int) -> None:
    """Apply header styling to a row."""
    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)

    for col in range(1, cols + 1):
        cell = ws.cell(row=row, column=col)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center")


def _write_dataframe(ws, df: pd.DataFrame) -> None:
    """Write a DataFrame with a styled header row."""
    # Missing values (construction-year rent) become empty cells
    df = df.astype(object).where(pd.notna(df), None)
    for row in dataframe_to_rows(df, index=False, header=True):
        ws.append(row)
    _add_header_style(ws, 1, len(df.columns))
    for i, column in enumerate(df.columns, 1):
        ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = max(12, len(column) + 2)


def _create_summary_sheet(ws, result: InvestmentResult, config: WorkbookConfig) -> None:
    """Create the summary sheet."""
    params = result.params
    hold = result.projection.hold_analysis

    ws.cell(row=1, column=1, value=config.project_name)
    ws.cell(row=1, column=1).font = Font(bold=True, size=16)
    row = 2
    if config.report_date:
        ws.cell(row=row, column=1, value=f"Date: {config.report_date}")
        row += 1
    row += 1

    metrics = [
        ("Base Price", params.base_price),
        ("Construction Months", result.projection.total_months),
        ("Handover Price", result.projection.handover_price),
        ("DLD Fee", result.entry_costs.dld_fee),
        ("Oqood Fee", result.entry_costs.oqood_fee),
        ("Capital Invested", hold.total_capital_invested),
        ("First Full Year Net Income", hold.first_full_year_net_income),
        ("Yield on Investment (%)", hold.rental_yield_on_investment),
        ("Years to Pay Off", hold.years_to_pay_off),
    ]
    if result.mortgage is not None:
        metrics.extend([
            ("Loan Amount", result.mortgage.loan_amount),
            ("Monthly Payment", result.mortgage.monthly_payment),
            ("Gap at Handover", result.mortgage.gap_amount),
        ])

    for label, value in metrics:
        ws.cell(row=row, column=1, value=label)
        ws.cell(row=row, column=2, value=value)
        row += 1

    ws.column_dimensions['A'].width = 30
    ws.column_dimensions['B'].width = 18


def generate_workbook(
    result: InvestmentResult,
    config: Optional[WorkbookConfig] = None,
) -> bytes:
    """Generate an Excel workbook for an investment.

    Args:
        result: The InvestmentResult from calculate_investment()
        config: Optional configuration for the workbook

    Returns:
        Excel file as bytes
    """
    if config is None:
        config = WorkbookConfig()

    wb = Workbook()

    # Remove default sheet
    wb.remove(wb.active)

    if config.include_summary:
        _create_summary_sheet(wb.create_sheet("Summary"), result, config)

    if config.include_payment_schedule:
        _write_dataframe(
            wb.create_sheet("Payment Schedule"), payment_schedule_to_dataframe(result.schedule)
        )

    if config.include_projection:
        _write_dataframe(
            wb.create_sheet("Projection"), projection_to_dataframe(result.projection)
        )

    if config.include_exits and result.exit_scenarios:
        _write_dataframe(
            wb.create_sheet("Exits"), exit_scenarios_to_dataframe(result.exit_scenarios)
        )

    if config.include_mortgage and result.mortgage is not None:
        _write_dataframe(
            wb.create_sheet("Amortization"), amortization_to_dataframe(result.mortgage)
        )
        _write_dataframe(
            wb.create_sheet("Stress Test"), stress_scenarios_to_dataframe(result.mortgage)
        )

    # Save to bytes
    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()
