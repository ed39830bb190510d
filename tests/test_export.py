"""Tests for DataFrame and workbook export."""

import io

import pytest
from openpyxl import load_workbook

from offplan.calculations.investment import calculate_investment
from offplan.calculations.projection import project_yearly
from offplan.export.tables import (
    amortization_to_dataframe,
    exit_scenarios_to_dataframe,
    payment_schedule_to_dataframe,
    projection_to_dataframe,
    stress_scenarios_to_dataframe,
)
from offplan.export.workbook import WorkbookConfig, generate_workbook


class TestDataFrames:
    """Tests for DataFrame conversion."""

    def test_projection_rows(self, rental_deal):
        """One row per projection year, values unchanged."""
        result = project_yearly(rental_deal)
        df = projection_to_dataframe(result)

        assert len(df) == len(result.projections)
        assert list(df["Calendar Year"]) == [p.calendar_year for p in result.projections]
        assert df["Property Value"].iloc[-1] == result.final_projection.property_value

    def test_short_term_columns_only_when_enabled(self, scenario_deal, rental_deal):
        """Short-term columns follow the comparison flag."""
        assert "Short-Term Net" in projection_to_dataframe(project_yearly(rental_deal)).columns
        assert "Short-Term Net" not in projection_to_dataframe(project_yearly(scenario_deal)).columns

    def test_payment_schedule(self, scenario_deal):
        """Schedule frame sums to the grand total."""
        result = calculate_investment(scenario_deal)
        df = payment_schedule_to_dataframe(result.schedule)

        assert df["Amount"].sum() == pytest.approx(result.schedule.grand_total)
        assert list(df["Month"]) == sorted(df["Month"])

    def test_mortgage_frames(self, rental_deal, mortgage):
        """Amortization and stress frames mirror the analysis."""
        analysis = calculate_investment(rental_deal, mortgage).mortgage

        amortization = amortization_to_dataframe(analysis)
        stress = stress_scenarios_to_dataframe(analysis)
        assert len(amortization) == 25
        assert list(stress["Rate"]) == [4.5, 5.5, 6.5, 7.5]
        assert set(stress["Status"]) <= {"positive", "tight", "negative"}

    def test_exit_frame(self, scenario_deal):
        """Exit frame has one row per exit."""
        result = calculate_investment(scenario_deal, exit_months=[6, 12, 24])
        df = exit_scenarios_to_dataframe(result.exit_scenarios)

        assert list(df["Exit Month"]) == [6, 12, 24]
        assert df["Display ROE"].iloc[-1] == result.exit_scenarios[-1].display_roe


class TestWorkbook:
    """Tests for Excel workbook generation."""

    def test_sheets_with_mortgage(self, rental_deal, mortgage):
        """All sheets are written when a mortgage is analysed."""
        result = calculate_investment(rental_deal, mortgage)
        wb = load_workbook(io.BytesIO(generate_workbook(result)))

        assert wb.sheetnames == [
            "Summary", "Payment Schedule", "Projection", "Exits", "Amortization", "Stress Test",
        ]

    def test_sheets_without_mortgage(self, scenario_deal):
        """Mortgage sheets are skipped without a mortgage."""
        wb = load_workbook(io.BytesIO(generate_workbook(calculate_investment(scenario_deal))))

        assert "Amortization" not in wb.sheetnames
        assert wb["Summary"]["A1"].value == "Off-Plan Investment"

    def test_projection_sheet_header(self, scenario_deal):
        """Projection sheet starts with the DataFrame header."""
        result = calculate_investment(scenario_deal)
        config = WorkbookConfig(project_name="Marina Tower", include_exits=False)
        wb = load_workbook(io.BytesIO(generate_workbook(result, config)))

        assert wb["Summary"]["A1"].value == "Marina Tower"
        assert wb["Projection"]["A1"].value == "Year"
        assert "Exits" not in wb.sheetnames
