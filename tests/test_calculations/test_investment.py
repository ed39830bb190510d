"""Tests for the unified entry point and strategy metrics."""

import pytest

from offplan.models.deal import InvalidDealError
from offplan.models.mortgage import MortgageParameters
from offplan.calculations.investment import calculate_investment
from offplan.calculations.metrics import (
    RentalStrategy,
    calculate_hold_irr,
    compare_strategies,
    format_comparison_table,
    format_projection_table,
    hold_cash_flows,
)
from offplan.calculations.projection import project_yearly


class TestCalculateInvestment:
    """Tests for calculate_investment."""

    def test_runs_every_component(self, rental_deal, mortgage):
        """Schedule, projection, mortgage and exits come from one call."""
        result = calculate_investment(rental_deal, mortgage)

        assert result.schedule.property_total == pytest.approx(1_000_000)
        assert result.projection.total_months == 30
        assert result.has_mortgage
        assert [s.exit_months for s in result.exit_scenarios] == [15, 20, 24]

    def test_entry_costs(self, rental_deal):
        """Entry costs are exposed from the schedule."""
        result = calculate_investment(rental_deal.copy(oqood_fee=5_000))
        assert result.entry_costs.total == pytest.approx(45_000)

    def test_mortgage_disabled(self, rental_deal):
        """A disabled mortgage is not analysed."""
        result = calculate_investment(rental_deal, MortgageParameters(enabled=False))

        assert result.mortgage is None
        assert not result.has_mortgage

    def test_stress_rent_from_first_full_year(self, rental_deal, mortgage):
        """Stress test uses the first full year's rent, monthly."""
        result = calculate_investment(rental_deal, mortgage)

        # 60,000 rent - 10,000 service charges per year
        for s in result.mortgage.stress_scenarios:
            assert s.net_cashflow == pytest.approx(50_000 / 12 - s.monthly_payment)

    def test_gap_uses_pre_handover_percent(self, rental_deal, mortgage):
        """Gap is measured against the deal's pre-handover percent."""
        result = calculate_investment(rental_deal, mortgage)
        assert result.mortgage.gap_amount == pytest.approx(100_000)

    def test_explicit_exit_months(self, scenario_deal):
        """Given exit months replace the automatic ones."""
        result = calculate_investment(scenario_deal, exit_months=[12, 24])
        assert [s.exit_months for s in result.exit_scenarios] == [12, 24]

    def test_invalid_deal_rejected(self, scenario_deal):
        """Invalid deals raise InvalidDealError listing every problem."""
        params = scenario_deal.copy(base_price=-1, downpayment_percent=150)

        with pytest.raises(InvalidDealError) as exc_info:
            calculate_investment(params)
        assert len(exc_info.value.errors) >= 2


class TestCompareStrategies:
    """Tests for long-term vs short-term comparison."""

    def test_short_term_wins(self, rental_deal):
        """Short-term earns more on the rental deal."""
        comparison = compare_strategies(project_yearly(rental_deal))

        assert comparison.better_strategy == RentalStrategy.SHORT_TERM
        assert comparison.long_term_first_full_year_income == pytest.approx(50_000)
        assert comparison.short_term_first_full_year_income == pytest.approx(122_640)
        assert comparison.income_difference == pytest.approx(
            comparison.short_term_total_income - comparison.long_term_total_income
        )

    def test_long_term_wins(self, rental_deal):
        """A high yield favours long-term letting."""
        params = rental_deal.copy(rental_yield_percent=20)
        comparison = compare_strategies(project_yearly(params))

        assert comparison.better_strategy == RentalStrategy.LONG_TERM
        assert comparison.income_difference < 0

    def test_requires_short_term_figures(self, scenario_deal):
        """Comparison needs the short-term projection."""
        with pytest.raises(ValueError):
            compare_strategies(project_yearly(scenario_deal))


class TestHoldIRR:
    """Tests for the hold-to-horizon IRR."""

    def test_cash_flows_one_per_year(self, rental_deal):
        """One cash flow per projection year, starting negative."""
        result = project_yearly(rental_deal)
        flows = hold_cash_flows(rental_deal, result)

        assert len(flows) == len(result.projections)
        # Down payment and DLD in the booking year
        assert flows[0] == pytest.approx(-240_000)
        assert flows[-1] > 0

    def test_cash_flows_balance(self, rental_deal):
        """Flows sum to income plus sale value minus everything paid."""
        result = project_yearly(rental_deal)
        flows = hold_cash_flows(rental_deal, result)

        expected = (
            result.total_net_income
            + result.final_projection.property_value
            - 1_040_000
        )
        assert flows.sum() == pytest.approx(expected)

    def test_positive_irr(self, rental_deal):
        """An appreciating, income-producing deal has a positive IRR."""
        irr = calculate_hold_irr(rental_deal, project_yearly(rental_deal))

        assert irr is not None
        assert 0 < irr < 1

    def test_higher_appreciation_higher_irr(self, rental_deal):
        """IRR increases with construction appreciation."""
        low = calculate_hold_irr(rental_deal, project_yearly(rental_deal))
        params = rental_deal.copy(appreciation_rate=15)
        high = calculate_hold_irr(params, project_yearly(params))

        assert high > low


class TestFormatting:
    """Tests for text tables."""

    def test_projection_table(self, rental_deal):
        """Projection table lists every calendar year."""
        table = format_projection_table(project_yearly(rental_deal))

        assert "YEARLY PROJECTION" in table
        for year in range(2025, 2038):
            assert str(year) in table
        assert "Short-Term" in table

    def test_comparison_table(self, rental_deal):
        """Comparison table names the better strategy."""
        table = format_comparison_table(compare_strategies(project_yearly(rental_deal)))

        assert "STRATEGY COMPARISON" in table
        assert "short_term" in table

    def test_comparison_table_never_pays_off(self, rental_deal):
        """Sentinel pay-off years are printed as never."""
        params = rental_deal.copy(rental_yield_percent=0, service_charge_per_sqft=0)
        table = format_comparison_table(compare_strategies(project_yearly(params)))

        assert "never" in table
