"""Tests for the yearly projection engine."""

import logging

import pytest

from offplan.models.deal import ShortTermRentalConfig
from offplan.models.engine_config import EngineConfig
from offplan.models.lookups import NEVER_PAYS_OFF
from offplan.calculations.payment_schedule import equity_deployed_at
from offplan.calculations.price_curve import price_at
from offplan.calculations.projection import Phase, project_yearly
from offplan.calculations.rental import (
    calculate_long_term_income,
    calculate_short_term_income,
)


class TestProjectionTimeline:
    """Tests for years, marks and phases."""

    def test_january_handover_years(self, scenario_deal):
        """A January handover ends the horizon on a year boundary."""
        result = project_yearly(scenario_deal)
        years = [p.calendar_year for p in result.projections]

        assert years[0] == 2025
        assert years[-1] == 2036
        assert result.final_projection.elapsed_months == 24 + 120

    def test_mid_year_handover_years(self, rental_deal):
        """A July handover adds a partial final year."""
        result = project_yearly(rental_deal)
        final = result.final_projection

        assert final.calendar_year == 2037
        assert final.elapsed_months == 30 + 120
        assert final.months_active == 6
        assert final.is_partial

    def test_phases(self, scenario_deal):
        """Construction before handover, growth for 5 years, then mature."""
        result = project_yearly(scenario_deal)

        assert result.get_year(2025).phase == Phase.CONSTRUCTION
        assert result.get_year(2026).phase == Phase.CONSTRUCTION
        assert result.get_year(2027).is_handover
        assert result.get_year(2027).phase == Phase.GROWTH
        assert result.get_year(2031).phase == Phase.GROWTH
        assert result.get_year(2032).phase == Phase.MATURE
        assert len(result.get_phase_years(Phase.CONSTRUCTION)) == 2

    def test_value_and_equity_use_shared_functions(self, rental_deal):
        """Each row is valued with price_at and equity_deployed_at at its mark."""
        result = project_yearly(rental_deal)

        for p in result.projections:
            assert p.property_value == price_at(p.elapsed_months, rental_deal)
            assert p.equity_deployed == equity_deployed_at(p.elapsed_months, rental_deal)

    def test_horizon_config(self, scenario_deal):
        """A shorter horizon produces fewer years."""
        result = project_yearly(scenario_deal, EngineConfig(horizon_years=3))
        assert result.final_projection.calendar_year == 2029

    def test_horizon_over_maximum_rejected(self, scenario_deal):
        """Horizons past the configured maximum raise ValueError."""
        with pytest.raises(ValueError):
            project_yearly(scenario_deal, EngineConfig(horizon_years=101))

    def test_get_year_outside_projection(self, scenario_deal):
        """Unknown calendar years raise KeyError."""
        result = project_yearly(scenario_deal)
        with pytest.raises(KeyError):
            result.get_year(2050)


class TestProjectionIncome:
    """Tests for rental income across the projection."""

    def test_no_income_during_construction(self, rental_deal):
        """Rental fields are None before handover."""
        result = project_yearly(rental_deal)

        for p in result.get_phase_years(Phase.CONSTRUCTION):
            assert p.net_income is None
            assert p.gross_rent is None
            assert p.airbnb_net_income is None
            assert p.months_active == 0
            assert p.cumulative_net_income == 0

    def test_handover_year_is_half_of_full_year(self, rental_deal):
        """July handover gives 6 active months and half the income."""
        result = project_yearly(rental_deal)
        handover = result.handover_projection
        full = result.get_year(2028)

        assert handover.months_active == 6
        assert full.months_active == 12
        assert handover.net_income == pytest.approx(full.net_income / 2)
        assert full.net_income == pytest.approx(50_000)

    def test_handover_year_excluded_from_hold_metrics(self, rental_deal):
        """Hold metrics use the first full year, not the handover year."""
        result = project_yearly(rental_deal)
        hold = result.hold_analysis

        assert hold.first_full_year == 2028
        assert hold.first_full_year_net_income == pytest.approx(50_000)
        assert hold.total_capital_invested == pytest.approx(1_040_000)
        assert hold.years_to_pay_off == pytest.approx(1_040_000 / 50_000)
        assert hold.rental_yield_on_investment == pytest.approx(50_000 / 1_040_000 * 100)

    def test_january_handover_year_still_excluded(self, scenario_deal):
        """A 12-month handover year is not used as the first full year."""
        params = scenario_deal.copy(rental_yield_percent=6)
        result = project_yearly(params)

        assert result.handover_projection.months_active == 12
        assert result.hold_analysis.first_full_year == 2028

    def test_cumulative_income(self, rental_deal):
        """Cumulative income sums every income year."""
        result = project_yearly(rental_deal)
        expected = 25_000 + 9 * 50_000 + 25_000

        assert result.total_net_income == pytest.approx(expected)

    def test_rent_growth(self, rental_deal):
        """Gross rent grows per year since handover."""
        result = project_yearly(rental_deal.copy(rent_growth_rate=5))
        assert result.get_year(2029).gross_rent == pytest.approx(60_000 * 1.05 ** 2)

    def test_short_term_income(self, rental_deal):
        """Short-term net income is ADR x 365 x occupancy x margin."""
        result = project_yearly(rental_deal)

        assert result.get_year(2028).airbnb_net_income == pytest.approx(122_640)
        assert result.handover_projection.airbnb_net_income == pytest.approx(61_320)

    def test_short_term_disabled(self, scenario_deal):
        """No short-term figures without the comparison flag."""
        params = scenario_deal.copy(short_term_rental=ShortTermRentalConfig())
        result = project_yearly(params)

        assert not result.airbnb_enabled
        assert all(p.airbnb_net_income is None for p in result.projections)
        assert result.hold_analysis.airbnb_years_to_pay_off is None

    def test_missing_short_term_config_warns(self, scenario_deal, caplog):
        """Requesting the comparison without a config logs a warning."""
        params = scenario_deal.copy(show_airbnb_comparison=True)
        with caplog.at_level(logging.WARNING, logger="offplan.calculations.projection"):
            result = project_yearly(params)

        assert not result.airbnb_enabled
        assert "short-term" in caplog.text.lower()


class TestBreakEven:
    """Tests for break-even flags and pay-off sentinels."""

    def test_break_even_is_one_time(self, rental_deal):
        """Break-even is flagged only in the first year it is reached."""
        params = rental_deal.copy(rental_yield_percent=30, service_charge_per_sqft=0)
        result = project_yearly(params)
        flagged = [p.calendar_year for p in result.projections if p.is_break_even]

        # 150k + 300k + 300k + 300k >= 1.04M in 2030
        assert flagged == [2030]
        assert result.hold_analysis.break_even_year == 2030

    def test_never_pays_off(self, rental_deal):
        """Zero income reports the sentinel."""
        params = rental_deal.copy(rental_yield_percent=0, service_charge_per_sqft=0)
        hold = project_yearly(params).hold_analysis

        assert hold.years_to_pay_off == NEVER_PAYS_OFF
        assert hold.rental_yield_on_investment == 0
        assert hold.break_even_year is None

    def test_negative_income_never_pays_off(self, rental_deal):
        """Service charges above rent report the sentinel."""
        params = rental_deal.copy(rental_yield_percent=0.5)
        hold = project_yearly(params).hold_analysis

        assert hold.first_full_year_net_income < 0
        assert hold.years_to_pay_off == NEVER_PAYS_OFF

    def test_long_payback_not_capped(self, rental_deal):
        """A small positive income reports its real payback, however long."""
        params = rental_deal.copy(rental_yield_percent=0.05, service_charge_per_sqft=0)
        hold = project_yearly(params).hold_analysis

        assert hold.first_full_year_net_income == pytest.approx(500)
        assert hold.years_to_pay_off == pytest.approx(1_040_000 / 500)
        assert hold.years_to_pay_off > NEVER_PAYS_OFF

    def test_idempotent(self, rental_deal):
        """Identical inputs produce identical projections."""
        assert project_yearly(rental_deal) == project_yearly(rental_deal)


class TestRentalModels:
    """Tests for the rental income functions."""

    def test_long_term_pro_rata(self, rental_deal):
        """Income is pro-rated by active months."""
        income = calculate_long_term_income(rental_deal, months_active=3)

        assert income.gross == pytest.approx(15_000)
        assert income.expenses == pytest.approx(2_500)
        assert income.net == pytest.approx(12_500)

    def test_short_term_adr_growth(self):
        """ADR grows per year since handover."""
        income = calculate_short_term_income(
            ShortTermRentalConfig(), years_since_handover=1, adr_growth_rate=10
        )
        assert income.gross == pytest.approx(880 * 365 * 0.7)
        assert income.net == pytest.approx(880 * 365 * 0.7 * 0.6)
