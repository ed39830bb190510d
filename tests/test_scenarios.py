"""Tests for the scenario matrix runner."""

import pytest

from offplan.models.mortgage import MortgageParameters
from offplan.scenarios import (
    ScenarioVariation,
    find_minimum_appreciation,
    format_matrix_results,
    generate_variations,
    run_scenario_matrix,
)


class TestGenerateVariations:
    """Tests for variation generation."""

    def test_full_grid(self):
        """Every combination of the grids is produced."""
        variations = list(generate_variations(
            appreciation_rates=(8, 12), rental_yields=(5, 6, 7)
        ))
        assert len(variations) == 6

    def test_names(self):
        """Names encode the overridden assumptions."""
        variations = list(generate_variations(
            appreciation_rates=(8,), rental_yields=(6,), financing_percents=(None, 50)
        ))
        assert [v.name for v in variations] == ["A8-Y6", "A8-Y6-F50"]

    def test_apply_keeps_base_mortgage(self, scenario_deal, mortgage):
        """Without a financing override the base mortgage is used."""
        variation = ScenarioVariation("A8-Y6", appreciation_rate=8, rental_yield_percent=6)
        params, varied_mortgage = variation.apply(scenario_deal, mortgage)

        assert params.appreciation_rate == 8
        assert params.rental_yield_percent == 6
        assert varied_mortgage is mortgage

    def test_apply_financing_override(self, scenario_deal):
        """A financing override enables a mortgage at that LTV."""
        variation = ScenarioVariation(
            "A8-Y6-F50", appreciation_rate=8, rental_yield_percent=6, financing_percent=50
        )
        _, varied_mortgage = variation.apply(scenario_deal, None)

        assert varied_mortgage.enabled
        assert varied_mortgage.financing_percent == 50

    def test_apply_does_not_mutate_base(self, scenario_deal):
        """The base deal is left untouched."""
        variation = ScenarioVariation("A15-Y8", appreciation_rate=15, rental_yield_percent=8)
        variation.apply(scenario_deal, None)

        assert scenario_deal.appreciation_rate == 10


class TestRunScenarioMatrix:
    """Tests for running the matrix."""

    def test_sorted_by_irr(self, rental_deal):
        """Results are sorted by hold IRR, best first."""
        variations = generate_variations(appreciation_rates=(6, 10, 15), rental_yields=(6,))
        results = run_scenario_matrix(rental_deal, variations)

        assert [r.variation.appreciation_rate for r in results] == [15, 10, 6]
        irrs = [r.hold_irr for r in results]
        assert irrs == sorted(irrs, reverse=True)

    def test_financing_variation_has_gap(self, rental_deal):
        """Financed variations carry the mortgage gap."""
        variations = generate_variations(
            appreciation_rates=(10,), rental_yields=(6,), financing_percents=(60,)
        )
        results = run_scenario_matrix(rental_deal, variations)

        assert results[0].gap_amount == pytest.approx(100_000)

    def test_no_financing_has_no_gap(self, rental_deal):
        """Unfinanced variations report no gap."""
        variations = generate_variations(appreciation_rates=(10,), rental_yields=(6,))
        results = run_scenario_matrix(rental_deal, variations, MortgageParameters())

        assert results[0].gap_amount == 0

    def test_format(self, rental_deal):
        """Formatted table lists each variation."""
        variations = generate_variations(appreciation_rates=(8, 12), rental_yields=(6,))
        table = format_matrix_results(run_scenario_matrix(rental_deal, variations))

        assert "SCENARIO MATRIX RESULTS" in table
        assert "A8-Y6" in table
        assert "A12-Y6" in table
        assert "Total variations tested: 2" in table


class TestFindMinimumAppreciation:
    """Tests for the minimum appreciation search."""

    def test_lowest_rate_meeting_target(self, rental_deal):
        """Any IRR meets a negative target, so the lowest rate wins."""
        result = find_minimum_appreciation(rental_deal, target_irr=-0.99)
        assert result.variation.appreciation_rate == 6

    def test_unreachable_target(self, rental_deal):
        """An unreachable target returns None."""
        assert find_minimum_appreciation(rental_deal, target_irr=10.0) is None
