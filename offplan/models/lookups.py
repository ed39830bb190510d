"""Domain constants and default presets for off-plan investment calculations."""

from dataclasses import dataclass
from typing import Dict


# Dubai Land Department transfer fee, as % of purchase price
DLD_FEE_PERCENT = 4.0

# Exponent of the construction-phase price curve.
# < 1 front-loads appreciation and flattens approaching handover.
PRICE_CURVE_EXPONENT = 0.7

# Stress test coverage thresholds (net rent / debt service)
STRESS_POSITIVE_COVERAGE = 1.20
STRESS_TIGHT_COVERAGE = 1.00

# Reported when a strategy never recovers the capital invested
NEVER_PAYS_OFF = 999.0

# Agent commission charged on exit, as % of exit price
EXIT_AGENT_COMMISSION_PERCENT = 2.0

# Tolerance when checking whether installments already add up to 100%
PLAN_COMPLETE_TOLERANCE = 0.5

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class AppreciationPreset:
    """Phased appreciation assumptions for a zone maturity profile."""

    construction: float  # CAGR % during construction
    growth: float  # CAGR % in the first post-handover years
    mature: float  # CAGR % afterwards
    growth_period_years: float


# Presets keyed by zone maturity
APPRECIATION_PRESETS: Dict[str, AppreciationPreset] = {
    "emerging": AppreciationPreset(construction=15, growth=10, mature=5, growth_period_years=7),
    "developing": AppreciationPreset(construction=12, growth=8, mature=4, growth_period_years=5),
    "established": AppreciationPreset(construction=8, growth=6, mature=3, growth_period_years=3),
    "mature": AppreciationPreset(construction=5, growth=4, mature=3, growth_period_years=2),
}


def get_appreciation_preset(zone_maturity: str) -> AppreciationPreset:
    """Get the appreciation preset for a zone maturity level.

    Args:
        zone_maturity: One of "emerging", "developing", "established", "mature".

    Returns:
        AppreciationPreset for that zone.

    Raises:
        KeyError: If the maturity level is unknown.
    """
    return APPRECIATION_PRESETS[zone_maturity]
