"""Data models for the off-plan investment engine."""

from .lookups import (
    DLD_FEE_PERCENT,
    PRICE_CURVE_EXPONENT,
    STRESS_POSITIVE_COVERAGE,
    STRESS_TIGHT_COVERAGE,
    NEVER_PAYS_OFF,
    EXIT_AGENT_COMMISSION_PERCENT,
    AppreciationPreset,
    APPRECIATION_PRESETS,
    get_appreciation_preset,
)
from .deal import (
    TriggerType,
    InvalidDealError,
    PaymentMilestone,
    ShortTermRentalConfig,
    DealParameters,
)
from .mortgage import (
    InvalidMortgageError,
    MortgageParameters,
    DEFAULT_MORTGAGE_PARAMETERS,
)
from .engine_config import EngineConfig, DEFAULT_ENGINE_CONFIG
from .migration import (
    CURRENT_SCHEMA_VERSION,
    migrate_inputs,
    mortgage_from_dict,
    stamp_schema_version,
)

__all__ = [
    "DLD_FEE_PERCENT",
    "PRICE_CURVE_EXPONENT",
    "STRESS_POSITIVE_COVERAGE",
    "STRESS_TIGHT_COVERAGE",
    "NEVER_PAYS_OFF",
    "EXIT_AGENT_COMMISSION_PERCENT",
    "AppreciationPreset",
    "APPRECIATION_PRESETS",
    "get_appreciation_preset",
    "TriggerType",
    "InvalidDealError",
    "PaymentMilestone",
    "ShortTermRentalConfig",
    "DealParameters",
    "InvalidMortgageError",
    "MortgageParameters",
    "DEFAULT_MORTGAGE_PARAMETERS",
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    "CURRENT_SCHEMA_VERSION",
    "migrate_inputs",
    "mortgage_from_dict",
    "stamp_schema_version",
]
