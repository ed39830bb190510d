"""Build engine inputs from stored (camelCase) quote records.

Saved quotes come from older schema versions and may be missing any
optional field. Required fields are never guessed.
"""

import logging
from typing import Any, Dict, List, Optional, Type

from .deal import (
    DealParameters,
    InvalidDealError,
    PaymentMilestone,
    ShortTermRentalConfig,
    TriggerType,
)
from .mortgage import InvalidMortgageError, MortgageParameters

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 3

REQUIRED_FIELDS = (
    "basePrice",
    "downpaymentPercent",
    "preHandoverPercent",
    "bookingMonth",
    "bookingYear",
    "handoverYear",
)

# Stored name -> (DealParameters field, type), for scalar optional fields
_OPTIONAL_FIELDS = {
    "handoverMonth": ("handover_month", int),
    "handoverQuarter": ("handover_quarter", int),
    "oqoodFee": ("oqood_fee", float),
    "eoiFee": ("eoi_fee", float),
    "appreciationRate": ("appreciation_rate", float),
    "growthAppreciation": ("growth_appreciation", float),
    "matureAppreciation": ("mature_appreciation", float),
    "growthPeriodYears": ("growth_period_years", float),
    "rentalYieldPercent": ("rental_yield_percent", float),
    "serviceChargePerSqft": ("service_charge_per_sqft", float),
    "unitSizeSqf": ("unit_size_sqft", float),
    "rentGrowthRate": ("rent_growth_rate", float),
    "adrGrowthRate": ("adr_growth_rate", float),
    "showAirbnbComparison": ("show_airbnb_comparison", bool),
    "hasPostHandoverPlan": ("has_post_handover_plan", bool),
    "onHandoverPercent": ("on_handover_percent", float),
    "minimumExitThreshold": ("minimum_exit_threshold", float),
    "exitAgentCommissionEnabled": ("exit_agent_commission_enabled", bool),
    "exitNocFee": ("exit_noc_fee", float),
}

_SHORT_TERM_FIELDS = {
    "averageDailyRate": "average_daily_rate",
    "occupancyPercent": "occupancy_percent",
    "operatingExpensePercent": "operating_expense_percent",
    "managementFeePercent": "management_fee_percent",
}

_MORTGAGE_FIELDS = {
    "enabled": ("enabled", bool),
    "financingPercent": ("financing_percent", float),
    "loanTermYears": ("loan_term_years", int),
    "interestRate": ("interest_rate", float),
    "processingFeePercent": ("processing_fee_percent", float),
    "valuationFee": ("valuation_fee", float),
    "mortgageRegistrationPercent": ("mortgage_registration_percent", float),
    "lifeInsurancePercent": ("life_insurance_percent", float),
    "propertyInsurance": ("property_insurance", float),
}

_TRIGGER_ALIASES = {
    "time": TriggerType.TIME,
    "construction": TriggerType.CONSTRUCTION,
    "constructionPercent": TriggerType.CONSTRUCTION,
    "post-handover": TriggerType.POST_HANDOVER,
}


def _coerce(
    value: Any,
    kind: type,
    name: str,
    error: Type[ValueError] = InvalidDealError,
) -> Any:
    """Convert a stored scalar to its field type.

    Booleans may be stored as true/false strings or 0/1. Values that
    cannot be converted raise ``error`` naming the stored field.
    """
    if kind is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        if isinstance(value, (int, float)) and value in (0, 1):
            return bool(value)
        raise error([f"field '{name}' must be a boolean, got {value!r}"])
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise error([f"field '{name}' must be {kind.__name__}, got {value!r}"]) from None


def _parse_milestones(
    raw: Any,
    default_type: TriggerType,
    prefix: str,
) -> List[PaymentMilestone]:
    """Parse a stored milestone list, dropping anything that is not a list."""
    if not isinstance(raw, list):
        return []

    milestones = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise InvalidDealError([f"{prefix} {index} must be a record, got {item!r}"])

        type_name = item.get("type") or item.get("triggerType")
        if type_name is None:
            trigger_type = default_type
        elif type_name in _TRIGGER_ALIASES:
            trigger_type = _TRIGGER_ALIASES[type_name]
        else:
            raise InvalidDealError([f"unknown payment trigger type '{type_name}'"])
        if default_type == TriggerType.POST_HANDOVER:
            trigger_type = TriggerType.POST_HANDOVER

        trigger_value = item.get("triggerValue")
        payment_percent = item.get("paymentPercent")
        milestones.append(PaymentMilestone(
            trigger_type=trigger_type,
            trigger_value=(
                _coerce(trigger_value, float, "triggerValue") if trigger_value is not None else 0.0
            ),
            payment_percent=(
                _coerce(payment_percent, float, "paymentPercent")
                if payment_percent is not None else 0.0
            ),
            label=item.get("label") or f"{prefix}-{index}",
        ))
    return milestones


def migrate_inputs(saved: Optional[Dict[str, Any]]) -> DealParameters:
    """Convert a stored quote into DealParameters.

    Missing optional fields take the DealParameters defaults, and stored
    short-term settings are merged over the short-term defaults. Legacy
    fields are mapped forward:
    - ``constructionAppreciation`` is the old name of ``appreciationRate``
    - ``rentalMode == "short-term"`` turns on the short-term comparison

    Args:
        saved: Decoded quote record, or None.

    Returns:
        DealParameters built from the record.

    Raises:
        InvalidDealError: If the record is empty, a required field is
            missing, or a stored value has the wrong type.
    """
    if not saved:
        raise InvalidDealError(["no stored inputs"])

    missing = [name for name in REQUIRED_FIELDS if saved.get(name) is None]
    if saved.get("handoverMonth") is None and saved.get("handoverQuarter") is None:
        missing.append("handoverMonth/handoverQuarter")
    if missing:
        raise InvalidDealError([f"missing required field '{name}'" for name in missing])

    version = saved.get("schemaVersion") or 1

    kwargs: Dict[str, Any] = {
        "base_price": _coerce(saved["basePrice"], float, "basePrice"),
        "downpayment_percent": _coerce(saved["downpaymentPercent"], float, "downpaymentPercent"),
        "pre_handover_percent": _coerce(saved["preHandoverPercent"], float, "preHandoverPercent"),
        "booking_month": _coerce(saved["bookingMonth"], int, "bookingMonth"),
        "booking_year": _coerce(saved["bookingYear"], int, "bookingYear"),
        "handover_year": _coerce(saved["handoverYear"], int, "handoverYear"),
    }
    for stored_name, (field_name, kind) in _OPTIONAL_FIELDS.items():
        if saved.get(stored_name) is not None:
            kwargs[field_name] = _coerce(saved[stored_name], kind, stored_name)

    if "appreciation_rate" not in kwargs and saved.get("constructionAppreciation") is not None:
        kwargs["appreciation_rate"] = _coerce(
            saved["constructionAppreciation"], float, "constructionAppreciation"
        )

    stored_str = saved.get("shortTermRental")
    if not isinstance(stored_str, dict):
        stored_str = {}
    kwargs["short_term_rental"] = ShortTermRentalConfig(**{
        field_name: _coerce(stored_str[stored_name], float, stored_name)
        for stored_name, field_name in _SHORT_TERM_FIELDS.items()
        if stored_str.get(stored_name) is not None
    })

    if version < 2 and saved.get("rentalMode") == "short-term":
        kwargs["show_airbnb_comparison"] = True

    kwargs["additional_payments"] = _parse_milestones(
        saved.get("additionalPayments"), TriggerType.TIME, "payment"
    )
    kwargs["post_handover_payments"] = _parse_milestones(
        saved.get("postHandoverPayments"), TriggerType.POST_HANDOVER, "post-payment"
    )

    if version < CURRENT_SCHEMA_VERSION:
        logger.info("Migrated stored inputs from schema v%s to v%s", version, CURRENT_SCHEMA_VERSION)

    return DealParameters(**kwargs)


def mortgage_from_dict(saved: Optional[Dict[str, Any]]) -> MortgageParameters:
    """Convert a stored mortgage record, defaulting every missing field."""
    if not saved:
        return MortgageParameters()
    return MortgageParameters(**{
        field_name: _coerce(saved[stored_name], kind, stored_name, InvalidMortgageError)
        for stored_name, (field_name, kind) in _MORTGAGE_FIELDS.items()
        if saved.get(stored_name) is not None
    })


def stamp_schema_version(record: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a stored record tagged with the current schema version."""
    return {**record, "schemaVersion": CURRENT_SCHEMA_VERSION}
