"""Deal data model containing all inputs for an off-plan purchase."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from .lookups import DLD_FEE_PERCENT


class TriggerType(Enum):
    """What releases an installment of the payment plan."""

    TIME = "time"  # Elapsed months since booking
    CONSTRUCTION = "construction"  # Construction completion %
    POST_HANDOVER = "post-handover"  # Months after handover


class InvalidDealError(ValueError):
    """Raised when deal parameters cannot produce a meaningful projection."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid deal parameters: " + "; ".join(self.errors))


@dataclass(frozen=True)
class PaymentMilestone:
    """Single installment in the payment plan."""

    trigger_type: TriggerType
    trigger_value: float  # Month, construction %, or months after handover
    payment_percent: float  # % of base price
    label: str = ""


@dataclass(frozen=True)
class ShortTermRentalConfig:
    """Nightly rental assumptions."""

    average_daily_rate: float = 800.0
    occupancy_percent: float = 70.0
    operating_expense_percent: float = 25.0
    management_fee_percent: float = 15.0

    @property
    def net_margin(self) -> float:
        """Share of gross nightly revenue kept after expenses and management."""
        return 1 - self.operating_expense_percent / 100 - self.management_fee_percent / 100


@dataclass(frozen=True)
class DealParameters:
    """Complete input parameters for an off-plan deal.

    Percentages are expressed as 0-100 (e.g. 20 for 20%). Money values
    are in the deal's base currency.
    """

    # === Price & Payment Plan ===
    base_price: float
    downpayment_percent: float
    pre_handover_percent: float  # Paid by handover (e.g. 30 for a 30/70 plan)

    # === Timeline ===
    booking_month: int
    booking_year: int
    handover_year: int
    handover_month: Optional[int] = None
    handover_quarter: Optional[int] = None  # Used when handover_month is not given

    additional_payments: List[PaymentMilestone] = field(default_factory=list)

    # === Entry Costs ===
    oqood_fee: float = 0.0
    eoi_fee: float = 0.0  # Booking deposit, credited against the down payment

    # === Appreciation (CAGR %) ===
    appreciation_rate: float = 12.0  # Construction phase
    growth_appreciation: float = 8.0
    mature_appreciation: float = 4.0
    growth_period_years: float = 5.0

    # === Long-Term Rental ===
    rental_yield_percent: float = 0.0  # Gross annual, on base price
    service_charge_per_sqft: float = 0.0  # Annual
    unit_size_sqft: float = 0.0
    rent_growth_rate: float = 0.0  # Annual % after handover

    # === Short-Term Rental ===
    short_term_rental: Optional[ShortTermRentalConfig] = None
    show_airbnb_comparison: bool = False
    adr_growth_rate: float = 0.0  # Annual % after handover

    # === Post-Handover Plan ===
    has_post_handover_plan: bool = False
    on_handover_percent: float = 0.0
    post_handover_payments: List[PaymentMilestone] = field(default_factory=list)

    # === Exit ===
    minimum_exit_threshold: float = 30.0  # % paid before resale is allowed
    exit_agent_commission_enabled: bool = False
    exit_noc_fee: float = 0.0

    @property
    def resolved_handover_month(self) -> int:
        """Handover calendar month (1-12); quarters map to their first month."""
        if self.handover_month is not None:
            return self.handover_month
        if self.handover_quarter is not None:
            return (self.handover_quarter - 1) * 3 + 1
        raise InvalidDealError(["handover_month or handover_quarter is required"])

    @property
    def total_months(self) -> int:
        """Months from booking to handover."""
        return (
            (self.handover_year - self.booking_year) * 12
            + (self.resolved_handover_month - self.booking_month)
        )

    @property
    def handover_percent(self) -> float:
        """Balance due at handover."""
        if self.has_post_handover_plan:
            return self.on_handover_percent
        return 100 - self.pre_handover_percent

    @property
    def downpayment_amount(self) -> float:
        return self.base_price * self.downpayment_percent / 100

    @property
    def dld_fee(self) -> float:
        """Land department transfer fee (fixed 4% of price)."""
        return self.base_price * DLD_FEE_PERCENT / 100

    @property
    def total_entry_costs(self) -> float:
        """DLD fee plus Oqood registration."""
        return self.dld_fee + self.oqood_fee

    @property
    def airbnb_enabled(self) -> bool:
        """True when short-term projections should be produced."""
        return self.show_airbnb_comparison and self.short_term_rental is not None

    @property
    def annual_service_charges(self) -> float:
        return self.service_charge_per_sqft * self.unit_size_sqft

    def validate(self) -> list[str]:
        """Validate inputs and return list of errors.

        Returns:
            List of validation error messages. Empty if valid.
        """
        errors = []

        if not self.base_price > 0:
            errors.append(f"base_price must be positive, got {self.base_price}")

        for name in ("downpayment_percent", "pre_handover_percent"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                errors.append(f"{name} must be 0-100, got {value}")
        if self.pre_handover_percent < self.downpayment_percent:
            errors.append(
                f"pre_handover_percent ({self.pre_handover_percent}) is below "
                f"downpayment_percent ({self.downpayment_percent})"
            )

        # Timeline
        if not 1 <= self.booking_month <= 12:
            errors.append(f"booking_month must be 1-12, got {self.booking_month}")
        if self.handover_month is None and self.handover_quarter is None:
            errors.append("handover_month or handover_quarter is required")
        elif self.handover_month is not None and not 1 <= self.handover_month <= 12:
            errors.append(f"handover_month must be 1-12, got {self.handover_month}")
        elif self.handover_month is None and not 1 <= self.handover_quarter <= 4:
            errors.append(f"handover_quarter must be 1-4, got {self.handover_quarter}")
        else:
            if self.total_months < 1:
                errors.append(
                    f"handover must be at least one month after booking, "
                    f"got {self.total_months} months"
                )

        # Installments
        for milestone in self.additional_payments:
            if milestone.trigger_type == TriggerType.CONSTRUCTION:
                if not 0 <= milestone.trigger_value <= 100:
                    errors.append(
                        f"construction trigger must be 0-100%, got {milestone.trigger_value}"
                    )
            elif milestone.trigger_type == TriggerType.TIME:
                if milestone.trigger_value < 0:
                    errors.append(f"time trigger must be >= 0, got {milestone.trigger_value}")
            else:
                errors.append(
                    f"additional payments cannot use {milestone.trigger_type.value} triggers"
                )
        for milestone in self.post_handover_payments:
            if milestone.trigger_value < 0:
                errors.append(
                    f"post-handover trigger must be >= 0, got {milestone.trigger_value}"
                )

        planned = self.downpayment_percent + sum(
            m.payment_percent for m in self.additional_payments if m.payment_percent > 0
        )
        if self.has_post_handover_plan:
            planned += self.on_handover_percent + sum(
                m.payment_percent for m in self.post_handover_payments if m.payment_percent > 0
            )
            if self.on_handover_percent < 0:
                errors.append(f"on_handover_percent must be >= 0, got {self.on_handover_percent}")
        else:
            # Handover balance
            planned += 100 - self.pre_handover_percent
        if planned > 100.5:
            errors.append(f"payment plan installments add up to {planned:.1f}% (over 100%)")

        # Non-negative amounts and rates
        for name in (
            "oqood_fee",
            "eoi_fee",
            "rental_yield_percent",
            "service_charge_per_sqft",
            "unit_size_sqft",
            "growth_period_years",
            "exit_noc_fee",
        ):
            value = getattr(self, name)
            if value < 0:
                errors.append(f"{name} must be >= 0, got {value}")
        for name in ("appreciation_rate", "growth_appreciation", "mature_appreciation"):
            value = getattr(self, name)
            if value <= -100:
                errors.append(f"{name} must be above -100%, got {value}")
        if not 0 <= self.minimum_exit_threshold <= 100:
            errors.append(
                f"minimum_exit_threshold must be 0-100, got {self.minimum_exit_threshold}"
            )

        if self.short_term_rental is not None:
            str_config = self.short_term_rental
            if str_config.average_daily_rate < 0:
                errors.append(
                    f"average_daily_rate must be >= 0, got {str_config.average_daily_rate}"
                )
            if not 0 <= str_config.occupancy_percent <= 100:
                errors.append(
                    f"occupancy_percent must be 0-100, got {str_config.occupancy_percent}"
                )

        return errors

    def require_valid(self) -> "DealParameters":
        """Raise InvalidDealError unless the parameters are valid.

        Returns:
            The same instance, for chaining.
        """
        errors = self.validate()
        if errors:
            raise InvalidDealError(errors)
        return self

    def copy(self, **changes) -> "DealParameters":
        """Create a copy with optional field overrides.

        Returns:
            New DealParameters instance.
        """
        changes.setdefault("additional_payments", list(self.additional_payments))
        changes.setdefault("post_handover_payments", list(self.post_handover_payments))
        return replace(self, **changes)
