"""Payment schedule resolver: payment plan to equity timeline.

This module is the single place that decides which installments have been
paid by a given elapsed month. Exit cards, yearly projections and the
payment timeline all read equity from here.

Construction-percentage milestones are triggered on a LINEAR construction
progress (elapsed / total months), independent of the price curve.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List

from ..models.deal import DealParameters, PaymentMilestone, TriggerType
from ..models.lookups import PLAN_COMPLETE_TOLERANCE
from .timeline import month_to_date


class PaymentKind(str, Enum):
    """Kind of cash outflow in the payment schedule."""
    BOOKING = "booking"
    DOWNPAYMENT = "downpayment"
    INSTALLMENT = "installment"
    HANDOVER = "handover"
    POST_HANDOVER = "post_handover"
    ENTRY_COST = "entry_cost"


@dataclass
class PaymentEvent:
    """Single cash outflow anchored to a calendar month."""
    month: int  # Elapsed months since booking
    payment_date: date
    label: str
    kind: PaymentKind
    percent: float  # % of base price (0 for flat entry costs)
    amount: float

    @property
    def is_property_payment(self) -> bool:
        """True for payments towards the price (entry costs excluded)."""
        return self.kind != PaymentKind.ENTRY_COST


@dataclass
class EntryCosts:
    """Transaction costs paid at booking on top of the price."""
    dld_fee: float
    oqood_fee: float

    @property
    def total(self) -> float:
        return self.dld_fee + self.oqood_fee


@dataclass
class PaymentSchedule:
    """Complete payment timeline for a deal."""
    events: List[PaymentEvent]
    total_months: int
    base_price: float
    entry_costs: EntryCosts

    # Summary totals
    property_total: float = field(init=False)
    today_total: float = field(init=False)  # Everything due at booking
    pre_handover_total: float = field(init=False)
    handover_total: float = field(init=False)
    post_handover_total: float = field(init=False)

    def __post_init__(self):
        property_events = [e for e in self.events if e.is_property_payment]
        self.property_total = sum(e.amount for e in property_events)
        self.today_total = sum(e.amount for e in self.events if e.month == 0)
        self.pre_handover_total = sum(
            e.amount for e in property_events
            if e.kind in (PaymentKind.BOOKING, PaymentKind.DOWNPAYMENT, PaymentKind.INSTALLMENT)
        )
        self.handover_total = sum(
            e.amount for e in property_events if e.kind == PaymentKind.HANDOVER
        )
        self.post_handover_total = sum(
            e.amount for e in property_events if e.kind == PaymentKind.POST_HANDOVER
        )

    @property
    def grand_total(self) -> float:
        """Price payments plus entry costs."""
        return self.property_total + self.entry_costs.total

    def paid_by(self, month: int) -> float:
        """Price payments made up to and including a month."""
        return sum(e.amount for e in self.events if e.is_property_payment and e.month <= month)

    def get_events_by_kind(self, kind: PaymentKind) -> List[PaymentEvent]:
        """Get all events of a given kind."""
        return [e for e in self.events if e.kind == kind]


def construction_percent_at(elapsed_months: float, total_months: int) -> float:
    """Linear construction completion (%) used for milestone triggering."""
    return elapsed_months / total_months * 100


def _is_triggered(milestone: PaymentMilestone, elapsed_months: float, total_months: int) -> bool:
    """Check whether a pre-handover milestone has been reached."""
    if milestone.trigger_type == TriggerType.TIME:
        return milestone.trigger_value <= elapsed_months
    if milestone.trigger_type == TriggerType.CONSTRUCTION:
        return milestone.trigger_value <= construction_percent_at(elapsed_months, total_months)
    return False


def _installments_complete(params: DealParameters) -> bool:
    """True when down payment and installments already cover the whole price."""
    allocated = params.downpayment_percent + sum(
        m.payment_percent for m in params.additional_payments if m.payment_percent > 0
    )
    return abs(allocated - 100) < PLAN_COMPLETE_TOLERANCE


def _equity_percent_at(elapsed_months: float, params: DealParameters) -> float:
    """Percentage of price paid by an elapsed month, without validation."""
    if elapsed_months < 0:
        return 0.0

    total_months = params.total_months
    percent = params.downpayment_percent

    for milestone in params.additional_payments:
        if milestone.payment_percent <= 0:
            continue
        if _is_triggered(milestone, elapsed_months, total_months):
            percent += milestone.payment_percent

    if elapsed_months >= total_months:
        if params.has_post_handover_plan:
            if not _installments_complete(params):
                percent += params.on_handover_percent
            months_after_handover = elapsed_months - total_months
            for milestone in params.post_handover_payments:
                if milestone.payment_percent <= 0:
                    continue
                if milestone.trigger_value <= months_after_handover:
                    percent += milestone.payment_percent
        else:
            percent += 100 - params.pre_handover_percent

    return percent


def _equity_deployed_at(elapsed_months: float, params: DealParameters) -> float:
    if elapsed_months < 0:
        return 0.0
    return params.base_price * _equity_percent_at(elapsed_months, params) / 100


def equity_deployed_at(elapsed_months: float, params: DealParameters) -> float:
    """Cash paid towards the price by an elapsed month.

    Sum of:
    1. Down payment (from month 0)
    2. Each milestone whose time or linear construction trigger is reached
    3. Handover balance once elapsed_months >= total_months (or the
       on-handover and post-handover installments for post-handover plans)

    Args:
        elapsed_months: Months since booking. Negative returns 0.
        params: Deal parameters.

    Returns:
        Equity deployed in base currency.

    Raises:
        InvalidDealError: If params are invalid.

    Example:
        >>> equity_deployed_at(0, params)  # 20% down on 1,000,000
        200000.0
    """
    params.require_valid()
    return _equity_deployed_at(elapsed_months, params)


def equity_percent_at(elapsed_months: float, params: DealParameters) -> float:
    """Percentage of the price paid by an elapsed month."""
    params.require_valid()
    return _equity_percent_at(elapsed_months, params)


def calculate_entry_costs(params: DealParameters) -> EntryCosts:
    """Calculate booking-time transaction costs.

    Args:
        params: Deal parameters.

    Returns:
        EntryCosts with the DLD fee (4% of price) and Oqood fee.
    """
    return EntryCosts(dld_fee=params.dld_fee, oqood_fee=params.oqood_fee)


def _construction_trigger_month(milestone: PaymentMilestone, total_months: int) -> int:
    """Smallest whole month at which a construction milestone is triggered."""
    for month in range(total_months + 1):
        if _is_triggered(milestone, month, total_months):
            return month
    return total_months


def build_payment_schedule(params: DealParameters) -> PaymentSchedule:
    """Convert the payment plan into concrete monthly cash-outflow events.

    Event months are the first whole month at which equity_deployed_at
    counts the payment, so the schedule and the resolver always agree.

    Args:
        params: Deal parameters.

    Returns:
        PaymentSchedule with events sorted by month.
    """
    params.require_valid()

    total_months = params.total_months
    base_price = params.base_price
    entry_costs = calculate_entry_costs(params)
    events: List[PaymentEvent] = []

    def add(month: int, label: str, kind: PaymentKind, percent: float, amount: float) -> None:
        events.append(PaymentEvent(
            month=month,
            payment_date=month_to_date(params, month),
            label=label,
            kind=kind,
            percent=percent,
            amount=amount,
        ))

    # Booking: EOI is part of the down payment
    downpayment = params.downpayment_amount
    eoi = min(params.eoi_fee, downpayment)
    if eoi > 0:
        add(0, "EOI / Booking fee", PaymentKind.BOOKING, eoi / base_price * 100, eoi)
    remaining_downpayment = downpayment - eoi
    if remaining_downpayment > 0:
        add(
            0, "Down payment", PaymentKind.DOWNPAYMENT,
            params.downpayment_percent - eoi / base_price * 100, remaining_downpayment,
        )
    if entry_costs.dld_fee > 0:
        add(0, "DLD fee", PaymentKind.ENTRY_COST, 0.0, entry_costs.dld_fee)
    if entry_costs.oqood_fee > 0:
        add(0, "Oqood fee", PaymentKind.ENTRY_COST, 0.0, entry_costs.oqood_fee)

    # Pre-handover installments
    for index, milestone in enumerate(params.additional_payments, start=1):
        if milestone.payment_percent <= 0:
            continue
        if milestone.trigger_type == TriggerType.TIME:
            month = max(0, math.ceil(milestone.trigger_value))
        else:
            month = _construction_trigger_month(milestone, total_months)
        add(
            month,
            milestone.label or f"Installment {index}",
            PaymentKind.INSTALLMENT,
            milestone.payment_percent,
            base_price * milestone.payment_percent / 100,
        )

    # Handover and post-handover
    if params.has_post_handover_plan:
        if not _installments_complete(params) and params.on_handover_percent > 0:
            add(
                total_months, "On handover", PaymentKind.HANDOVER,
                params.on_handover_percent, base_price * params.on_handover_percent / 100,
            )
        for index, milestone in enumerate(params.post_handover_payments, start=1):
            if milestone.payment_percent <= 0:
                continue
            add(
                total_months + math.ceil(milestone.trigger_value),
                milestone.label or f"Post-handover {index}",
                PaymentKind.POST_HANDOVER,
                milestone.payment_percent,
                base_price * milestone.payment_percent / 100,
            )
    else:
        handover_percent = 100 - params.pre_handover_percent
        if handover_percent > 0:
            add(
                total_months, "Handover balance", PaymentKind.HANDOVER,
                handover_percent, base_price * handover_percent / 100,
            )

    events.sort(key=lambda e: e.month)

    return PaymentSchedule(
        events=events,
        total_months=total_months,
        base_price=base_price,
        entry_costs=entry_costs,
    )


def threshold_equity(params: DealParameters) -> float:
    """Equity the developer requires paid before allowing a resale."""
    return params.base_price * params.minimum_exit_threshold / 100


def month_when_threshold_met(params: DealParameters) -> int:
    """First whole month at which the plan reaches the resale threshold.

    Returns:
        Elapsed month, or total_months when the threshold is only met at
        (or never met before) handover.
    """
    params.require_valid()
    required = threshold_equity(params)
    schedule = build_payment_schedule(params)
    last_month = max([params.total_months] + [e.month for e in schedule.events])

    for month in range(last_month + 1):
        if _equity_deployed_at(month, params) >= required:
            return month
    return params.total_months
