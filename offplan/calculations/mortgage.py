"""Mortgage analysis: gap financing, amortization, fees and rate stress test."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List

import numpy_financial as npf

from ..models.engine_config import EngineConfig, DEFAULT_ENGINE_CONFIG
from ..models.lookups import STRESS_POSITIVE_COVERAGE, STRESS_TIGHT_COVERAGE
from ..models.mortgage import MortgageParameters

logger = logging.getLogger(__name__)


class CoverageStatus(str, Enum):
    """Stress test classification by debt service coverage."""
    POSITIVE = "positive"  # Coverage >= 120%
    TIGHT = "tight"  # 100% - 120%
    NEGATIVE = "negative"  # Below 100%


@dataclass
class AmortizationYear:
    """One year of the amortization schedule."""
    year: int
    yearly_principal: float
    yearly_interest: float
    principal_paid: float  # Cumulative
    interest_paid: float  # Cumulative
    balance: float  # End of year


@dataclass
class StressScenario:
    """Monthly cashflow at a stressed interest rate."""
    rate: float
    monthly_payment: float
    net_cashflow: float  # Net rent - payment
    coverage_ratio: float  # Net rent / payment (0 when there is no payment)
    status: CoverageStatus


@dataclass
class MortgageAnalysis:
    """Complete mortgage analysis for a deal."""

    # Gap financing
    equity_required_percent: float
    pre_handover_percent: float
    gap_percent: float
    gap_amount: float
    has_gap: bool

    # Loan
    loan_amount: float
    monthly_payment: float
    total_loan_payments: float  # Principal + interest over the term
    total_interest: float

    # Fees
    processing_fee: float
    valuation_fee: float
    mortgage_registration: float
    total_upfront_fees: float

    # Insurance
    annual_life_insurance: float
    annual_property_insurance: float
    total_annual_insurance: float
    total_insurance_over_term: float

    # Grand totals
    total_cost_with_mortgage: float
    total_interest_and_fees: float

    amortization_schedule: List[AmortizationYear] = field(default_factory=list)
    stress_scenarios: List[StressScenario] = field(default_factory=list)

    @property
    def principal_paid_year5(self) -> float:
        return self._principal_paid_by_year(5)

    @property
    def principal_paid_year10(self) -> float:
        return self._principal_paid_by_year(10)

    def _principal_paid_by_year(self, year: int) -> float:
        if len(self.amortization_schedule) < year:
            return 0.0
        return self.amortization_schedule[year - 1].principal_paid


def calculate_monthly_payment(principal: float, annual_rate: float, term_years: int) -> float:
    """Calculate the fixed monthly payment of an amortizing loan.

    M = P x r x (1 + r)^n / ((1 + r)^n - 1), with r = annual_rate / 100 / 12
    and n = term_years x 12. Falls back to straight-line P / n at 0%.

    Args:
        principal: Loan amount.
        annual_rate: Annual nominal rate in percent (e.g. 4.5).
        term_years: Loan term in years.

    Returns:
        Monthly payment (0 when the term is not positive).
    """
    monthly_rate = annual_rate / 100 / 12
    num_payments = term_years * 12

    if num_payments <= 0:
        return 0.0
    if monthly_rate == 0:
        return principal / num_payments
    # numpy_financial returns the payment as a negative cash flow
    return float(-npf.pmt(rate=monthly_rate, nper=num_payments, pv=principal, fv=0))


def build_amortization_schedule(
    loan_amount: float,
    annual_rate: float,
    term_years: int,
    monthly_payment: float,
) -> List[AmortizationYear]:
    """Build the amortization schedule month by month, aggregated per year.

    Each month:
        interest = balance x r
        principal = min(payment - interest, balance)

    Args:
        loan_amount: Initial balance.
        annual_rate: Annual nominal rate in percent.
        term_years: Loan term in years.
        monthly_payment: Fixed monthly payment.

    Returns:
        One AmortizationYear per year of the term.
    """
    monthly_rate = annual_rate / 100 / 12
    balance = loan_amount
    principal_paid = 0.0
    interest_paid = 0.0
    schedule: List[AmortizationYear] = []

    for year in range(1, term_years + 1):
        yearly_principal = 0.0
        yearly_interest = 0.0

        for _ in range(12):
            if balance <= 0:
                break
            interest = balance * monthly_rate
            principal = min(monthly_payment - interest, balance)
            balance -= principal
            yearly_principal += principal
            yearly_interest += interest

        principal_paid += yearly_principal
        interest_paid += yearly_interest
        schedule.append(AmortizationYear(
            year=year,
            yearly_principal=yearly_principal,
            yearly_interest=yearly_interest,
            principal_paid=principal_paid,
            interest_paid=interest_paid,
            balance=max(0.0, balance),
        ))

    return schedule


def classify_coverage(coverage_ratio: float) -> CoverageStatus:
    """Classify a debt service coverage ratio."""
    if coverage_ratio >= STRESS_POSITIVE_COVERAGE:
        return CoverageStatus.POSITIVE
    if coverage_ratio >= STRESS_TIGHT_COVERAGE:
        return CoverageStatus.TIGHT
    return CoverageStatus.NEGATIVE


def run_stress_test(
    loan_amount: float,
    base_rate: float,
    term_years: int,
    net_monthly_rent: float,
    rate_offsets: tuple = DEFAULT_ENGINE_CONFIG.stress_rate_offsets,
) -> List[StressScenario]:
    """Recompute payment and coverage at stressed interest rates.

    Args:
        loan_amount: Loan principal.
        base_rate: Base annual rate in percent.
        term_years: Loan term in years.
        net_monthly_rent: Monthly rent net of service charges.
        rate_offsets: Percentage points added to the base rate.

    Returns:
        One StressScenario per offset, in offset order.
    """
    scenarios = []
    for offset in rate_offsets:
        rate = base_rate + offset
        payment = calculate_monthly_payment(loan_amount, rate, term_years)

        if payment > 0:
            coverage = net_monthly_rent / payment
            status = classify_coverage(coverage)
        else:
            # No debt service to cover
            coverage = 0.0
            status = CoverageStatus.POSITIVE

        scenarios.append(StressScenario(
            rate=rate,
            monthly_payment=payment,
            net_cashflow=net_monthly_rent - payment,
            coverage_ratio=coverage,
            status=status,
        ))
    return scenarios


def analyze_mortgage(
    mortgage: MortgageParameters,
    base_price: float,
    pre_handover_percent: float,
    monthly_rent: float = 0.0,
    monthly_service_charges: float = 0.0,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> MortgageAnalysis:
    """Analyze a handover mortgage against the payment plan.

    Gap financing: the bank disburses at most financing_percent, so the
    buyer must have paid 100 - financing_percent by handover. If the plan
    only committed pre_handover_percent, the difference is a cash call at
    handover:
        gap_percent = max(0, equity_required_percent - pre_handover_percent)

    Args:
        mortgage: Mortgage parameters.
        base_price: Purchase price.
        pre_handover_percent: Share of price paid by handover under the plan.
        monthly_rent: Gross monthly rent for the stress test.
        monthly_service_charges: Monthly service charges for the stress test.
        config: Engine configuration (stress rate offsets).

    Returns:
        MortgageAnalysis with loan, fees, insurance, schedule and stress test.

    Raises:
        InvalidMortgageError: If mortgage parameters are invalid.
        ValueError: If base_price is not positive.

    Example:
        >>> analysis = analyze_mortgage(
        ...     MortgageParameters(financing_percent=60),
        ...     base_price=1_000_000,
        ...     pre_handover_percent=30,
        ... )
        >>> analysis.gap_amount
        100000.0
    """
    mortgage.require_valid()
    if not base_price > 0:
        raise ValueError(f"base_price must be positive, got {base_price}")

    # Gap calculation
    equity_required_percent = mortgage.equity_required_percent
    gap_percent = max(0.0, equity_required_percent - pre_handover_percent)
    gap_amount = base_price * gap_percent / 100

    # Loan
    loan_amount = base_price * mortgage.financing_percent / 100
    monthly_payment = calculate_monthly_payment(
        loan_amount, mortgage.interest_rate, mortgage.loan_term_years
    )
    num_payments = mortgage.loan_term_years * 12
    total_loan_payments = monthly_payment * num_payments
    total_interest = total_loan_payments - loan_amount

    # Fees
    processing_fee = loan_amount * mortgage.processing_fee_percent / 100
    mortgage_registration = loan_amount * mortgage.mortgage_registration_percent / 100
    total_upfront_fees = processing_fee + mortgage.valuation_fee + mortgage_registration

    # Insurance
    annual_life_insurance = loan_amount * mortgage.life_insurance_percent / 100
    total_annual_insurance = annual_life_insurance + mortgage.property_insurance
    total_insurance_over_term = total_annual_insurance * mortgage.loan_term_years

    # Grand totals
    equity_paid = base_price * equity_required_percent / 100
    total_cost_with_mortgage = (
        equity_paid + total_loan_payments + total_upfront_fees + total_insurance_over_term
    )
    total_interest_and_fees = total_interest + total_upfront_fees + total_insurance_over_term

    logger.debug(
        "Mortgage: loan %.0f over %d months at %.2f%%, payment %.2f",
        loan_amount, num_payments, mortgage.interest_rate, monthly_payment,
    )

    return MortgageAnalysis(
        equity_required_percent=equity_required_percent,
        pre_handover_percent=pre_handover_percent,
        gap_percent=gap_percent,
        gap_amount=gap_amount,
        has_gap=gap_percent > 0,
        loan_amount=loan_amount,
        monthly_payment=monthly_payment,
        total_loan_payments=total_loan_payments,
        total_interest=total_interest,
        processing_fee=processing_fee,
        valuation_fee=mortgage.valuation_fee,
        mortgage_registration=mortgage_registration,
        total_upfront_fees=total_upfront_fees,
        annual_life_insurance=annual_life_insurance,
        annual_property_insurance=mortgage.property_insurance,
        total_annual_insurance=total_annual_insurance,
        total_insurance_over_term=total_insurance_over_term,
        total_cost_with_mortgage=total_cost_with_mortgage,
        total_interest_and_fees=total_interest_and_fees,
        amortization_schedule=build_amortization_schedule(
            loan_amount, mortgage.interest_rate, mortgage.loan_term_years, monthly_payment
        ),
        stress_scenarios=run_stress_test(
            loan_amount,
            mortgage.interest_rate,
            mortgage.loan_term_years,
            monthly_rent - monthly_service_charges,
            config.stress_rate_offsets,
        ),
    )


def max_loan_for_coverage(
    net_monthly_rent: float,
    annual_rate: float,
    term_years: int,
    min_coverage: float = STRESS_POSITIVE_COVERAGE,
) -> float:
    """Largest loan whose payment keeps rent coverage at min_coverage.

    Max payment = net rent / min_coverage
    Max loan = PV of an annuity at that payment

    Args:
        net_monthly_rent: Monthly rent net of service charges.
        annual_rate: Annual nominal rate in percent.
        term_years: Loan term in years.
        min_coverage: Required coverage ratio (e.g. 1.20).

    Returns:
        Maximum loan amount (0 when rent is not positive).
    """
    if net_monthly_rent <= 0 or min_coverage <= 0 or term_years <= 0:
        return 0.0

    max_payment = net_monthly_rent / min_coverage
    monthly_rate = annual_rate / 100 / 12
    num_payments = term_years * 12
    if monthly_rate == 0:
        return max_payment * num_payments
    # numpy_financial.pv returns negative, so negate
    return float(-npf.pv(rate=monthly_rate, nper=num_payments, pmt=max_payment, fv=0))
