"""Mortgage financing inputs."""

from dataclasses import dataclass, replace
from typing import List


class InvalidMortgageError(ValueError):
    """Raised when mortgage parameters are out of range."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid mortgage parameters: " + "; ".join(self.errors))


@dataclass(frozen=True)
class MortgageParameters:
    """Post-handover mortgage assumptions.

    Percentages are 0-100; interest_rate is the annual nominal rate.
    """

    enabled: bool = False
    financing_percent: float = 60.0  # Loan-to-value at handover
    loan_term_years: int = 25
    interest_rate: float = 4.5

    # Fees
    processing_fee_percent: float = 1.0  # Of loan amount
    valuation_fee: float = 3000.0
    mortgage_registration_percent: float = 0.25  # Of loan amount

    # Insurance
    life_insurance_percent: float = 0.4  # Annual, of loan amount
    property_insurance: float = 1500.0  # Annual

    @property
    def equity_required_percent(self) -> float:
        """Share of the price the buyer must fund before disbursement."""
        return 100 - self.financing_percent

    def validate(self) -> list[str]:
        """Validate inputs and return list of errors."""
        errors = []

        if not 0 <= self.financing_percent <= 100:
            errors.append(f"financing_percent must be 0-100, got {self.financing_percent}")
        if self.loan_term_years < 1:
            errors.append(f"loan_term_years must be >= 1, got {self.loan_term_years}")
        if self.interest_rate < 0:
            errors.append(f"interest_rate must be >= 0, got {self.interest_rate}")
        for name in (
            "processing_fee_percent",
            "valuation_fee",
            "mortgage_registration_percent",
            "life_insurance_percent",
            "property_insurance",
        ):
            value = getattr(self, name)
            if value < 0:
                errors.append(f"{name} must be >= 0, got {value}")

        return errors

    def require_valid(self) -> "MortgageParameters":
        errors = self.validate()
        if errors:
            raise InvalidMortgageError(errors)
        return self

    def copy(self, **changes) -> "MortgageParameters":
        return replace(self, **changes)


DEFAULT_MORTGAGE_PARAMETERS = MortgageParameters()
