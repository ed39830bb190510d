"""Engine configuration shared by the projection, mortgage and exit modules."""

from dataclasses import dataclass
from typing import Tuple

from .lookups import EXIT_AGENT_COMMISSION_PERCENT


@dataclass(frozen=True)
class EngineConfig:
    """Knobs that are not part of a deal but shape every calculation pass."""

    horizon_years: int = 10  # Years projected after handover
    max_horizon_years: int = 100  # Guard against unbounded projections
    stress_rate_offsets: Tuple[float, ...] = (0.0, 1.0, 2.0, 3.0)  # Added to base rate
    exit_agent_commission_percent: float = EXIT_AGENT_COMMISSION_PERCENT

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if self.horizon_years < 1:
            errors.append(f"horizon_years must be >= 1, got {self.horizon_years}")
        if self.horizon_years > self.max_horizon_years:
            errors.append(
                f"horizon_years ({self.horizon_years}) exceeds "
                f"max_horizon_years ({self.max_horizon_years})"
            )
        if not self.stress_rate_offsets:
            errors.append("stress_rate_offsets must not be empty")
        return errors

    def require_valid(self) -> "EngineConfig":
        errors = self.validate()
        if errors:
            raise ValueError("Invalid engine config: " + "; ".join(errors))
        return self


DEFAULT_ENGINE_CONFIG = EngineConfig()
