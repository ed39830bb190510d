"""Export module for tabular and workbook views of engine results."""

from .tables import (
    projection_to_dataframe,
    payment_schedule_to_dataframe,
    amortization_to_dataframe,
    stress_scenarios_to_dataframe,
    exit_scenarios_to_dataframe,
)
from .workbook import WorkbookConfig, generate_workbook

__all__ = [
    "projection_to_dataframe",
    "payment_schedule_to_dataframe",
    "amortization_to_dataframe",
    "stress_scenarios_to_dataframe",
    "exit_scenarios_to_dataframe",
    "WorkbookConfig",
    "generate_workbook",
]
