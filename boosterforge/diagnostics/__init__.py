"""Balancing and sanity-check tooling."""

from .checklist import ChecklistIssue, run_checklist
from .economy_simulator import EconomySimulator, SimulationResult, WheelSimulationResult

__all__ = [
    "ChecklistIssue",
    "run_checklist",
    "EconomySimulator",
    "SimulationResult",
    "WheelSimulationResult",
]
