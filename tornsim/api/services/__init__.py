"""API services."""

from .simulation_service import SimulationService

__all__ = [
    "SimulationService",
]
