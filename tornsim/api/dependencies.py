"""
Dependency injection for API services.
"""

from functools import lru_cache

from ..data.game_data import GameData
from .config import settings
from .services.simulation_service import SimulationService


@lru_cache()
def get_game_data() -> GameData:
    """Get GameData singleton."""
    return GameData.load(settings.DATA_DIR)


@lru_cache()
def get_simulation_service() -> SimulationService:
    """Get SimulationService singleton."""
    return SimulationService(get_game_data())
