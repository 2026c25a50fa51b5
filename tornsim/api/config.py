"""
API configuration settings.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """API settings."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "info"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Simulation
    DEFAULT_SIMULATION_COUNT: int = 1000
    MIN_SIMULATION_COUNT: int = 100
    MAX_SIMULATION_COUNT: int = 100000
    SIMULATION_SEED: Optional[int] = None
    PARALLEL_THRESHOLD: int = 5000  # Fan out to threads at or above this many fights
    MAX_WORKERS: int = 4

    # Game data
    DATA_DIR: Optional[str] = None

    class Config:
        env_file = ".env"


settings = Settings()
