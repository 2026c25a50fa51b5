"""
Simulation request and response schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional, Tuple

from ..config import settings
from .combatant import CombatantSchema


class SimulateRequest(BaseModel):
    """Simulation request. The hero attacks and the villain defends."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    hero: CombatantSchema = Field(default_factory=CombatantSchema)
    villain: CombatantSchema = Field(default_factory=CombatantSchema)
    iterations: int = Field(
        default=settings.DEFAULT_SIMULATION_COUNT,
        ge=settings.MIN_SIMULATION_COUNT,
        le=settings.MAX_SIMULATION_COUNT,
    )
    seed: Optional[int] = None
    include_battle_logs: bool = False


class ResponseModel(BaseModel):
    """Serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DistributionSummarySchema(ResponseModel):
    mean: float
    std: float
    p5: float
    p50: float
    p95: float


class BattleLogSchema(ResponseModel):
    """One fight when battle logs are requested."""

    battle_number: int
    winner: Optional[str]
    turns: int
    hero_damage_dealt: int
    villain_damage_dealt: int
    hero_final_life: int
    villain_final_life: int
    log: List[str]


class SimulationResponse(ResponseModel):
    """Simulation result. Rates are percentages."""

    total_simulations: int
    hero_wins: int
    villain_wins: int
    stalemates: int
    hero_win_rate: float
    villain_win_rate: float
    stalemate_rate: float
    hero_win_rate_confidence: Tuple[float, float]
    average_turns: float
    average_hero_life_remaining: float
    average_villain_life_remaining: float
    last_fight_log: List[str]
    hero_life_distribution: Dict[int, int]
    villain_life_distribution: Dict[int, int]
    hero_life_summary: DistributionSummarySchema
    villain_life_summary: DistributionSummarySchema
    turns_summary: DistributionSummarySchema
    battle_stats: Dict[str, Any]
    battle_logs: Optional[List[BattleLogSchema]] = None
