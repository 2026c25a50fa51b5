"""Weapon mod data model."""

from typing import Optional

from pydantic import BaseModel, Field


class FirstTurnBonus(BaseModel):
    """Bonuses that only apply in the first round."""
    acc_bonus: float = Field(default=0.0, description="Accuracy in round 1")


class ModData(BaseModel):
    """Effects of one weapon mod."""
    acc_bonus: float = Field(default=0.0, description="Wielder accuracy")
    enemy_acc_bonus: float = Field(default=0.0, description="Opponent accuracy")
    crit_chance: float = Field(default=0.0, description="Crit chance %")
    dmg_bonus: float = Field(default=0.0, description="Damage %")
    dex_passive: float = Field(default=0.0, description="Dexterity passive %")
    clip_size_multi: float = Field(default=0.0, description="Added clip size multiplier")
    extra_clips: int = Field(default=0, description="Extra clips")
    rate_of_fire_multi: float = Field(default=0.0, description="Added rate of fire multiplier")
    turn1: Optional[FirstTurnBonus] = None
