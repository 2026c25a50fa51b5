"""Weapon catalog data model."""

from typing import Optional

from pydantic import BaseModel, Field

from ...combat.damage import round_half_up
from ...combat.models import LegacyBonus, Weapon


class CatalogBonus(BaseModel):
    """Built-in bonus with its proc range."""
    name: str
    procrange: tuple[float, float] = (0.0, 0.0)


class WeaponCatalogEntry(BaseModel):
    """A weapon as listed in the game tables, with stat ranges."""
    name: str = Field(..., description="Display name")
    category: str = Field(default="", description="Weapon category")
    damage_range: tuple[float, float] = (0.0, 0.0)
    accuracy_range: tuple[float, float] = (0.0, 0.0)
    clipsize: int = Field(default=0, ge=0)
    rateoffire: tuple[int, int] = (1, 1)
    bonus: Optional[CatalogBonus] = None

    def to_weapon(self) -> Weapon:
        """Weapon at the midpoint of every range."""
        bonus = None
        if self.bonus is not None and self.bonus.name != "n/a":
            bonus = LegacyBonus(
                name=self.bonus.name,
                proc=round_half_up(sum(self.bonus.procrange) / 2),
            )
        return Weapon(
            name=self.name,
            damage=round_half_up(sum(self.damage_range) / 2),
            accuracy=round_half_up(sum(self.accuracy_range) / 2),
            category=self.category,
            clipsize=self.clipsize,
            rateoffire=tuple(self.rateoffire),
            bonus=bonus,
        )
