"""Armour catalog data model."""

from pydantic import BaseModel, Field

from ...combat.damage import round_half_up
from ...combat.models import ArmourPiece


class ArmourCatalogEntry(BaseModel):
    """An armour piece as listed in the game tables."""
    type: str = Field(..., description="Piece name, used for coverage lookups")
    set: str = Field(default="n/a", description="Armour set")
    armour_range: tuple[float, float] = (0.0, 0.0)

    def to_armour(self) -> ArmourPiece:
        return ArmourPiece(
            armour=round_half_up(sum(self.armour_range) / 2),
            set=self.set,
            type=self.type,
        )
