"""Static game data: mods, armour coverage, temporary blocks and catalogs."""

from .game_data import GameData, DEFAULT_WEAPONS, UNARMED_WEAPONS
from .models import ModData, WeaponCatalogEntry, ArmourCatalogEntry

__all__ = [
    "GameData",
    "DEFAULT_WEAPONS",
    "UNARMED_WEAPONS",
    "ModData",
    "WeaponCatalogEntry",
    "ArmourCatalogEntry",
]
