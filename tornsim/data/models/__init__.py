# Data Models
from .mod import ModData, FirstTurnBonus
from .weapon import WeaponCatalogEntry, CatalogBonus
from .armour import ArmourCatalogEntry

__all__ = [
    "ModData",
    "FirstTurnBonus",
    "WeaponCatalogEntry",
    "CatalogBonus",
    "ArmourCatalogEntry",
]
