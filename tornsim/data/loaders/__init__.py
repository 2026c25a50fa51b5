# Data Loaders
from .mod_loader import load_mods, get_mod
from .armour_loader import (
    load_armour_coverage,
    load_temp_block,
    load_armour_catalog,
)
from .weapon_loader import load_weapon_catalog, get_weapon_entry
from ._json import DATA_DIR

__all__ = [
    "DATA_DIR",
    # Mod loaders
    "load_mods",
    "get_mod",
    # Armour loaders
    "load_armour_coverage",
    "load_temp_block",
    "load_armour_catalog",
    # Weapon loaders
    "load_weapon_catalog",
    "get_weapon_entry",
]
