"""Static game data passed into the fight engine.

A GameData object bundles the mod, armour coverage, temporary block and
catalog tables for one simulation request. Lookups never fail: missing
tables or names resolve to conservative defaults (no mod, no coverage,
nothing blocks).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..combat.models import ArmourPiece, ArmourSlot, Weapon, WeaponSlot
from .loaders import (
    DATA_DIR,
    load_armour_catalog,
    load_armour_coverage,
    load_mods,
    load_temp_block,
    load_weapon_catalog,
)
from .models import ArmourCatalogEntry, ModData, WeaponCatalogEntry


logger = logging.getLogger(__name__)


# (name, damage, accuracy, category) of an empty slot
DEFAULT_WEAPONS: Dict[WeaponSlot, Tuple[str, float, float, str]] = {
    WeaponSlot.PRIMARY: ("Fists", 50, 50, "Fists"),
    WeaponSlot.SECONDARY: ("Fists", 30, 60, "Fists"),
    WeaponSlot.MELEE: ("Fists", 40, 55, "Fists"),
    WeaponSlot.TEMPORARY: ("None", 0, 0, "Temporary"),
}

UNARMED_WEAPONS: Dict[WeaponSlot, Tuple[str, float, float, str]] = {
    WeaponSlot.FISTS: ("Fists", 50, 50, "Unarmed"),
    WeaponSlot.KICK: ("Kick", 40, 55, "Unarmed"),
}


@dataclass
class GameData:
    """
    Lookup tables for one simulation request.

    Usage:
        game_data = GameData.load()
        mod = game_data.get_mod_effects("ACOG Sight")
        coverage = game_data.get_armour_coverage()
    """

    mods: Dict[str, ModData] = field(default_factory=dict)
    armour_coverage: Dict[str, Dict[str, float]] = field(default_factory=dict)
    temp_block: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    weapon_catalog: Dict[str, List[WeaponCatalogEntry]] = field(default_factory=dict)
    armour_catalog: Dict[str, List[ArmourCatalogEntry]] = field(default_factory=dict)

    @classmethod
    def load(cls, data_dir: Optional[Union[str, Path]] = None) -> "GameData":
        """
        Load every table from a directory.

        Args:
            data_dir: Directory with the JSON tables; the bundled
                ``data/`` directory when omitted.

        Returns:
            GameData; tables that fail to load are empty.
        """
        path = Path(data_dir) if data_dir else DATA_DIR
        game_data = cls(
            mods=load_mods(path),
            armour_coverage=load_armour_coverage(path),
            temp_block=load_temp_block(path),
            weapon_catalog=load_weapon_catalog(path),
            armour_catalog=load_armour_catalog(path),
        )
        logger.info(
            "Game data loaded from %s: %d mods, %d covered body parts",
            path, len(game_data.mods), len(game_data.armour_coverage),
        )
        return game_data

    @classmethod
    def empty(cls) -> "GameData":
        """Game data with no tables: only the built-in defaults."""
        return cls()

    # ------------------------------------------------------------------
    # Engine contract
    # ------------------------------------------------------------------

    def get_default_weapon(self, slot: WeaponSlot) -> Weapon:
        """Weapon used by an empty equipped slot."""
        name, damage, accuracy, category = DEFAULT_WEAPONS[slot]
        return Weapon(
            name=name,
            damage=damage,
            accuracy=accuracy,
            category=category,
            clipsize=0,
            rateoffire=(1, 1),
        )

    def get_unarmed_weapon(self, slot: WeaponSlot) -> Weapon:
        """Fixed fists or kick attack."""
        name, damage, accuracy, category = UNARMED_WEAPONS[slot]
        return Weapon(
            name=name,
            damage=damage,
            accuracy=accuracy,
            category=category,
            clipsize=0,
            rateoffire=(1, 1),
        )

    def get_default_armour(self, slot: ArmourSlot) -> ArmourPiece:
        """No armour."""
        return ArmourPiece(armour=0, set="n/a", type="")

    def get_mod_effects(self, name: str) -> Optional[ModData]:
        return self.mods.get(name)

    def get_armour_coverage(self) -> Dict[str, Dict[str, float]]:
        return self.armour_coverage

    def can_armour_block(self, item_name: str, head_armour_type: str) -> bool:
        """Whether the worn head armour blocks a grenade or spray."""
        if not head_armour_type:
            return False
        return head_armour_type in self.temp_block.get(item_name, ())

    # ------------------------------------------------------------------
    # Catalog lookups
    # ------------------------------------------------------------------

    def find_weapon(self, slot: WeaponSlot, name: str) -> Optional[Weapon]:
        """Catalog weapon by slot and name, at mid-range stats."""
        for entry in self.weapon_catalog.get(slot.value, []):
            if entry.name == name:
                return entry.to_weapon()
        return None

    def find_armour(self, slot: ArmourSlot, name: str) -> Optional[ArmourPiece]:
        """Catalog armour by slot and piece name, at mid-range armour."""
        for entry in self.armour_catalog.get(slot.value, []):
            if entry.type == name:
                return entry.to_armour()
        return None

    def weapon_names(self, slot: WeaponSlot) -> List[str]:
        return sorted(entry.name for entry in self.weapon_catalog.get(slot.value, []))

    def armour_names(self, slot: ArmourSlot) -> List[str]:
        return sorted(entry.type for entry in self.armour_catalog.get(slot.value, []))
