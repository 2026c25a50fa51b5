"""
Combatant configuration schemas.

Every field is optional. Weapons and armour given by name only are
looked up in the game data catalog.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional, Tuple


class CamelModel(BaseModel):
    """Accepts both snake_case and camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BattleStatsSchema(CamelModel):
    """Strength/Speed/Defense/Dexterity block."""

    strength: float = 0.0
    speed: float = 0.0
    defense: float = 0.0
    dexterity: float = 0.0


def _default_battle_stats() -> BattleStatsSchema:
    return BattleStatsSchema(strength=1000, speed=1000, defense=1000, dexterity=1000)


class BonusSchema(CamelModel):
    """Weapon bonus or armour effect."""

    name: str
    value: float = 0.0


class LegacyBonusSchema(CamelModel):
    """Built-in weapon bonus."""

    name: str
    proc: float = Field(default=0.0, ge=0, le=100)


class WeaponSchema(CamelModel):
    """Weapon in one slot. Leave ``damage`` unset to use the catalog entry."""

    name: str
    damage: Optional[float] = Field(default=None, ge=0)
    accuracy: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    clipsize: Optional[int] = Field(default=None, ge=0)
    rateoffire: Optional[Tuple[int, int]] = None
    experience: float = Field(default=0.0, ge=0, le=100)
    bonus: Optional[LegacyBonusSchema] = None
    ammo: str = "Standard"
    mods: List[str] = Field(default_factory=list, max_length=2)
    weapon_bonuses: List[BonusSchema] = Field(default_factory=list, max_length=2)


class ArmourSchema(CamelModel):
    """Armour piece in one slot. Leave ``armour`` unset to use the catalog entry."""

    type: str
    armour: Optional[float] = Field(default=None, ge=0)
    set: str = "n/a"
    effects: List[BonusSchema] = Field(default_factory=list)


class SlotSettingSchema(CamelModel):
    """Attack priority (0-4) or defend weight (0-100) with the reload flag."""

    setting: int = Field(default=0, ge=0, le=100)
    reload: bool = False


class EducationPerksSchema(CamelModel):
    damage: bool = False
    meleedamage: bool = False
    japanesedamage: bool = False
    tempdamage: bool = False
    needleeffect: bool = False
    fistdamage: bool = False
    neckdamage: bool = False
    critchance: bool = False
    ammocontrol1: bool = False
    ammocontrol2: bool = False
    machinegunaccuracy: bool = False
    smgaccuracy: bool = False
    pistolaccuracy: bool = False
    rifleaccuracy: bool = False
    heavyartilleryaccuracy: bool = False
    shotgunaccuracy: bool = False
    temporaryaccuracy: bool = False
    preferkick: bool = False


class FactionPerksSchema(CamelModel):
    accuracy: float = 0.0
    damage: float = 0.0


class CompanyPerksSchema(CamelModel):
    name: str = "None"
    star: int = Field(default=0, ge=0, le=10)


class PropertyPerksSchema(CamelModel):
    damage: bool = False


class MeritPerksSchema(CamelModel):
    critrate: int = Field(default=0, ge=0, le=10)
    primarymastery: int = Field(default=0, ge=0, le=10)
    secondarymastery: int = Field(default=0, ge=0, le=10)
    meleemastery: int = Field(default=0, ge=0, le=10)
    temporarymastery: int = Field(default=0, ge=0, le=10)
    clubbingmastery: int = Field(default=0, ge=0, le=10)
    heavyartillerymastery: int = Field(default=0, ge=0, le=10)
    machinegunmastery: int = Field(default=0, ge=0, le=10)
    mechanicalmastery: int = Field(default=0, ge=0, le=10)
    piercingmastery: int = Field(default=0, ge=0, le=10)
    pistolmastery: int = Field(default=0, ge=0, le=10)
    riflemastery: int = Field(default=0, ge=0, le=10)
    shotgunmastery: int = Field(default=0, ge=0, le=10)
    slashingmastery: int = Field(default=0, ge=0, le=10)
    smgmastery: int = Field(default=0, ge=0, le=10)


class PerksSchema(CamelModel):
    education: EducationPerksSchema = Field(default_factory=EducationPerksSchema)
    faction: FactionPerksSchema = Field(default_factory=FactionPerksSchema)
    company: CompanyPerksSchema = Field(default_factory=CompanyPerksSchema)
    property: PropertyPerksSchema = Field(default_factory=PropertyPerksSchema)
    merit: MeritPerksSchema = Field(default_factory=MeritPerksSchema)


class CombatantSchema(CamelModel):
    """Full configuration of one fighter.

    ``weapons``, ``armour`` and both settings maps are keyed by slot name
    (primary/secondary/melee/temporary and head/body/hands/legs/feet).
    """

    name: str = "Player"
    life: int = Field(default=5000, ge=1)
    max_life: Optional[int] = Field(default=None, ge=1)
    battle_stats: BattleStatsSchema = Field(default_factory=_default_battle_stats)
    passives: BattleStatsSchema = Field(default_factory=BattleStatsSchema)
    weapons: Dict[str, WeaponSchema] = Field(default_factory=dict)
    armour: Dict[str, ArmourSchema] = Field(default_factory=dict)
    attack_settings: Dict[str, SlotSettingSchema] = Field(default_factory=dict)
    defend_settings: Dict[str, SlotSettingSchema] = Field(default_factory=dict)
    perks: PerksSchema = Field(default_factory=PerksSchema)
