"""Combatant model for Torn fight simulation.

Static configuration of a fighter: battle stats, weapons, armour,
weapon settings and perks. These objects are built once per
simulation request and shared read-only by every fight.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Tuple
from enum import Enum


class WeaponSlot(str, Enum):
    """Weapon slots a fighter can act with."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    MELEE = "melee"
    TEMPORARY = "temporary"
    FISTS = "fists"  # Unarmed fallback
    KICK = "kick"  # Unarmed fallback (preferkick education)

    @property
    def uses_ammo(self) -> bool:
        """Check if this slot carries a clip."""
        return self in (WeaponSlot.PRIMARY, WeaponSlot.SECONDARY)

    @property
    def is_unarmed(self) -> bool:
        """Check if this slot is a fixed unarmed attack."""
        return self in (WeaponSlot.FISTS, WeaponSlot.KICK)


# Slots that can be configured and equipped, in settings order
EQUIPPED_SLOTS: Tuple[WeaponSlot, ...] = (
    WeaponSlot.PRIMARY,
    WeaponSlot.SECONDARY,
    WeaponSlot.MELEE,
    WeaponSlot.TEMPORARY,
)


class ArmourSlot(str, Enum):
    """Armour slots, in tie-break order."""

    HEAD = "head"
    BODY = "body"
    HANDS = "hands"
    LEGS = "legs"
    FEET = "feet"


ARMOUR_SLOTS: Tuple[ArmourSlot, ...] = tuple(ArmourSlot)


class Role(str, Enum):
    """Which side of the fight a combatant is on."""

    ATTACK = "attack"  # Picks weapons by priority
    DEFEND = "defend"  # Picks weapons by weighted draw


# Mastery merit fields keyed by weapon category
CATEGORY_MASTERY: Dict[str, str] = {
    "Clubbing": "clubbingmastery",
    "Heavy Artillery": "heavyartillerymastery",
    "Machine Gun": "machinegunmastery",
    "Mechanical": "mechanicalmastery",
    "Piercing": "piercingmastery",
    "Pistol": "pistolmastery",
    "Rifle": "riflemastery",
    "Shotgun": "shotgunmastery",
    "Slashing": "slashingmastery",
    "SMG": "smgmastery",
    "Unarmed": "meleemastery",
}

# Education accuracy flags keyed by weapon category
CATEGORY_ACCURACY_EDUCATION: Dict[str, str] = {
    "Heavy Artillery": "heavyartilleryaccuracy",
    "Machine Gun": "machinegunaccuracy",
    "Pistol": "pistolaccuracy",
    "Rifle": "rifleaccuracy",
    "Shotgun": "shotgunaccuracy",
    "SMG": "smgaccuracy",
}


@dataclass
class BattleStats:
    """Strength/Speed/Defense/Dexterity block.

    Used for base stats, passive percentages and resolved stats.
    """

    strength: float = 0.0
    speed: float = 0.0
    defense: float = 0.0
    dexterity: float = 0.0

    def copy(self) -> "BattleStats":
        return BattleStats(self.strength, self.speed, self.defense, self.dexterity)


@dataclass
class BonusSpec:
    """A named effect with a magnitude (weapon bonus or armour effect)."""

    name: str
    value: float = 0.0


@dataclass
class LegacyBonus:
    """Built-in weapon bonus gated by a proc percentage (Spray, Burn, ...)."""

    name: str
    proc: float = 0.0


@dataclass
class Weapon:
    """
    A weapon as configured for a fight.

    Attributes:
        name: Display name used in the fight log.
        damage: Display damage (multiplier is damage / 10).
        accuracy: Display accuracy.
        category: Weapon category (Rifle, Clubbing, Temporary, ...).
        clipsize: Rounds per clip, 0 for weapons without ammo.
        rateoffire: Min/max rounds per action.
        experience: Weapon experience, 0-100.
        bonus: Optional built-in bonus.
        ammo: Ammo type (Standard, TR, PI, HP, IN).
        mods: Attached mod names.
        weapon_bonuses: Attached bonus effects, in attachment order.
    """

    name: str
    damage: float = 0.0
    accuracy: float = 0.0
    category: str = ""
    clipsize: int = 0
    rateoffire: Tuple[int, int] = (1, 1)
    experience: float = 0.0
    bonus: Optional[LegacyBonus] = None
    ammo: str = "Standard"
    mods: List[str] = field(default_factory=list)
    weapon_bonuses: List[BonusSpec] = field(default_factory=list)

    def has_bonus(self, name: str) -> bool:
        """Check if a weapon bonus with this name is attached."""
        return any(b.name == name for b in self.weapon_bonuses)

    def legacy_bonus(self, name: str) -> Optional[LegacyBonus]:
        """Return the built-in bonus if it has this name."""
        if self.bonus is not None and self.bonus.name == name:
            return self.bonus
        return None


@dataclass
class ArmourPiece:
    """A worn armour item."""

    armour: float = 0.0
    set: str = "n/a"
    type: str = ""
    effects: List[BonusSpec] = field(default_factory=list)

    def copy(self) -> "ArmourPiece":
        return ArmourPiece(self.armour, self.set, self.type, list(self.effects))


@dataclass
class SlotSetting:
    """Priority (attack) or weight (defend) of a slot plus its reload flag."""

    setting: int = 0
    reload: bool = False


@dataclass
class WeaponSettings:
    """Settings for the four equipped slots."""

    primary: SlotSetting = field(default_factory=SlotSetting)
    secondary: SlotSetting = field(default_factory=SlotSetting)
    melee: SlotSetting = field(default_factory=SlotSetting)
    temporary: SlotSetting = field(default_factory=SlotSetting)

    def __getitem__(self, slot: WeaponSlot) -> SlotSetting:
        if slot not in EQUIPPED_SLOTS:
            raise KeyError(slot)
        return getattr(self, slot.value)

    def copy(self) -> "WeaponSettings":
        """Fresh mutable copy for a single fight."""
        return WeaponSettings(
            *(SlotSetting(self[s].setting, self[s].reload) for s in EQUIPPED_SLOTS)
        )


@dataclass
class EducationPerks:
    """Education course flags."""

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


@dataclass
class FactionPerks:
    accuracy: float = 0.0
    damage: float = 0.0


@dataclass
class CompanyPerks:
    name: str = "None"
    star: int = 0

    def at_least(self, name: str, star: int) -> bool:
        """Check company name and minimum star rating."""
        return self.name == name and self.star >= star


@dataclass
class PropertyPerks:
    damage: bool = False


@dataclass
class MeritPerks:
    """Merit ranks, including per-category weapon mastery."""

    critrate: int = 0
    primarymastery: int = 0
    secondarymastery: int = 0
    meleemastery: int = 0
    temporarymastery: int = 0
    clubbingmastery: int = 0
    heavyartillerymastery: int = 0
    machinegunmastery: int = 0
    mechanicalmastery: int = 0
    piercingmastery: int = 0
    pistolmastery: int = 0
    riflemastery: int = 0
    shotgunmastery: int = 0
    slashingmastery: int = 0
    smgmastery: int = 0

    def category_mastery(self, category: str) -> int:
        """Mastery rank for a weapon category (0 if none applies)."""
        field_name = CATEGORY_MASTERY.get(category)
        return getattr(self, field_name) if field_name else 0


@dataclass
class Perks:
    """All perk sources of a combatant."""

    education: EducationPerks = field(default_factory=EducationPerks)
    faction: FactionPerks = field(default_factory=FactionPerks)
    company: CompanyPerks = field(default_factory=CompanyPerks)
    property: PropertyPerks = field(default_factory=PropertyPerks)
    merit: MeritPerks = field(default_factory=MeritPerks)


def _default_stats() -> BattleStats:
    return BattleStats(1000.0, 1000.0, 1000.0, 1000.0)


@dataclass
class Combatant:
    """
    Static configuration of one fighter.

    Missing weapon or armour slots are filled from game data when a
    fight starts, so a sparse combatant is always valid.

    Usage:
        hero = Combatant(name="Hero", role=Role.ATTACK)
        hero.weapons[WeaponSlot.PRIMARY] = Weapon("AK-47", 55, 50, "Rifle", 30, (3, 5))
    """

    name: str = "Player"
    life: int = 5000
    max_life: int = 0
    role: Role = Role.ATTACK
    stats: BattleStats = field(default_factory=_default_stats)
    passives: BattleStats = field(default_factory=BattleStats)
    weapons: Dict[WeaponSlot, Weapon] = field(default_factory=dict)
    armour: Dict[ArmourSlot, ArmourPiece] = field(default_factory=dict)
    attack_settings: WeaponSettings = field(default_factory=WeaponSettings)
    defend_settings: WeaponSettings = field(default_factory=WeaponSettings)
    perks: Perks = field(default_factory=Perks)

    def __post_init__(self):
        if self.max_life <= 0:
            self.max_life = self.life

    @property
    def settings(self) -> WeaponSettings:
        """Settings used for this combatant's role."""
        if self.role == Role.ATTACK:
            return self.attack_settings
        return self.defend_settings
