"""Per-fight mutable state of a combatant.

A FighterState is built fresh from an immutable Combatant at the start
of every fight and discarded at its end, so trials never share state.
"""

from dataclasses import dataclass, field
from typing import Dict, TYPE_CHECKING

from .armour import apply_company_armour
from .dot import DotTracker
from .models import (
    ARMOUR_SLOTS,
    EQUIPPED_SLOTS,
    ArmourPiece,
    ArmourSlot,
    Combatant,
    Perks,
    Role,
    Weapon,
    WeaponSettings,
    WeaponSlot,
)
from .status_effects import DebuffCounters, StatusEffects
from .temp_effects import TemporaryEffects
from .weapon_bonuses import apply_weapon_state_bonuses
from .weapon_state import WeaponStates, build_weapon_states

if TYPE_CHECKING:
    from ..data.game_data import GameData


@dataclass
class FighterState:
    """
    Mutable state of one side of a fight.

    Attributes:
        combatant: Static configuration (never mutated).
        weapons: Equipped weapons with defaults filled in, plus fists and kick.
        armour: Worn armour with defaults filled in and company bonus applied.
        life: Current life.
        max_life: Life cap for healing and life-percent checks.
        settings: Mutable copy of the role's weapon settings.
        weapon_states: Ammo and one-shot flags.
        statuses: Stacking statuses.
        debuffs: Flat legacy debuffs received.
        dots: DOT channels ticking on the opponent.
        temps: Timed injection and grenade effects on this fighter.
        combo_counter: Consecutive hit/miss counter for Frenzy and Focus.
        last_used_turn: Last round each slot was used, for Finale.
        windup: Whether a Wind-up weapon is primed.
    """

    combatant: Combatant
    weapons: Dict[WeaponSlot, Weapon]
    armour: Dict[ArmourSlot, ArmourPiece]
    life: int
    max_life: int
    settings: WeaponSettings
    weapon_states: WeaponStates
    statuses: StatusEffects = field(default_factory=StatusEffects)
    debuffs: DebuffCounters = field(default_factory=DebuffCounters)
    dots: DotTracker = field(default_factory=DotTracker)
    temps: TemporaryEffects = field(default_factory=TemporaryEffects)
    combo_counter: int = 0
    last_used_turn: Dict[WeaponSlot, int] = field(default_factory=dict)
    windup: bool = False

    @property
    def name(self) -> str:
        return self.combatant.name

    @property
    def role(self) -> Role:
        return self.combatant.role

    @property
    def perks(self) -> Perks:
        return self.combatant.perks

    def weapon(self, slot: WeaponSlot) -> Weapon:
        return self.weapons[slot]

    def unarmed_slot(self) -> WeaponSlot:
        """Unarmed attack used when nothing else can act."""
        if self.perks.education.preferkick:
            return WeaponSlot.KICK
        return WeaponSlot.FISTS


def build_fighter(combatant: Combatant, game_data: "GameData") -> FighterState:
    """
    Build fresh fight state from a combatant.

    Missing weapons and armour are filled with game-data defaults.
    """
    weapons: Dict[WeaponSlot, Weapon] = {}
    for slot in EQUIPPED_SLOTS:
        weapon = combatant.weapons.get(slot)
        weapons[slot] = weapon if weapon is not None else game_data.get_default_weapon(slot)
    weapons[WeaponSlot.FISTS] = game_data.get_unarmed_weapon(WeaponSlot.FISTS)
    weapons[WeaponSlot.KICK] = game_data.get_unarmed_weapon(WeaponSlot.KICK)

    worn: Dict[ArmourSlot, ArmourPiece] = {}
    for slot in ARMOUR_SLOTS:
        piece = combatant.armour.get(slot)
        worn[slot] = piece if piece is not None else game_data.get_default_armour(slot)

    settings = combatant.settings.copy()
    weapon_states = build_weapon_states(
        weapons[WeaponSlot.PRIMARY],
        weapons[WeaponSlot.SECONDARY],
        combatant.perks,
        settings,
        game_data,
    )

    for slot in (WeaponSlot.PRIMARY, WeaponSlot.SECONDARY):
        apply_weapon_state_bonuses(weapons[slot], weapon_states.ammo(slot))

    return FighterState(
        combatant=combatant,
        weapons=weapons,
        armour=apply_company_armour(worn, combatant.perks.company),
        life=combatant.life,
        max_life=combatant.max_life,
        settings=settings,
        weapon_states=weapon_states,
    )
