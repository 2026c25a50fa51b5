"""Per-fight weapon state.

Tracks ammunition for the primary and secondary slots plus the
one-shot flags of the melee and temporary slots.

Ammo slot states:
    Loaded: ammo_left > 0
    Empty, auto-reload: ammo_left == 0 with reload on and clips left
    Empty, disabled: the slot's setting was zeroed
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, TYPE_CHECKING
import random

from .damage import round_half_up, s_rounding
from .models import Perks, Weapon, WeaponSettings, WeaponSlot

if TYPE_CHECKING:
    from ..data.game_data import GameData


BASE_CLIPS = 3


@dataclass
class AmmoState:
    """Clip state of an ammo-using slot."""

    ammo_left: int = 0
    max_ammo: int = 0
    clips_left: int = BASE_CLIPS
    rof: Tuple[int, int] = (1, 1)

    @property
    def uses_ammo(self) -> bool:
        """Weapons with a clip size of 0 never reload or run dry."""
        return self.max_ammo > 0

    @property
    def is_empty(self) -> bool:
        return self.uses_ammo and self.ammo_left == 0

    @property
    def is_full(self) -> bool:
        return self.uses_ammo and self.ammo_left == self.max_ammo


@dataclass
class MeleeState:
    storage_used: bool = False


@dataclass
class TemporaryState:
    initial_setting: int = 0  # Restored by Storage


@dataclass
class WeaponStates:
    """Mutable weapon state of one fighter for one fight."""

    primary: AmmoState = field(default_factory=AmmoState)
    secondary: AmmoState = field(default_factory=AmmoState)
    melee: MeleeState = field(default_factory=MeleeState)
    temporary: TemporaryState = field(default_factory=TemporaryState)

    def ammo(self, slot: WeaponSlot) -> Optional[AmmoState]:
        """Ammo state of a slot, None for slots without a clip."""
        if slot == WeaponSlot.PRIMARY:
            return self.primary
        if slot == WeaponSlot.SECONDARY:
            return self.secondary
        return None


def mod_multipliers(
    weapon: Weapon, perks: Perks, game_data: "GameData"
) -> Tuple[float, int, float]:
    """
    Clip, clip count and rate of fire modifiers from mods and perks.

    Returns:
        (clip size multiplier, clips, rate of fire multiplier).
    """
    clip_multi = 1.0
    clips = BASE_CLIPS
    rof_multi = 1.0

    for mod_name in weapon.mods:
        mod = game_data.get_mod_effects(mod_name)
        if mod is None:
            continue
        clip_multi += mod.clip_size_multi
        clips += int(mod.extra_clips)
        rof_multi += mod.rate_of_fire_multi

    if perks.company.at_least("Gun Shop", 7):
        clips += 1
    if perks.education.ammocontrol1:
        rof_multi -= 0.05
    if perks.education.ammocontrol2:
        rof_multi -= 0.2

    return clip_multi, clips, rof_multi


def build_ammo_state(weapon: Weapon, perks: Perks, game_data: "GameData") -> AmmoState:
    """Initial clip state of a primary or secondary weapon."""
    clip_multi, clips, rof_multi = mod_multipliers(weapon, perks, game_data)
    max_ammo = round_half_up((weapon.clipsize or 0) * clip_multi)
    low, high = weapon.rateoffire
    return AmmoState(
        ammo_left=max_ammo,
        max_ammo=max_ammo,
        clips_left=clips,
        rof=(
            max(1, round_half_up((low or 1) * rof_multi)),
            max(1, round_half_up((high or 1) * rof_multi)),
        ),
    )


def build_weapon_states(
    primary: Weapon,
    secondary: Weapon,
    perks: Perks,
    settings: WeaponSettings,
    game_data: "GameData",
) -> WeaponStates:
    """Fresh weapon state for a fight."""
    return WeaponStates(
        primary=build_ammo_state(primary, perks, game_data),
        secondary=build_ammo_state(secondary, perks, game_data),
        melee=MeleeState(),
        temporary=TemporaryState(initial_setting=settings.temporary.setting),
    )


def rounds_fired(rng: random.Random, state: AmmoState) -> int:
    """
    Rounds fired by one action.

    Both rate of fire bounds are stochastically rounded, then a count is
    drawn between them. The count never exceeds the ammo left.
    """
    low = s_rounding(rng, state.rof[0])
    high = s_rounding(rng, state.rof[1])

    if high - low == 0:
        rounds = low
    else:
        rounds = round_half_up(rng.random() * (high - low) + low)

    if state.uses_ammo and rounds > state.ammo_left:
        rounds = state.ammo_left
    return rounds


def spend_ammo(state: AmmoState, consumed: int, reload: bool) -> bool:
    """
    Remove fired rounds from the clip.

    Args:
        state: Clip state.
        consumed: Rounds actually consumed.
        reload: Whether the slot auto-reloads.

    Returns:
        True if the slot must be disabled for the rest of the fight.
    """
    if not state.uses_ammo:
        return False

    state.ammo_left = max(0, state.ammo_left - consumed)
    if state.ammo_left == 0:
        state.clips_left -= 1
        return state.clips_left <= 0 or not reload
    return False


def reload_weapon(state: AmmoState) -> None:
    state.ammo_left = state.max_ammo
