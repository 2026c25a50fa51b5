"""Attribute Resolver for Torn combat.

Folds everything that shapes one action into effective numbers:
- Weapon experience, faction, company, education, property and merit perks
- Active weapon mods (own bonuses plus the opponent accuracy penalty)
- Injections and legacy debuffs as passive percentages
- Weapon-bonus stat hooks, blinding grenades and status multipliers
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .damage import is_japanese
from .fighter import FighterState
from .models import CATEGORY_ACCURACY_EDUCATION, BattleStats, WeaponSlot
from .weapon_bonuses import apply_stat_bonuses

if TYPE_CHECKING:
    from ..data.game_data import GameData


BASE_CRIT_CHANCE = 12.0
INVALID_MOD_NAMES = ("", "n/a")


@dataclass
class SideBonuses:
    """Accuracy, damage and crit bonuses of one side for one action."""

    accuracy: float = 0.0
    damage: float = 0.0
    crit: float = BASE_CRIT_CHANCE


@dataclass
class ResolvedAttributes:
    """
    Effective attributes of both sides for one action.

    Attributes:
        x_stats: Acting fighter's effective stats.
        y_stats: Target's effective stats.
        x_bonus: Acting fighter's accuracy/damage/crit bonuses.
        y_bonus: Target's bonuses (only its accuracy matters this action).
    """

    x_stats: BattleStats
    y_stats: BattleStats
    x_bonus: SideBonuses
    y_bonus: SideBonuses


class AttributeResolver:
    """
    Computes effective stats and bonuses for an action.

    Usage:
        resolver = AttributeResolver(game_data)
        attrs = resolver.resolve(attacker, target, WeaponSlot.PRIMARY, WeaponSlot.MELEE, turn=1)
    """

    def __init__(self, game_data: "GameData"):
        self.game_data = game_data

    def resolve(
        self,
        x: FighterState,
        y: FighterState,
        x_slot: WeaponSlot,
        y_slot: WeaponSlot,
        turn: int,
    ) -> ResolvedAttributes:
        """
        Resolve both sides' attributes.

        Args:
            x: Acting fighter.
            y: Target.
            x_slot: Slot the acting fighter uses.
            y_slot: Slot the target has chosen.
            turn: Current round.

        Returns:
            ResolvedAttributes with status multipliers already applied.
        """
        x_bonus = self.perk_bonuses(x, x_slot)
        y_bonus = self.perk_bonuses(y, y_slot)

        x_passives = x.combatant.passives.copy()
        y_passives = y.combatant.passives.copy()

        self._apply_mods(x, x_slot, x_bonus, y_bonus, x_passives, turn)
        self._apply_mods(y, y_slot, y_bonus, x_bonus, y_passives, turn)

        for fighter, passives, opponent in ((x, x_passives, y), (y, y_passives, x)):
            _add(passives, fighter.temps.passive_bonuses(fighter.perks.education.needleeffect))
            _subtract(passives, fighter.debuffs.passive_penalties())
            if opponent.perks.company.at_least("Adult Novelties", 7):
                passives.speed -= 25

        x_stats = self._effective_stats(x, x_slot, x_passives)
        y_stats = self._effective_stats(y, y_slot, y_passives)

        return ResolvedAttributes(
            x_stats=x.statuses.apply_to_stats(x_stats),
            y_stats=y.statuses.apply_to_stats(y_stats),
            x_bonus=x_bonus,
            y_bonus=y_bonus,
        )

    def perk_bonuses(self, fighter: FighterState, slot: WeaponSlot) -> SideBonuses:
        """Accuracy, damage and crit from experience and perks."""
        weapon = fighter.weapon(slot)
        perks = fighter.perks
        education = perks.education
        company = perks.company
        merit = perks.merit

        bonus = SideBonuses(
            accuracy=0.02 * (weapon.experience or 0) + 0.2 * perks.faction.accuracy,
            damage=0.1 * (weapon.experience or 0) + perks.faction.damage,
            crit=BASE_CRIT_CHANCE + 0.5 * merit.critrate,
        )

        if company.name == "Zoo" and company.star == 10:
            bonus.accuracy += 3
        if education.damage:
            bonus.damage += 1
        if perks.property.damage:
            bonus.damage += 2
        if education.critchance:
            bonus.crit += 3

        if slot.uses_ammo:
            if company.name == "Gun Shop" and company.star == 10:
                bonus.damage += 10
        elif slot == WeaponSlot.MELEE:
            if education.meleedamage:
                bonus.damage += 2
            if company.at_least("Pub", 3) or company.at_least("Restaurant", 3):
                bonus.damage += 10
            if is_japanese(weapon.name) and education.japanesedamage:
                bonus.damage += 10
        elif slot == WeaponSlot.TEMPORARY:
            bonus.accuracy += 0.2 * merit.temporarymastery
            bonus.damage += merit.temporarymastery
            if education.temporaryaccuracy:
                bonus.accuracy += 1
            if education.tempdamage:
                bonus.damage += 5
        elif slot == WeaponSlot.FISTS:
            if education.fistdamage:
                bonus.damage += weapon.damage

        mastery = merit.category_mastery(weapon.category)
        bonus.accuracy += 0.2 * mastery
        bonus.damage += mastery
        accuracy_flag = CATEGORY_ACCURACY_EDUCATION.get(weapon.category)
        if accuracy_flag and getattr(education, accuracy_flag):
            bonus.accuracy += 1

        return bonus

    def _apply_mods(
        self,
        fighter: FighterState,
        slot: WeaponSlot,
        own: SideBonuses,
        opponent: SideBonuses,
        passives: BattleStats,
        turn: int,
    ) -> None:
        """Mods count on a loaded clip, or on an empty one without reload."""
        state = fighter.weapon_states.ammo(slot)
        if state is None:
            return
        if state.ammo_left == 0 and fighter.settings[slot].reload:
            return

        for mod_name in fighter.weapon(slot).mods:
            if mod_name in INVALID_MOD_NAMES:
                continue
            mod = self.game_data.get_mod_effects(mod_name)
            if mod is None:
                continue
            own.accuracy += mod.acc_bonus
            opponent.accuracy += mod.enemy_acc_bonus
            own.crit += mod.crit_chance
            own.damage += mod.dmg_bonus
            passives.dexterity += mod.dex_passive
            if turn == 1 and mod.turn1 is not None:
                own.accuracy += mod.turn1.acc_bonus

    def _effective_stats(
        self, fighter: FighterState, slot: WeaponSlot, passives: BattleStats
    ) -> BattleStats:
        base = fighter.combatant.stats
        stats = BattleStats(
            strength=base.strength * (1 + passives.strength / 100),
            speed=base.speed * (1 + passives.speed / 100),
            defense=base.defense * (1 + passives.defense / 100),
            dexterity=base.dexterity * (1 + passives.dexterity / 100),
        )
        stats = apply_stat_bonuses(stats, fighter.weapon(slot))
        stats.speed *= fighter.temps.speed_multiplier()
        stats.dexterity *= fighter.temps.dexterity_multiplier()
        return stats


def _add(target: BattleStats, other: BattleStats) -> None:
    target.strength += other.strength
    target.speed += other.speed
    target.defense += other.defense
    target.dexterity += other.dexterity


def _subtract(target: BattleStats, other: BattleStats) -> None:
    target.strength -= other.strength
    target.speed -= other.speed
    target.defense -= other.defense
    target.dexterity -= other.dexterity
