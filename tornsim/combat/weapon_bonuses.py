"""Weapon Bonus Effect System for Torn combat.

A registry mapping each weapon bonus to a processor. A processor
implements one or more hook interfaces, each consulted at a fixed stage
of the attack pipeline:

- StatModifier: effective stats of the wielder
- DamageBonusModifier: the percentage damage bonus
- DamageModifier: the integer hit after the damage formula
- HitChanceModifier: final hit chance
- CritModifier: crit chance and crit multiplier
- ArmourModifier: armour mitigation
- AmmoModifier: rounds consumed
- IncomingDamageModifier: damage taken while holding the weapon
- PostDamageEffect: healing, self-damage, extra attacks, statuses
- WeaponStateModifier: initial clip state
- BeforeTurnHook: may skip the action

Only the bonuses attached to the weapon in use are consulted, in
attachment order. Unknown bonus names are ignored.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING
from enum import Enum
import math
import random

from .damage import round_half_up
from .models import BattleStats, Weapon, WeaponSlot
from .status_effects import Status, disarm_status
from .temp_effects import is_injection

if TYPE_CHECKING:
    from .fighter import FighterState
    from .weapon_state import AmmoState, WeaponStates


class WeaponBonus(str, Enum):
    """Registered weapon bonuses."""

    # Damage and stat bonuses
    POWERFUL = "Powerful"
    EMPOWER = "Empower"
    QUICKEN = "Quicken"
    DEADEYE = "Deadeye"
    EXPOSE = "Expose"
    CONSERVE = "Conserve"
    SPECIALIST = "Specialist"
    PENETRATE = "Penetrate"
    BLOODLUST = "Bloodlust"

    # Body part bonuses
    CRUSHER = "Crusher"
    CUPID = "Cupid"
    ACHILLES = "Achilles"
    THROTTLE = "Throttle"
    ROSHAMBO = "Roshambo"

    # Chance and conditional bonuses
    PUNCTURE = "Puncture"
    SURE_SHOT = "Sure Shot"
    DEADLY = "Deadly"
    DOUBLE_TAP = "Double Tap"
    FURY = "Fury"
    DOUBLE_EDGED = "Double-edged"
    EXECUTE = "Execute"
    BLINDSIDE = "Blindside"
    COMEBACK = "Comeback"
    ASSASSINATE = "Assassinate"
    STUN = "Stun"
    HOME_RUN = "Home Run"
    PARRY = "Parry"

    # Stateful bonuses
    BERSERK = "Berserk"
    GRACE = "Grace"
    FRENZY = "Frenzy"
    FOCUS = "Focus"
    FINALE = "Finale"
    WIND_UP = "Wind-up"
    RAGE = "Rage"
    MOTIVATION = "Motivation"
    BACKSTAB = "Backstab"
    SMURF = "Smurf"
    DISARM = "Disarm"

    # Status bonuses
    SLOW = "Slow"
    CRIPPLE = "Cripple"
    WEAKEN = "Weaken"
    WITHER = "Wither"
    EVISCERATE = "Eviscerate"
    BLEED = "Bleed"
    SUPPRESS = "Suppress"
    PARALYZED = "Paralyzed"


# Log text for bonuses that fired on a chance
EFFECT_TEXT: Dict[str, str] = {
    "Puncture": "armor ignored",
    "Sure Shot": "guaranteed hit",
    "Deadly": "deadly strike",
    "Double Tap": "double attack",
    "Fury": "double attack",
    "Double-edged": "double damage with self-injury",
    "Execute": "execution",
    "Stun": "target stunned",
    "Home Run": "temporary weapon deflected",
    "Parry": "attack parried",
    "Rage": "multiple attacks",
    "Motivation": "stats boosted",
    "Backstab": "backstab damage",
    "Disarm": "target disarmed",
    "Slow": "target slowed",
    "Cripple": "target crippled",
    "Weaken": "target weakened",
    "Wither": "target withered",
    "Eviscerate": "target eviscerated",
    "Suppress": "target suppressed",
    "Bleed": "target bleeding",
    "Paralyzed": "target paralyzed",
}

MELEE_CATEGORIES = frozenset({"Clubbing", "Piercing", "Slashing", "CL", "PI", "SL"})


@dataclass
class DamageContext:
    """
    Everything a bonus hook may inspect during one action.

    Attributes:
        attacker: Acting fighter.
        target: Defending fighter.
        weapon: Weapon in use.
        slot: Slot of the weapon in use.
        target_slot: Slot the target chose this action.
        turn: Current round (1-based).
        rng: Random stream of the fight.
        body_part: Struck body part, empty before it is chosen.
        is_critical: Whether the struck part is a crit location.
        applied: Bonuses that modified a value this action.
        procs: Bonuses that fired on a chance this action.
    """

    attacker: "FighterState"
    target: "FighterState"
    weapon: Weapon
    slot: WeaponSlot
    target_slot: WeaponSlot
    turn: int
    rng: random.Random
    body_part: str = ""
    is_critical: bool = False
    applied: List[str] = field(default_factory=list)
    procs: List[str] = field(default_factory=list)

    def mark_applied(self, name: str) -> None:
        if name not in self.applied:
            self.applied.append(name)

    def mark_proc(self, name: str) -> None:
        if name not in self.procs:
            self.procs.append(name)
        self.mark_applied(name)

    def roll(self, chance_percent: float) -> bool:
        return self.rng.random() < chance_percent / 100

    @property
    def weapon_states(self) -> "WeaponStates":
        return self.attacker.weapon_states


@dataclass
class PostDamageResult:
    """Side effects of a damaging hit returned to the engine."""

    healing: int = 0  # Negative for self-damage
    extra_attacks: int = 0


# ============================================================
# Hook interfaces
# ============================================================


class BonusProcessor(ABC):
    """Base of every weapon bonus processor."""

    name: str = ""


class StatModifier(ABC):
    @abstractmethod
    def modify_stats(self, stats: BattleStats, value: float) -> BattleStats:
        ...


class DamageBonusModifier(ABC):
    @abstractmethod
    def modify_damage_bonus(self, bonus: float, value: float, ctx: DamageContext) -> float:
        ...


class DamageModifier(ABC):
    @abstractmethod
    def modify_damage(self, damage: float, value: float, ctx: DamageContext) -> float:
        ...


class HitChanceModifier(ABC):
    @abstractmethod
    def modify_hit_chance(self, chance: float, value: float, ctx: DamageContext) -> float:
        ...


class CritModifier(ABC):
    @abstractmethod
    def modify_crit(
        self, crit_chance: float, crit_multiplier: float, value: float, ctx: DamageContext
    ) -> Tuple[float, float]:
        ...


class ArmourModifier(ABC):
    @abstractmethod
    def modify_armour(self, mitigation: float, value: float, ctx: DamageContext) -> float:
        ...


class AmmoModifier(ABC):
    @abstractmethod
    def modify_ammo(self, consumed: int, value: float, ctx: DamageContext) -> int:
        ...


class IncomingDamageModifier(ABC):
    @abstractmethod
    def modify_incoming(self, damage: float, value: float, ctx: DamageContext) -> float:
        ...


class PostDamageEffect(ABC):
    @abstractmethod
    def after_damage(
        self, damage: float, value: float, ctx: DamageContext, result: PostDamageResult
    ) -> None:
        ...


class WeaponStateModifier(ABC):
    @abstractmethod
    def modify_weapon_state(self, state: "AmmoState", value: float) -> None:
        ...


class BeforeTurnHook(ABC):
    @abstractmethod
    def before_turn(self, ctx: DamageContext) -> bool:
        """Return True to skip the action."""
        ...


# ============================================================
# Damage and stat bonuses
# ============================================================


class Powerful(BonusProcessor, DamageBonusModifier):
    name = WeaponBonus.POWERFUL.value

    def modify_damage_bonus(self, bonus, value, ctx):
        ctx.mark_applied(self.name)
        return bonus + value


class Empower(BonusProcessor, StatModifier):
    name = WeaponBonus.EMPOWER.value

    def modify_stats(self, stats, value):
        result = stats.copy()
        result.strength = round_half_up(stats.strength * (1 + value / 100))
        return result


class Quicken(BonusProcessor, StatModifier):
    name = WeaponBonus.QUICKEN.value

    def modify_stats(self, stats, value):
        result = stats.copy()
        result.speed = round_half_up(stats.speed * (1 + value / 100))
        return result


class Deadeye(BonusProcessor, DamageBonusModifier):
    name = WeaponBonus.DEADEYE.value

    def modify_damage_bonus(self, bonus, value, ctx):
        if ctx.is_critical:
            ctx.mark_applied(self.name)
            return bonus + value
        return bonus


class Expose(BonusProcessor, CritModifier):
    name = WeaponBonus.EXPOSE.value

    def modify_crit(self, crit_chance, crit_multiplier, value, ctx):
        ctx.mark_applied(self.name)
        return min(100.0, crit_chance + value), crit_multiplier


class Conserve(BonusProcessor, AmmoModifier):
    name = WeaponBonus.CONSERVE.value

    def modify_ammo(self, consumed, value, ctx):
        if ctx.roll(value):
            ctx.mark_proc(self.name)
            return 0
        return consumed


class Specialist(BonusProcessor, DamageBonusModifier, WeaponStateModifier):
    """Bonus damage on a weapon limited to a single clip."""

    name = WeaponBonus.SPECIALIST.value

    def modify_damage_bonus(self, bonus, value, ctx):
        state = ctx.weapon_states.ammo(ctx.slot)
        if state is not None and state.clips_left == 1:
            ctx.mark_applied(self.name)
            return bonus + value
        return bonus

    def modify_weapon_state(self, state, value):
        state.clips_left = 1


class Penetrate(BonusProcessor, ArmourModifier):
    name = WeaponBonus.PENETRATE.value

    def modify_armour(self, mitigation, value, ctx):
        ctx.mark_applied(self.name)
        return mitigation * (1 - value / 100)


class Bloodlust(BonusProcessor, PostDamageEffect):
    name = WeaponBonus.BLOODLUST.value

    def after_damage(self, damage, value, ctx, result):
        result.healing += round_half_up(damage * (value / 100))


# ============================================================
# Body part bonuses
# ============================================================


class BodyPartBonus(BonusProcessor, DamageModifier):
    """Extra damage when a matching body part is struck."""

    @abstractmethod
    def matches(self, body_part: str) -> bool:
        ...

    def modify_damage(self, damage, value, ctx):
        if self.matches(ctx.body_part):
            ctx.mark_applied(self.name)
            return round_half_up(damage * (1 + value / 100))
        return damage


class Crusher(BodyPartBonus):
    name = WeaponBonus.CRUSHER.value

    def matches(self, body_part):
        return body_part == "head"


class Cupid(BodyPartBonus):
    name = WeaponBonus.CUPID.value

    def matches(self, body_part):
        return body_part == "heart"


class Achilles(BodyPartBonus):
    name = WeaponBonus.ACHILLES.value

    def matches(self, body_part):
        return "foot" in body_part


class Throttle(BodyPartBonus):
    name = WeaponBonus.THROTTLE.value

    def matches(self, body_part):
        return body_part == "throat"


class Roshambo(BodyPartBonus):
    name = WeaponBonus.ROSHAMBO.value

    def matches(self, body_part):
        return body_part == "groin"


# ============================================================
# Chance and conditional bonuses
# ============================================================


class Puncture(BonusProcessor, ArmourModifier):
    name = WeaponBonus.PUNCTURE.value

    def modify_armour(self, mitigation, value, ctx):
        if ctx.roll(value):
            ctx.mark_proc(self.name)
            return 0.0
        return mitigation


class SureShot(BonusProcessor, HitChanceModifier):
    name = WeaponBonus.SURE_SHOT.value

    def modify_hit_chance(self, chance, value, ctx):
        if ctx.roll(value):
            ctx.mark_proc(self.name)
            return 100.0
        return chance


class Deadly(BonusProcessor, DamageModifier):
    name = WeaponBonus.DEADLY.value

    def modify_damage(self, damage, value, ctx):
        if ctx.roll(value):
            ctx.mark_proc(self.name)
            return round_half_up(damage * 5)
        return damage


class ExtraAttackBonus(BonusProcessor, PostDamageEffect):
    """Chance of one immediate extra attack."""

    def after_damage(self, damage, value, ctx, result):
        if ctx.roll(value):
            ctx.mark_proc(self.name)
            result.extra_attacks += 1


class DoubleTap(ExtraAttackBonus):
    name = WeaponBonus.DOUBLE_TAP.value


class Fury(ExtraAttackBonus):
    name = WeaponBonus.FURY.value


class DoubleEdged(BonusProcessor, DamageModifier, PostDamageEffect):
    """Chance of double damage, costing the wielder a quarter of the hit."""

    name = WeaponBonus.DOUBLE_EDGED.value

    def modify_damage(self, damage, value, ctx):
        if ctx.roll(value):
            ctx.mark_proc(self.name)
            return round_half_up(damage * 2)
        return damage

    def after_damage(self, damage, value, ctx, result):
        if self.name in ctx.procs:
            result.healing -= round_half_up(damage * 0.25)


class Execute(BonusProcessor, DamageModifier):
    """Finishes a target at or below the life percent threshold."""

    name = WeaponBonus.EXECUTE.value

    def modify_damage(self, damage, value, ctx):
        target = ctx.target
        life_percent = target.life / target.max_life * 100 if target.max_life else 0
        if life_percent <= value and damage > 0:
            ctx.mark_proc(self.name)
            return target.life
        return damage


class Blindside(BonusProcessor, DamageModifier):
    name = WeaponBonus.BLINDSIDE.value

    def modify_damage(self, damage, value, ctx):
        if ctx.target.life >= ctx.target.max_life:
            ctx.mark_applied(self.name)
            return round_half_up(damage * (1 + value / 100))
        return damage


class Comeback(BonusProcessor, DamageModifier):
    name = WeaponBonus.COMEBACK.value

    def modify_damage(self, damage, value, ctx):
        attacker = ctx.attacker
        if attacker.max_life and attacker.life / attacker.max_life <= 0.25:
            ctx.mark_applied(self.name)
            return round_half_up(damage * (1 + value / 100))
        return damage


class Assassinate(BonusProcessor, DamageModifier):
    name = WeaponBonus.ASSASSINATE.value

    def modify_damage(self, damage, value, ctx):
        if ctx.turn == 1:
            ctx.mark_applied(self.name)
            return round_half_up(damage * (1 + value / 100))
        return damage


class Stun(BonusProcessor, PostDamageEffect):
    name = WeaponBonus.STUN.value

    def after_damage(self, damage, value, ctx, result):
        if damage > 0 and ctx.roll(value):
            ctx.mark_proc(self.name)
            ctx.target.statuses.add(Status.STUN, 2, 1)


class HomeRun(BonusProcessor, PostDamageEffect):
    """Chance to deflect the target's temporary weapon this round."""

    name = WeaponBonus.HOME_RUN.value

    def after_damage(self, damage, value, ctx, result):
        if damage <= 0 or ctx.target_slot != WeaponSlot.TEMPORARY:
            return
        temporary = ctx.target.weapon(WeaponSlot.TEMPORARY)
        if not temporary.name or temporary.name == "None":
            return
        if ctx.roll(value) and not is_injection(temporary.name):
            ctx.mark_proc(self.name)


class Parry(BonusProcessor, IncomingDamageModifier):
    """Chance to block melee damage while holding the weapon."""

    name = WeaponBonus.PARRY.value

    def modify_incoming(self, damage, value, ctx):
        if ctx.weapon.category not in MELEE_CATEGORIES or damage <= 0:
            return damage
        attacker_has_parry = ctx.weapon.has_bonus(self.name)
        defender_has_parry = ctx.target.weapon(ctx.target_slot).has_bonus(self.name)
        if (attacker_has_parry or defender_has_parry) and ctx.roll(value):
            ctx.mark_proc(self.name)
            return 0
        return damage


# ============================================================
# Stateful bonuses
# ============================================================


class Berserk(BonusProcessor, DamageModifier, HitChanceModifier):
    name = WeaponBonus.BERSERK.value

    def modify_damage(self, damage, value, ctx):
        ctx.mark_applied(self.name)
        return round_half_up(damage * (1 + value / 100))

    def modify_hit_chance(self, chance, value, ctx):
        return max(0.0, chance - value / 2)


class Grace(BonusProcessor, HitChanceModifier, DamageModifier):
    name = WeaponBonus.GRACE.value

    def modify_hit_chance(self, chance, value, ctx):
        return min(100.0, chance + value)

    def modify_damage(self, damage, value, ctx):
        ctx.mark_applied(self.name)
        return round_half_up(damage * (1 - value / 200))


class Frenzy(BonusProcessor, DamageModifier, HitChanceModifier):
    """Scales with consecutive hits."""

    name = WeaponBonus.FRENZY.value

    def modify_damage(self, damage, value, ctx):
        combo = ctx.attacker.combo_counter
        if combo > 0:
            ctx.mark_applied(self.name)
            return round_half_up(damage * (1 + combo * value / 100))
        return damage

    def modify_hit_chance(self, chance, value, ctx):
        combo = ctx.attacker.combo_counter
        if combo > 0:
            return min(100.0, chance + combo * value)
        return chance


class Focus(BonusProcessor, HitChanceModifier):
    """Scales with consecutive misses."""

    name = WeaponBonus.FOCUS.value

    def modify_hit_chance(self, chance, value, ctx):
        misses = ctx.attacker.combo_counter
        if misses > 0:
            ctx.mark_applied(self.name)
            return min(100.0, chance + misses * value)
        return chance


class Finale(BonusProcessor, DamageModifier):
    """Scales with rounds the weapon sat unused, up to five."""

    name = WeaponBonus.FINALE.value

    def modify_damage(self, damage, value, ctx):
        last_used = ctx.attacker.last_used_turn.get(ctx.slot, 0)
        idle = max(0, ctx.turn - last_used - 1)
        if idle > 0:
            ctx.mark_applied(self.name)
            multiplier = 1 + min(idle * value / 100, value * 5 / 100)
            return round_half_up(damage * multiplier)
        return damage


class WindUp(BonusProcessor, BeforeTurnHook, DamageModifier):
    """Spends an action winding up, then hits harder."""

    name = WeaponBonus.WIND_UP.value

    def before_turn(self, ctx):
        if not ctx.attacker.windup:
            ctx.attacker.windup = True
            return True
        return False

    def modify_damage(self, damage, value, ctx):
        if ctx.attacker.windup:
            ctx.attacker.windup = False
            ctx.mark_applied(self.name)
            return round_half_up(damage * (1 + value / 100))
        return damage


class Rage(BonusProcessor, PostDamageEffect):
    name = WeaponBonus.RAGE.value

    def after_damage(self, damage, value, ctx, result):
        if ctx.roll(value):
            ctx.mark_proc(self.name)
            result.extra_attacks += math.floor(ctx.rng.random() * 7) + 2


class Motivation(BonusProcessor, PostDamageEffect):
    name = WeaponBonus.MOTIVATION.value

    def after_damage(self, damage, value, ctx, result):
        if damage > 0 and ctx.roll(value):
            if ctx.attacker.statuses.add(Status.MOTIVATION, 99, 5):
                ctx.mark_proc(self.name)


class Backstab(BonusProcessor, DamageModifier):
    name = WeaponBonus.BACKSTAB.value

    def modify_damage(self, damage, value, ctx):
        if ctx.target.statuses.has(Status.DISTRACTED):
            ctx.mark_proc(self.name)
            return round_half_up(damage * 2)
        return damage


class Smurf(BonusProcessor, DamageModifier):
    name = WeaponBonus.SMURF.value

    def modify_damage(self, damage, value, ctx):
        ctx.mark_applied(self.name)
        return round_half_up(damage * (1 + value / 100))


class Disarm(BonusProcessor, PostDamageEffect):
    """Disarms the target's current weapon for `value` turns on arm or hand hits."""

    name = WeaponBonus.DISARM.value

    def after_damage(self, damage, value, ctx, result):
        if damage <= 0 or ctx.turn <= 1:
            return
        if "hand" not in ctx.body_part and "arm" not in ctx.body_part:
            return
        status = disarm_status(ctx.target_slot)
        if status is None:
            return
        ctx.mark_proc(self.name)
        ctx.target.statuses.add(status, int(value), 1)


# ============================================================
# Status bonuses
# ============================================================


class StatusBonus(BonusProcessor, PostDamageEffect):
    """Chance to apply a stacking status to the target on a damaging hit."""

    status: Status = Status.SLOW
    turns: int = 99
    max_stacks: int = 1

    def after_damage(self, damage, value, ctx, result):
        if damage > 0 and ctx.roll(value):
            if ctx.target.statuses.add(self.status, self.turns, self.max_stacks):
                ctx.mark_proc(self.name)


class Slow(StatusBonus):
    name = WeaponBonus.SLOW.value
    status = Status.SLOW
    max_stacks = 3


class Cripple(StatusBonus):
    name = WeaponBonus.CRIPPLE.value
    status = Status.CRIPPLE
    max_stacks = 3


class Weaken(StatusBonus):
    name = WeaponBonus.WEAKEN.value
    status = Status.WEAKEN
    max_stacks = 3


class Wither(StatusBonus):
    name = WeaponBonus.WITHER.value
    status = Status.WITHER
    max_stacks = 3


class Eviscerate(StatusBonus):
    name = WeaponBonus.EVISCERATE.value
    status = Status.EVISCERATE


class Suppress(StatusBonus):
    name = WeaponBonus.SUPPRESS.value
    status = Status.SUPPRESS


class Paralyzed(StatusBonus):
    name = WeaponBonus.PARALYZED.value
    status = Status.PARALYZED
    turns = 10


class Bleed(BonusProcessor, PostDamageEffect):
    name = WeaponBonus.BLEED.value

    def after_damage(self, damage, value, ctx, result):
        if damage > 0 and ctx.roll(value):
            if ctx.target.statuses.apply_bleed(damage):
                ctx.mark_proc(self.name)


# ============================================================
# Registry
# ============================================================


WEAPON_BONUS_PROCESSORS: Dict[WeaponBonus, BonusProcessor] = {
    WeaponBonus(processor.name): processor
    for processor in (
        Powerful(), Empower(), Quicken(), Deadeye(), Expose(), Conserve(),
        Specialist(), Penetrate(), Bloodlust(),
        Crusher(), Cupid(), Achilles(), Throttle(), Roshambo(),
        Puncture(), SureShot(), Deadly(), DoubleTap(), Fury(), DoubleEdged(),
        Execute(), Blindside(), Comeback(), Assassinate(), Stun(), HomeRun(), Parry(),
        Berserk(), Grace(), Frenzy(), Focus(), Finale(), WindUp(), Rage(),
        Motivation(), Backstab(), Smurf(), Disarm(),
        Slow(), Cripple(), Weaken(), Wither(), Eviscerate(), Bleed(),
        Suppress(), Paralyzed(),
    )
}


def get_processor(name: str) -> Optional[BonusProcessor]:
    """Processor for a bonus name, None for unknown names."""
    try:
        return WEAPON_BONUS_PROCESSORS[WeaponBonus(name)]
    except ValueError:
        return None


def _processors(weapon: Weapon, hook: type):
    for bonus in weapon.weapon_bonuses:
        processor = get_processor(bonus.name)
        if isinstance(processor, hook):
            yield processor, bonus.value


# ============================================================
# Dispatch
# ============================================================


def apply_stat_bonuses(stats: BattleStats, weapon: Weapon) -> BattleStats:
    for processor, value in _processors(weapon, StatModifier):
        stats = processor.modify_stats(stats, value)
    return stats


def apply_damage_bonus_bonuses(bonus: float, weapon: Weapon, ctx: DamageContext) -> float:
    for processor, value in _processors(weapon, DamageBonusModifier):
        bonus = processor.modify_damage_bonus(bonus, value, ctx)
    return bonus


def apply_damage_bonuses(damage: float, weapon: Weapon, ctx: DamageContext) -> float:
    for processor, value in _processors(weapon, DamageModifier):
        damage = processor.modify_damage(damage, value, ctx)
    return damage


def apply_hit_chance_bonuses(chance: float, weapon: Weapon, ctx: DamageContext) -> float:
    for processor, value in _processors(weapon, HitChanceModifier):
        chance = processor.modify_hit_chance(chance, value, ctx)
    return chance


def apply_crit_bonuses(
    crit_chance: float, crit_multiplier: float, weapon: Weapon, ctx: DamageContext
) -> Tuple[float, float]:
    for processor, value in _processors(weapon, CritModifier):
        crit_chance, crit_multiplier = processor.modify_crit(
            crit_chance, crit_multiplier, value, ctx
        )
    return crit_chance, crit_multiplier


def apply_armour_bonuses(mitigation: float, weapon: Weapon, ctx: DamageContext) -> float:
    for processor, value in _processors(weapon, ArmourModifier):
        mitigation = processor.modify_armour(mitigation, value, ctx)
    return mitigation


def apply_ammo_bonuses(consumed: int, weapon: Weapon, ctx: DamageContext) -> int:
    for processor, value in _processors(weapon, AmmoModifier):
        consumed = processor.modify_ammo(consumed, value, ctx)
    return consumed


def apply_incoming_damage_bonuses(damage: float, weapon: Weapon, ctx: DamageContext) -> float:
    """Defensive bonuses of one of the target's weapons."""
    for processor, value in _processors(weapon, IncomingDamageModifier):
        damage = processor.modify_incoming(damage, value, ctx)
    return damage


def apply_post_damage_bonuses(damage: float, weapon: Weapon, ctx: DamageContext) -> PostDamageResult:
    result = PostDamageResult()
    for processor, value in _processors(weapon, PostDamageEffect):
        processor.after_damage(damage, value, ctx, result)
    return result


def apply_weapon_state_bonuses(weapon: Weapon, state: Optional["AmmoState"]) -> None:
    if state is None:
        return
    for processor, value in _processors(weapon, WeaponStateModifier):
        processor.modify_weapon_state(state, value)


def apply_before_turn_bonuses(weapon: Weapon, ctx: DamageContext) -> bool:
    """True if a bonus consumes the action."""
    for processor, value in _processors(weapon, BeforeTurnHook):
        if processor.before_turn(ctx):
            return True
    return False


def format_value(value: float) -> str:
    """Render a magnitude without a trailing .0."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def describe_triggered_bonuses(weapon: Weapon, ctx: DamageContext) -> List[str]:
    """
    Log fragments for the bonuses that took effect this action.

    Chance bonuses that fired carry their effect text, e.g.
    ``Deadly(10%) - deadly strike``.
    """
    fragments = []
    for bonus in weapon.weapon_bonuses:
        processor = get_processor(bonus.name)
        if processor is None:
            continue
        if bonus.name not in ctx.applied and not isinstance(processor, StatModifier):
            continue
        text = f"{bonus.name}({format_value(bonus.value)}%)"
        if bonus.name in ctx.procs:
            text += " - " + EFFECT_TEXT.get(bonus.name, f"{bonus.name} triggered")
        fragments.append(text)
    return fragments


def bonus_suffix(fragments: List[str]) -> str:
    return f" [{', '.join(fragments)}]" if fragments else ""

