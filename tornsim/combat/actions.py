"""Turn/Action Resolver for Torn combat.

Chooses the weapon a fighter uses and drives one full action:
- Reload of an empty clip with auto-reload on
- Attack: hit roll, body part, armour, damage and weapon bonuses
- Slot specials (legacy bonuses, injections, grenades, throwables)
- Post-damage effects, extra attacks, cauterize and the DOT tick

Every action appends human-readable lines to the fight log.
"""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING
import math
import random

from .armour import armour_mitigation, armour_piece_for
from .armour_effects import ArmourContext, apply_armour_effects, describe_armour_effects
from .attributes import AttributeResolver, ResolvedAttributes
from .damage import (
    CHEST,
    BodyPart,
    apply_accuracy,
    damage_mitigation,
    final_damage,
    hit_chance,
    hit_or_miss,
    is_critical_part,
    max_damage,
    proc,
    raw_damage,
    round_half_up,
    select_body_part,
    variance,
)
from .dot import DOT_CURVES, DotChannel
from .fighter import FighterState
from .models import EQUIPPED_SLOTS, ArmourSlot, Role, Weapon, WeaponSlot
from .stats_collector import BattleStatsCollector
from .status_effects import TOXIN_DEBUFFS, Debuff
from .temp_effects import (
    AIMED_THROWABLES,
    DAMAGING_THROWABLES,
    GRENADES,
    INJECTIONS,
    SEROTONIN_HEAL,
    grenade_duration,
)
from .weapon_bonuses import (
    DamageContext,
    WeaponBonus,
    apply_ammo_bonuses,
    apply_armour_bonuses,
    apply_before_turn_bonuses,
    apply_crit_bonuses,
    apply_damage_bonus_bonuses,
    apply_damage_bonuses,
    apply_hit_chance_bonuses,
    apply_incoming_damage_bonuses,
    apply_post_damage_bonuses,
    bonus_suffix,
    describe_triggered_bonuses,
)
from .weapon_state import reload_weapon, rounds_fired, spend_ammo

if TYPE_CHECKING:
    from ..data.game_data import GameData


INVALID_WEAPON_NAMES = ("Unknown", "", "n/a")
BLINDFIRE_VOLLEYS = 15
BLINDFIRE_ACCURACY_STEP = 5
CAUTERIZE_HEAL = 0.2

# Log lines for statuses newly applied by post-damage bonuses
STATUS_ANNOUNCEMENTS = {
    WeaponBonus.STUN.value: "{target} has been stunned and will miss their next turn!",
    WeaponBonus.SLOW.value: "{target} has been slowed!",
    WeaponBonus.CRIPPLE.value: "{target} has been crippled!",
    WeaponBonus.WEAKEN.value: "{target} has been weakened!",
    WeaponBonus.WITHER.value: "{target} has been withered!",
    WeaponBonus.EVISCERATE.value: "{target} is bleeding heavily!",
    WeaponBonus.DISARM.value: "{target} has been disarmed!",
    WeaponBonus.SUPPRESS.value: "{target} has been suppressed and may miss future turns!",
    WeaponBonus.BLEED.value: "{target} is bleeding!",
    WeaponBonus.PARALYZED.value: "{target} has been paralyzed!",
    WeaponBonus.MOTIVATION.value: "{attacker} feels motivated!",
}

TOXIN_MESSAGES = {
    Debuff.WITHER: "{target} is withered",
    Debuff.SLOW: "{target} is slowed",
    Debuff.WEAKEN: "{target} is weakened",
    Debuff.CRIPPLE: "{target} is crippled",
}


def ammo_display_name(ammo: Optional[str]) -> str:
    if not ammo or ammo == "Standard":
        return "standard"
    return ammo


def choose_weapon(fighter: FighterState, rng: random.Random) -> WeaponSlot:
    """
    Pick the slot a fighter acts with.

    Attackers use the lowest non-zero priority (first slot wins ties).
    Defenders draw against cumulative weights. Disarmed slots are
    skipped; with nothing usable the fighter goes unarmed.
    """
    statuses = fighter.statuses
    settings = fighter.settings
    available = [s for s in EQUIPPED_SLOTS if not statuses.is_disarmed(s)]
    if not available:
        return fighter.unarmed_slot()

    if fighter.role == Role.ATTACK:
        best: Optional[WeaponSlot] = None
        for slot in available:
            setting = settings[slot].setting
            if setting != 0 and (best is None or setting < settings[best].setting):
                best = slot
        if best is not None:
            return best
        return _default_attack_slot(fighter)

    weights = [(slot, settings[slot].setting) for slot in available]
    total = sum(weight for _, weight in weights)
    if total <= 0:
        return fighter.unarmed_slot()

    draw = math.ceil(rng.random() * total + 1)
    upper = 1
    for slot, weight in weights:
        if weight == 0:
            continue
        upper += weight
        if draw <= upper:
            return slot
    return [slot for slot, weight in weights if weight != 0][-1]


def _default_attack_slot(fighter: FighterState) -> WeaponSlot:
    """Primary when every priority is 0, unless it can no longer fire."""
    if fighter.statuses.is_disarmed(WeaponSlot.PRIMARY):
        return fighter.unarmed_slot()
    state = fighter.weapon_states.primary
    if state.is_empty and (state.clips_left <= 0 or not fighter.settings.primary.reload):
        return fighter.unarmed_slot()
    return WeaponSlot.PRIMARY


@dataclass
class ActionOutcome:
    """What the fight loop needs to know about an action."""

    slot: WeaponSlot
    home_run: bool = False


@dataclass
class _Attack:
    """Working values of one attack."""

    hit: bool = False
    body_part: BodyPart = ("", 0.0)
    damage: float = 0
    base_hit_chance: float = 0.0
    accuracy_bonus: float = 0.0
    crit_chance: float = 0.0
    max_damage: float = 0.0
    mitigation: float = 0.0
    weapon_multiplier: float = 0.0
    armour_mitigation: float = 0.0
    hit_armour: bool = False
    ammo_multiplier: float = 1.0
    hit_line: Optional[str] = None  # Logged once final damage is known
    bonus_text: str = ""
    lines: List[str] = field(default_factory=list)

    @property
    def is_critical(self) -> bool:
        return self.hit and is_critical_part(self.body_part)


class ActionResolver:
    """
    Resolves actions for one fight.

    Usage:
        resolver = ActionResolver(game_data, rng, collector)
        outcome = resolver.act(attacker, defender, turn, log)
    """

    def __init__(
        self,
        game_data: "GameData",
        rng: random.Random,
        collector: Optional[BattleStatsCollector] = None,
    ):
        self.game_data = game_data
        self.rng = rng
        self.collector = collector
        self.attributes = AttributeResolver(game_data)
        self.coverage = game_data.get_armour_coverage()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def act(self, x: FighterState, y: FighterState, turn: int, log: List[str]) -> ActionOutcome:
        """
        Run one action of ``x`` against ``y``.

        Args:
            x: Acting fighter.
            y: Target.
            turn: Current round (1-based).
            log: Fight log to append to.

        Returns:
            ActionOutcome with the slot used and whether Home Run fired.
        """
        x_slot = choose_weapon(x, self.rng)
        y_slot = choose_weapon(y, self.rng)
        if self.collector is not None:
            self.collector.record_weapon_choice(x, x_slot.value)

        attrs = self.attributes.resolve(x, y, x_slot, y_slot, turn)
        x.temps.decrement()

        state = x.weapon_states.ammo(x_slot)
        if state is not None and state.is_empty and x.settings[x_slot].reload:
            self._reload(x, y, x_slot, turn, log)
            return ActionOutcome(x_slot)

        return self._attack(x, y, x_slot, y_slot, attrs, turn, log)

    # ------------------------------------------------------------------
    # Reload
    # ------------------------------------------------------------------

    def _reload(self, x: FighterState, y: FighterState, slot: WeaponSlot, turn: int, log: List[str]) -> None:
        weapon = x.weapon(slot)
        if weapon.name in INVALID_WEAPON_NAMES:
            x.settings[slot].setting = 0
            return

        log.append(f"{x.name} reloaded their {weapon.name}")
        reload_weapon(x.weapon_states.ammo(slot))
        if self.collector is not None:
            self.collector.record_reload(x, slot.value)

        self._cauterize(y, log)
        self._tick_dots(x, y, log)
        x.last_used_turn[slot] = turn

    # ------------------------------------------------------------------
    # Attack
    # ------------------------------------------------------------------

    def _attack(
        self,
        x: FighterState,
        y: FighterState,
        slot: WeaponSlot,
        y_slot: WeaponSlot,
        attrs: ResolvedAttributes,
        turn: int,
        log: List[str],
    ) -> ActionOutcome:
        weapon = x.weapon(slot)
        ctx = DamageContext(
            attacker=x, target=y, weapon=weapon, slot=slot,
            target_slot=y_slot, turn=turn, rng=self.rng,
        )

        if apply_before_turn_bonuses(weapon, ctx):
            log.append(f"{x.name} is winding up their {weapon.name}")
            return ActionOutcome(slot)

        attack = _Attack(accuracy_bonus=attrs.x_bonus.accuracy, crit_chance=attrs.x_bonus.crit)
        if weapon.category != "Non-Damaging":
            self._roll_damage(x, y, slot, weapon, attrs, ctx, attack)

        if slot == WeaponSlot.PRIMARY:
            self._primary(x, y, weapon, attrs, ctx, attack, log)
        elif slot == WeaponSlot.SECONDARY:
            self._secondary(x, y, weapon, ctx, attack, log)
        elif slot == WeaponSlot.MELEE:
            self._melee(x, y, weapon, ctx, attack, log)
        elif slot == WeaponSlot.TEMPORARY:
            if not self._temporary(x, y, weapon, ctx, attack, log):
                return ActionOutcome(slot)
        else:
            self._unarmed(x, y, slot, weapon, ctx, attack, log)

        self._land_hit(x, y, slot, weapon, ctx, attack, log)

        if WeaponBonus.EXECUTE.value in ctx.procs:
            log.append(f"{x.name} executed {y.name}!")
            y.life = 0

        if attack.damage > 0:
            self._post_damage(x, y, slot, weapon, attrs, ctx, attack, log)

        outcome = ActionOutcome(slot, home_run=WeaponBonus.HOME_RUN.value in ctx.procs)
        if y.life <= 0:
            return outcome

        self._cauterize(y, log)
        self._tick_dots(x, y, log)
        self._update_combo(x, weapon, attack)
        x.last_used_turn[slot] = turn
        return outcome

    def _roll_damage(
        self,
        x: FighterState,
        y: FighterState,
        slot: WeaponSlot,
        weapon: Weapon,
        attrs: ResolvedAttributes,
        ctx: DamageContext,
        attack: _Attack,
    ) -> None:
        """Hit roll, body part, armour and raw damage of an attack."""
        penetration = 1.0
        if weapon.ammo == "TR":
            attack.accuracy_bonus += 10
        elif weapon.ammo == "PI":
            penetration = 2.0
        elif weapon.ammo == "HP":
            penetration = 1 / 1.5
            attack.ammo_multiplier = 1.5
        elif weapon.ammo == "IN":
            attack.ammo_multiplier = 1.4

        attack.base_hit_chance = hit_chance(attrs.x_stats.speed, attrs.y_stats.dexterity)
        chance = apply_accuracy(attack.base_hit_chance, weapon.accuracy, attack.accuracy_bonus)
        chance = apply_hit_chance_bonuses(chance, weapon, ctx)
        attack.hit = hit_or_miss(self.rng, chance)

        if not attack.hit:
            self._record_attack(x, attack)
            return

        if slot == WeaponSlot.TEMPORARY and weapon.name not in AIMED_THROWABLES:
            attack.body_part = CHEST
            self._set_body_part(ctx, attack.body_part)
        else:
            attack.body_part = self._select_body_part(x, weapon, ctx, attack.crit_chance)
        self._record_attack(x, attack)

        base_armour = armour_mitigation(self.rng, attack.body_part[0], y.armour, self.coverage)
        attack.hit_armour = base_armour > 0
        attack.armour_mitigation = apply_armour_bonuses(base_armour, weapon, ctx) / penetration

        attack.max_damage = max_damage(attrs.x_stats.strength)
        attack.mitigation = damage_mitigation(attrs.y_stats.defense, attrs.x_stats.strength)
        attack.weapon_multiplier = weapon.damage / 10
        damage_variance = variance(self.rng)

        damage_bonus = apply_damage_bonus_bonuses(attrs.x_bonus.damage, weapon, ctx)
        damage = raw_damage(
            attack.body_part[1],
            attack.max_damage,
            attack.mitigation,
            attack.weapon_multiplier,
            damage_variance,
            damage_bonus,
            attack.ammo_multiplier,
        )
        damage = apply_damage_bonuses(damage, weapon, ctx)
        attack.damage = damage if math.isfinite(damage) else 0

    def _select_body_part(
        self, x: FighterState, weapon: Weapon, ctx: DamageContext, crit_chance: float
    ) -> BodyPart:
        """Pick the body part, re-rolling if a bonus changed the crit chance."""
        neck = x.perks.education.neckdamage
        body_part = select_body_part(self.rng, crit_chance, neck)
        self._set_body_part(ctx, body_part)
        new_chance, multiplier = apply_crit_bonuses(crit_chance, body_part[1], weapon, ctx)

        if new_chance != crit_chance:
            body_part = select_body_part(self.rng, new_chance, neck)
            self._set_body_part(ctx, body_part)
            _, multiplier = apply_crit_bonuses(new_chance, body_part[1], weapon, ctx)

        if is_critical_part(body_part):
            body_part = (body_part[0], multiplier)
        return body_part

    @staticmethod
    def _set_body_part(ctx: DamageContext, body_part: BodyPart) -> None:
        ctx.body_part = body_part[0]
        ctx.is_critical = is_critical_part(body_part)

    def _record_attack(self, x: FighterState, attack: _Attack) -> None:
        if self.collector is not None:
            self.collector.record_attack(x, attack.hit, attack.is_critical)

    # ------------------------------------------------------------------
    # Slot handling
    # ------------------------------------------------------------------

    def _primary(
        self,
        x: FighterState,
        y: FighterState,
        weapon: Weapon,
        attrs: ResolvedAttributes,
        ctx: DamageContext,
        attack: _Attack,
        log: List[str],
    ) -> None:
        state = x.weapon_states.primary
        verb = "fired"

        spray = weapon.legacy_bonus("Spray")
        if spray is not None and state.is_full and proc(self.rng, spray.proc):
            attack.damage *= 2
            rounds = state.max_ammo
            verb = "sprayed"
        else:
            rounds = rounds_fired(self.rng, state)

        if attack.hit and verb == "fired":
            rounds = self._primary_bonus(x, y, weapon, attrs, ctx, attack, rounds, log)

        self._ammo_line(x, y, weapon, attack, verb, rounds, ctx, log)
        self._spend(x, WeaponSlot.PRIMARY, weapon, ctx, rounds, log)

    def _primary_bonus(
        self,
        x: FighterState,
        y: FighterState,
        weapon: Weapon,
        attrs: ResolvedAttributes,
        ctx: DamageContext,
        attack: _Attack,
        rounds: int,
        log: List[str],
    ) -> int:
        """Demoralize, Freeze and Blindfire. Returns rounds fired."""
        bonus = weapon.bonus
        if bonus is None:
            return rounds

        if bonus.name == "Demoralize":
            if y.debuffs.can_apply(Debuff.DEMORALIZE) and proc(self.rng, bonus.proc):
                y.debuffs.apply(Debuff.DEMORALIZE)
                log.append(f"{y.name} has been Demoralized.")
        elif bonus.name == "Freeze":
            if y.debuffs.can_apply(Debuff.FREEZE) and proc(self.rng, bonus.proc):
                y.debuffs.apply(Debuff.FREEZE)
                log.append(f"{y.name} has been Frozen.")
        elif bonus.name == "Blindfire":
            state = x.weapon_states.primary
            if state.uses_ammo and state.ammo_left - rounds != 0 and proc(self.rng, bonus.proc):
                return self._blindfire(x, y, weapon, attrs, attack, rounds, log)
        return rounds

    def _blindfire(
        self,
        x: FighterState,
        y: FighterState,
        weapon: Weapon,
        attrs: ResolvedAttributes,
        attack: _Attack,
        rounds: int,
        log: List[str],
    ) -> int:
        """Extra volleys at falling accuracy until a kill or an empty clip."""
        state = x.weapon_states.primary
        total_damage = attack.damage
        total_rounds = rounds
        accuracy = attack.accuracy_bonus
        ammo = ammo_display_name(weapon.ammo)

        for _ in range(BLINDFIRE_VOLLEYS):
            accuracy -= BLINDFIRE_ACCURACY_STEP
            chance = apply_accuracy(attack.base_hit_chance, weapon.accuracy, accuracy)
            hit = hit_or_miss(self.rng, chance)

            volley_damage = 0
            body_part = ("", 0.0)
            if hit:
                body_part = select_body_part(self.rng, attack.crit_chance, x.perks.education.neckdamage)
                volley_damage = final_damage(
                    body_part[1],
                    attack.max_damage,
                    attack.mitigation,
                    attack.weapon_multiplier,
                    variance(self.rng),
                    attrs.x_bonus.damage,
                    attack.ammo_multiplier,
                )
            if self.collector is not None:
                self.collector.record_attack(x, hit, hit and is_critical_part(body_part))

            volley_rounds = rounds_fired(self.rng, state)
            if total_rounds + volley_rounds > state.ammo_left:
                volley_rounds = state.ammo_left - total_rounds
                if volley_rounds <= 0:
                    break

            if hit:
                log.append(
                    f"{x.name} fired {volley_rounds} {ammo} rounds of their {weapon.name} "
                    f"hitting {y.name} in the {body_part[0]} for {volley_damage}"
                )
            else:
                log.append(
                    f"{x.name} fired {volley_rounds} {ammo} rounds of their {weapon.name} missing {y.name}"
                )

            total_damage += volley_damage
            total_rounds += volley_rounds
            if total_damage >= y.life or total_rounds >= state.ammo_left:
                break

        attack.damage = total_damage
        return total_rounds

    def _secondary(
        self,
        x: FighterState,
        y: FighterState,
        weapon: Weapon,
        ctx: DamageContext,
        attack: _Attack,
        log: List[str],
    ) -> None:
        rounds = rounds_fired(self.rng, x.weapon_states.secondary)

        if attack.hit and weapon.bonus is not None:
            if weapon.bonus.name == "Burn" and proc(self.rng, weapon.bonus.proc):
                if x.dots.apply(DotChannel.BURN, attack.damage):
                    log.append(f"{y.name} is set alight")
            elif weapon.bonus.name == "Poison" and proc(self.rng, weapon.bonus.proc):
                if x.dots.apply(DotChannel.POISON, attack.damage):
                    log.append(f"{y.name} is poisoned")

        self._ammo_line(x, y, weapon, attack, "fired", rounds, ctx, log)
        self._spend(x, WeaponSlot.SECONDARY, weapon, ctx, rounds, log)

    def _melee(
        self,
        x: FighterState,
        y: FighterState,
        weapon: Weapon,
        ctx: DamageContext,
        attack: _Attack,
        log: List[str],
    ) -> None:
        melee_state = x.weapon_states.melee
        temporary_state = x.weapon_states.temporary
        if (
            weapon.legacy_bonus("Storage") is not None
            and not melee_state.storage_used
            and x.settings.temporary.setting == 0
            and temporary_state.initial_setting != 0
        ):
            log.append(
                f"{x.name} withdrew a {x.weapon(WeaponSlot.TEMPORARY).name} from their {weapon.name}"
            )
            x.settings.temporary.setting = temporary_state.initial_setting
            melee_state.storage_used = True
            attack.hit = False
            attack.damage = 0
            return

        if not attack.hit:
            log.append(f"{x.name} missed {y.name} with their {weapon.name}")
            return

        attack.hit_line = f"{x.name} hit {y.name} with their {weapon.name} in the {attack.body_part[0]}"
        attack.bonus_text = bonus_suffix(describe_triggered_bonuses(weapon, ctx))

        bonus = weapon.bonus
        if bonus is None:
            return
        if bonus.name == "Toxin" and proc(self.rng, bonus.proc):
            options = [d for d in TOXIN_DEBUFFS if y.debuffs.can_apply(d)]
            if options:
                debuff = options[math.floor(self.rng.random() * len(options))]
                y.debuffs.apply(debuff)
                log.append(TOXIN_MESSAGES[debuff].format(target=y.name))
        elif bonus.name == "Lacerate" and proc(self.rng, bonus.proc):
            if x.dots.apply(DotChannel.LACERATION, attack.damage):
                log.append(f"{y.name} is lacerated")

    def _temporary(
        self,
        x: FighterState,
        y: FighterState,
        weapon: Weapon,
        ctx: DamageContext,
        attack: _Attack,
        log: List[str],
    ) -> bool:
        """
        Use the temporary item.

        Returns:
            True if the item goes on to deal damage.
        """
        name = weapon.name
        injection = INJECTIONS.get(name)

        if injection is not None:
            if name == "Serotonin":
                heal = min(int(x.max_life * SEROTONIN_HEAL), max(0, x.max_life - x.life))
                x.life += heal
                log.append(f"{x.name} injected {name} and gained {heal} life")
            else:
                log.append(f"{x.name} injected {name}")
            x.temps.inject(injection.kind)
        elif name in GRENADES:
            kind, fixed = GRENADES[name]
            if self.game_data.can_armour_block(name, y.armour[ArmourSlot.HEAD].type):
                log.append(f"{x.name} used a {name} but it was blocked!")
            else:
                log.append(f"{x.name} used a {name}")
                y.temps.afflict(kind, grenade_duration(self.rng, fixed))
        elif attack.hit:
            attack.hit_line = f"{x.name} threw a {name} hitting {y.name} in the {attack.body_part[0]}"
            attack.bonus_text = bonus_suffix(describe_triggered_bonuses(weapon, ctx))
        else:
            log.append(f"{x.name} threw a {name} missing {y.name}")

        x.settings.temporary.setting = 0

        severe = weapon.legacy_bonus("Severe Burn")
        if severe is not None and proc(self.rng, severe.proc):
            if x.dots.apply(DotChannel.SEVERE_BURN, attack.damage):
                log.append(f"{y.name} is set ablaze")

        return name in DAMAGING_THROWABLES

    def _unarmed(
        self,
        x: FighterState,
        y: FighterState,
        slot: WeaponSlot,
        weapon: Weapon,
        ctx: DamageContext,
        attack: _Attack,
        log: List[str],
    ) -> None:
        part = attack.body_part[0]
        if slot == WeaponSlot.KICK:
            if not attack.hit:
                log.append(f"{x.name} kicked missing {y.name}")
                return
            attack.hit_line = f"{x.name} kicked {y.name} in the {part}"
        else:
            if not attack.hit:
                log.append(f"{x.name} used fists missing {y.name}")
                return
            attack.hit_line = f"{x.name} used fists hitting {y.name} in the {part}"
        attack.bonus_text = bonus_suffix(describe_triggered_bonuses(weapon, ctx))

    def _ammo_line(
        self,
        x: FighterState,
        y: FighterState,
        weapon: Weapon,
        attack: _Attack,
        verb: str,
        rounds: int,
        ctx: DamageContext,
        log: List[str],
    ) -> None:
        prefix = f"{x.name} {verb} {rounds} {ammo_display_name(weapon.ammo)} rounds of their {weapon.name}"
        if attack.hit:
            attack.hit_line = f"{prefix} hitting {y.name} in the {attack.body_part[0]}"
            attack.bonus_text = bonus_suffix(describe_triggered_bonuses(weapon, ctx))
        else:
            log.append(f"{prefix} missing {y.name}")

    def _spend(
        self,
        x: FighterState,
        slot: WeaponSlot,
        weapon: Weapon,
        ctx: DamageContext,
        rounds: int,
        log: List[str],
    ) -> None:
        state = x.weapon_states.ammo(slot)
        if state is None or not state.uses_ammo:
            return

        consumed = apply_ammo_bonuses(rounds, weapon, ctx)
        if consumed < rounds:
            log.append(f"{x.name}'s weapon conserved {rounds - consumed} rounds [Conserve]")
        if self.collector is not None:
            self.collector.record_ammo(x, slot.value, consumed)
        if spend_ammo(state, consumed, x.settings[slot].reload):
            x.settings[slot].setting = 0

    # ------------------------------------------------------------------
    # Damage application
    # ------------------------------------------------------------------

    def _land_hit(
        self,
        x: FighterState,
        y: FighterState,
        slot: WeaponSlot,
        weapon: Weapon,
        ctx: DamageContext,
        attack: _Attack,
        log: List[str],
    ) -> None:
        """Defensive modifiers, armour, life loss and the hit log line."""
        damage = attack.damage
        if damage > 0:
            damage = self._defend(y, damage, ctx)

        armour_text = ""
        if damage > 0 and attack.hit_armour:
            damage = damage * (1 - attack.armour_mitigation / 100)
            piece = armour_piece_for(attack.body_part[0], y.armour, self.coverage)
            armour_ctx = ArmourContext(slot, y.life, y.max_life, self.rng)
            damage = apply_armour_effects(damage, piece, armour_ctx)
            armour_text = describe_armour_effects(piece, armour_ctx)

        damage = max(0, min(round_half_up(damage), y.life))
        attack.damage = damage
        y.life -= damage

        if attack.hit and self.collector is not None:
            self.collector.record_damage(x, slot.value, damage, attack.is_critical, attack.body_part[0])

        if attack.hit_line is None:
            return
        if WeaponBonus.PARRY.value in ctx.procs and damage == 0:
            log.append(f"{attack.hit_line} but the attack was parried!{attack.bonus_text}")
        else:
            log.append(f"{attack.hit_line} for {damage}{attack.bonus_text}{armour_text}")

    def _defend(self, y: FighterState, damage: float, ctx: DamageContext) -> float:
        """Eviscerate amplification, then the defender's weapon bonuses."""
        damage = y.statuses.amplify_incoming(damage)
        for slot in EQUIPPED_SLOTS:
            if damage <= 0:
                break
            damage = apply_incoming_damage_bonuses(damage, y.weapon(slot), ctx)
        return damage

    def _post_damage(
        self,
        x: FighterState,
        y: FighterState,
        slot: WeaponSlot,
        weapon: Weapon,
        attrs: ResolvedAttributes,
        ctx: DamageContext,
        attack: _Attack,
        log: List[str],
    ) -> None:
        before = list(ctx.procs)
        result = apply_post_damage_bonuses(attack.damage, weapon, ctx)

        for name in ctx.procs:
            if name in before:
                continue
            template = STATUS_ANNOUNCEMENTS.get(name)
            if template is not None:
                log.append(template.format(attacker=x.name, target=y.name))

        if result.healing > 0:
            heal = min(result.healing, x.max_life - x.life)
            if heal > 0:
                x.life += heal
                log.append(f"{x.name} recovered {heal} life from Bloodlust")
        elif result.healing < 0:
            self_damage = min(-result.healing, x.life - 1)
            x.life -= self_damage
            log.append(f"{x.name} took {self_damage} self-damage from Double-edged")

        if result.extra_attacks > 0:
            log.append(f"{x.name} gains {result.extra_attacks} extra attacks from weapon effects")
            for _ in range(result.extra_attacks):
                if y.life <= 0:
                    break
                self._extra_attack(x, y, slot, weapon, attrs, ctx, attack, log)

    def _extra_attack(
        self,
        x: FighterState,
        y: FighterState,
        slot: WeaponSlot,
        weapon: Weapon,
        attrs: ResolvedAttributes,
        ctx: DamageContext,
        attack: _Attack,
        log: List[str],
    ) -> None:
        """A fresh attack with the same weapon; armour uses the plain curve."""
        chance = hit_chance(attrs.x_stats.speed, attrs.y_stats.dexterity)
        chance = apply_accuracy(chance, weapon.accuracy, attack.accuracy_bonus)
        chance = apply_hit_chance_bonuses(chance, weapon, ctx)
        hit = hit_or_miss(self.rng, chance)

        if not hit:
            if self.collector is not None:
                self.collector.record_attack(x, False, False)
            log.append(f"{x.name} extra attack misses {y.name}")
            return

        body_part = select_body_part(self.rng, attrs.x_bonus.crit, x.perks.education.neckdamage)
        critical = is_critical_part(body_part)
        if self.collector is not None:
            self.collector.record_attack(x, True, critical)

        armour = armour_mitigation(self.rng, body_part[0], y.armour, self.coverage)
        damage = round_half_up(
            body_part[1]
            * max_damage(attrs.x_stats.strength)
            * (1 - damage_mitigation(attrs.y_stats.defense, attrs.x_stats.strength) / 100)
            * (weapon.damage / 10)
            * (1 - armour / 100)
            * variance(self.rng)
            * (1 + attrs.x_bonus.damage / 100)
        )

        self._set_body_part(ctx, body_part)
        damage = apply_damage_bonuses(damage, weapon, ctx)
        if not math.isfinite(damage):
            damage = 0
        if damage > 0:
            damage = self._defend(y, damage, ctx)

        damage = max(0, min(int(damage), y.life))
        log.append(f"{x.name} extra attack hits {y.name} in the {body_part[0]} for {damage}")
        if self.collector is not None:
            self.collector.record_damage(x, slot.value, damage, critical, body_part[0])
        y.life -= damage

    # ------------------------------------------------------------------
    # End of action
    # ------------------------------------------------------------------

    def _cauterize(self, y: FighterState, log: List[str]) -> None:
        """Gas Station (5+ stars) target heals 20% of max life on a 1 in 10 draw."""
        if not y.perks.company.at_least("Gas Station", 5):
            return
        if math.floor(self.rng.random() * 10 + 1) != 1:
            return
        heal = min(int(CAUTERIZE_HEAL * y.max_life), y.max_life - y.life)
        y.life += heal
        log.append(f"{y.name} cauterized their wound and recovered {heal} life")

    def _tick_dots(self, x: FighterState, y: FighterState, log: List[str]) -> None:
        for channel, damage in x.dots.tick(y.life, x.perks.company, y.perks.company):
            log.append(f"{DOT_CURVES[channel].label} damaged {y.name} for {damage}")
            y.life -= damage
            if self.collector is not None:
                self.collector.record_dot(x, damage)

    @staticmethod
    def _update_combo(x: FighterState, weapon: Weapon, attack: _Attack) -> None:
        landed = attack.hit and attack.damage > 0
        if weapon.has_bonus(WeaponBonus.FRENZY.value):
            x.combo_counter = x.combo_counter + 1 if landed else 0
        elif weapon.has_bonus(WeaponBonus.FOCUS.value):
            x.combo_counter = 0 if landed else x.combo_counter + 1
