"""Status Effects System for Torn combat.

Handles stacking statuses applied by weapon bonuses, including:
- Stun and suppress (skipped actions)
- Slow, cripple, weaken, wither (multiplicative stat debuffs)
- Motivation (multiplicative stat buff)
- Eviscerate (incoming damage amplification)
- Bleed (damage ticking at the start of each round)
- Disarm (per weapon slot)

Also tracks the flat legacy debuffs (demoralize, freeze, toxin) that
reduce passive percentages.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
from enum import Enum
import random

from .damage import round_half_up
from .models import BattleStats, WeaponSlot


class Status(str, Enum):
    """Stacking statuses."""

    # Crowd control
    STUN = "stun"  # Skips every action
    SUPPRESS = "suppress"  # Skips 25% of actions
    PARALYZED = "paralyzed"
    DISTRACTED = "distracted"

    # Stat modifiers
    SLOW = "slow"  # Speed
    CRIPPLE = "cripple"  # Dexterity
    WEAKEN = "weaken"  # Defense
    WITHER = "wither"  # Strength
    MOTIVATION = "motivation"  # All four stats

    # Damage
    EVISCERATE = "eviscerate"
    BLEED = "bleed"

    # Disarm, one per equipped slot
    DISARM_PRIMARY = "disarm_primary"
    DISARM_SECONDARY = "disarm_secondary"
    DISARM_MELEE = "disarm_melee"
    DISARM_TEMPORARY = "disarm_temporary"


DEBUFF_MULTIPLIER = 0.75
MOTIVATION_MULTIPLIER = 1.1
EVISCERATE_PER_STACK = 0.25
SUPPRESS_SKIP_CHANCE = 0.25
BLEED_DURATION = 9


def disarm_status(slot: WeaponSlot) -> Optional[Status]:
    """Disarm status for an equipped slot (None for unarmed slots)."""
    try:
        return Status("disarm_" + slot.value)
    except ValueError:
        return None


@dataclass
class StatusEntry:
    """An active status."""

    turns: int
    stacks: int = 1
    base_damage: int = 0  # Bleed only


class StatusEffects:
    """
    Active statuses of one fighter.

    Adding a status refreshes its turn counter and adds a stack up to
    the cap. Every round all counters tick down by one and a status is
    removed when its counter reaches 0.

    Usage:
        statuses = StatusEffects()
        if statuses.add(Status.SLOW, 99, max_stacks=3):
            log.append("slowed")
        stats = statuses.apply_to_stats(stats)
    """

    def __init__(self):
        self._entries: Dict[Status, StatusEntry] = {}

    def add(self, status: Status, turns: int, max_stacks: int = 1) -> bool:
        """
        Apply a status.

        Args:
            status: Status to apply.
            turns: Turn counter to (re)set.
            max_stacks: Stack cap.

        Returns:
            True if the status is new or gained a stack.
        """
        current = self._entries.get(status)
        if current is None:
            self._entries[status] = StatusEntry(turns=turns, stacks=1)
            return True

        current.turns = turns
        old_stacks = current.stacks
        current.stacks = min(max_stacks, old_stacks + 1)
        return current.stacks > old_stacks

    def get(self, status: Status) -> Optional[StatusEntry]:
        return self._entries.get(status)

    def stacks(self, status: Status) -> int:
        entry = self._entries.get(status)
        return entry.stacks if entry else 0

    def turns(self, status: Status) -> int:
        entry = self._entries.get(status)
        return entry.turns if entry else 0

    def has(self, status: Status) -> bool:
        return self.turns(status) > 0

    def remove(self, status: Status) -> None:
        self._entries.pop(status, None)

    def decrement(self) -> None:
        """Tick every counter down by one, removing expired statuses."""
        expired = []
        for status, entry in self._entries.items():
            if entry.turns > 0:
                entry.turns -= 1
                if entry.turns <= 0:
                    expired.append(status)
        for status in expired:
            self.remove(status)

    def is_disarmed(self, slot: WeaponSlot) -> bool:
        status = disarm_status(slot)
        return status is not None and self.has(status)

    def should_skip_turn(self, rng: random.Random) -> bool:
        """Stun always skips; suppress skips a quarter of actions."""
        if self.has(Status.STUN):
            return True
        if self.has(Status.SUPPRESS):
            return rng.random() < SUPPRESS_SKIP_CHANCE
        return False

    def apply_to_stats(self, stats: BattleStats) -> BattleStats:
        """Apply stat debuffs and buffs, rounding each modified stat."""
        result = stats.copy()

        slow = self.stacks(Status.SLOW)
        if slow > 0:
            result.speed = round_half_up(result.speed * DEBUFF_MULTIPLIER ** slow)
        cripple = self.stacks(Status.CRIPPLE)
        if cripple > 0:
            result.dexterity = round_half_up(result.dexterity * DEBUFF_MULTIPLIER ** cripple)
        weaken = self.stacks(Status.WEAKEN)
        if weaken > 0:
            result.defense = round_half_up(result.defense * DEBUFF_MULTIPLIER ** weaken)
        wither = self.stacks(Status.WITHER)
        if wither > 0:
            result.strength = round_half_up(result.strength * DEBUFF_MULTIPLIER ** wither)

        motivation = self.stacks(Status.MOTIVATION)
        if motivation > 0:
            multiplier = MOTIVATION_MULTIPLIER ** motivation
            result.strength = round_half_up(result.strength * multiplier)
            result.speed = round_half_up(result.speed * multiplier)
            result.defense = round_half_up(result.defense * multiplier)
            result.dexterity = round_half_up(result.dexterity * multiplier)

        return result

    def amplify_incoming(self, damage: float) -> float:
        """Eviscerate adds 25% incoming damage per stack."""
        stacks = self.stacks(Status.EVISCERATE)
        if stacks > 0:
            return round_half_up(damage * (1 + stacks * EVISCERATE_PER_STACK))
        return damage

    def apply_bleed(self, damage: float) -> bool:
        """Start a bleed based on the damage of the hit that caused it."""
        added = self.add(Status.BLEED, BLEED_DURATION, 1)
        if added:
            self._entries[Status.BLEED].base_damage = round_half_up(damage * 0.45)
        return added

    def bleed_damage(self, current_life: int) -> int:
        """
        Bleed damage for this round, decaying with the remaining turns.

        Never reduces the fighter below 1 life.
        """
        entry = self._entries.get(Status.BLEED)
        if entry is None or entry.turns <= 0 or not entry.base_damage:
            return 0
        damage = round_half_up(entry.base_damage * (entry.turns / BLEED_DURATION))
        return max(0, min(damage, current_life - 1))


class Debuff(str, Enum):
    """Flat legacy debuffs received from weapon built-in bonuses."""

    DEMORALIZE = "demoralize"
    FREEZE = "freeze"
    WITHER = "wither"
    SLOW = "slow"
    WEAKEN = "weaken"
    CRIPPLE = "cripple"


# Maximum applications per fight
DEBUFF_CAPS: Dict[Debuff, int] = {
    Debuff.DEMORALIZE: 5,
    Debuff.FREEZE: 1,
    Debuff.WITHER: 3,
    Debuff.SLOW: 3,
    Debuff.WEAKEN: 3,
    Debuff.CRIPPLE: 3,
}

# Toxin picks among these, in this order
TOXIN_DEBUFFS = (Debuff.WITHER, Debuff.SLOW, Debuff.WEAKEN, Debuff.CRIPPLE)


@dataclass
class DebuffCounters:
    """Counts of legacy debuffs a fighter has received."""

    counts: Dict[Debuff, int] = field(default_factory=lambda: {d: 0 for d in Debuff})

    def can_apply(self, debuff: Debuff) -> bool:
        return self.counts[debuff] < DEBUFF_CAPS[debuff]

    def apply(self, debuff: Debuff) -> bool:
        """Add one application if under the cap."""
        if not self.can_apply(debuff):
            return False
        self.counts[debuff] += 1
        return True

    def passive_penalties(self) -> BattleStats:
        """Passive percentage penalties per stat."""
        c = self.counts
        demoralize = 10 * c[Debuff.DEMORALIZE]
        freeze = 50 * c[Debuff.FREEZE]
        return BattleStats(
            strength=demoralize + 25 * c[Debuff.WITHER],
            speed=demoralize + freeze + 25 * c[Debuff.SLOW],
            defense=demoralize + 25 * c[Debuff.WEAKEN],
            dexterity=demoralize + freeze + 25 * c[Debuff.CRIPPLE],
        )
