"""Temporary item effects.

Injections buff their user; grenades and sprays blind or obscure the
opponent. Both are timed entries in an ordered list owned by the
affected fighter.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from enum import Enum
import math
import random

from .models import BattleStats


class TempKind(str, Enum):
    """Kinds of timed temporary effects."""

    # Injections (self)
    EPINEPHRINE = "epi"
    MELATONIN = "mela"
    SEROTONIN = "sero"
    TYROSINE = "tyro"

    # Speed debuffs (opponent)
    FLASH = "flash"
    SAND = "sand"
    SMOKE = "smoke"

    # Dexterity debuffs (opponent)
    CONCUSSION = "conc"
    PEPPER = "pepper"
    TEAR = "tear"


INJECTION_DURATION = 25
SEROTONIN_HEAL = 0.25


@dataclass(frozen=True)
class Injection:
    kind: TempKind
    stat: str  # BattleStats field
    bonus: float  # Passive percent
    needle_bonus: float  # Extra passive percent with the needle effect perk


INJECTIONS: Dict[str, Injection] = {
    "Epinephrine": Injection(TempKind.EPINEPHRINE, "strength", 500, 50),
    "Melatonin": Injection(TempKind.MELATONIN, "speed", 500, 50),
    "Serotonin": Injection(TempKind.SEROTONIN, "defense", 300, 30),
    "Tyrosine": Injection(TempKind.TYROSINE, "dexterity", 500, 50),
}

INJECTION_BY_KIND: Dict[TempKind, Injection] = {i.kind: i for i in INJECTIONS.values()}

# Grenade name -> (kind, fixed duration or None for 15-19 turns)
GRENADES: Dict[str, Tuple[TempKind, Optional[int]]] = {
    "Concussion Grenade": (TempKind.CONCUSSION, 25),
    "Smoke Grenade": (TempKind.SMOKE, 25),
    "Tear Gas": (TempKind.TEAR, 25),
    "Flash Grenade": (TempKind.FLASH, None),
    "Pepper Spray": (TempKind.PEPPER, None),
    "Sand": (TempKind.SAND, None),
}

# Temporaries that go on to deal damage after their special handling
DAMAGING_THROWABLES = frozenset({
    "Ninja Stars",
    "Throwing Knife",
    "HEG",
    "Grenade",
    "Stick Grenade",
    "Nail Bomb",
    "Fireworks",
    "Molotov Cocktail",
    "Snowball",
    "Trout",
})

# Thrown temporaries that roll a body part like normal weapons
AIMED_THROWABLES = frozenset({"Ninja Stars", "Throwing Knife"})

# kind -> (stage 1 multiplier, stage 2 multiplier)
_SPEED_STAGES: Dict[TempKind, Tuple[float, float]] = {
    TempKind.FLASH: (1 / 5, 1 / 5 * 3 / 5),
    TempKind.SAND: (1 / 5, 1 / 5 * 3 / 5),
    TempKind.SMOKE: (1 / 3, 1 / 3 * 2 / 3),
}
_DEXTERITY_STAGES: Dict[TempKind, Tuple[float, float]] = {
    TempKind.CONCUSSION: (1 / 5, 1 / 5 * 3 / 5),
    TempKind.PEPPER: (1 / 5, 1 / 5 * 3 / 5),
    TempKind.TEAR: (1 / 3, 1 / 3 * 2 / 3),
}


def is_injection(item_name: str) -> bool:
    return any(name in item_name for name in INJECTIONS)


def grenade_duration(rng: random.Random, fixed: Optional[int]) -> int:
    """Fixed duration, or 15-19 turns when none is set."""
    if fixed is not None:
        return fixed
    return math.floor(rng.random() * 5 + 15)


@dataclass
class TempEntry:
    kind: TempKind
    turns: int


class TemporaryEffects:
    """
    Ordered timed entries affecting one fighter.

    Injections are refreshed in place when re-used. Grenade effects
    are appended, so repeated grenades deepen the debuff.
    """

    def __init__(self):
        self.entries: List[TempEntry] = []

    def __len__(self) -> int:
        return len(self.entries)

    def inject(self, kind: TempKind) -> None:
        """Add or refresh an injection."""
        for entry in self.entries:
            if entry.kind == kind:
                entry.turns = INJECTION_DURATION
                return
        self.entries.insert(0, TempEntry(kind, INJECTION_DURATION))

    def afflict(self, kind: TempKind, turns: int) -> None:
        """Add a grenade or spray effect."""
        self.entries.append(TempEntry(kind, turns))

    def decrement(self) -> None:
        """Tick every entry down by one, dropping expired entries."""
        remaining = []
        for entry in self.entries:
            entry.turns -= 1
            if entry.turns > 0:
                remaining.append(entry)
        self.entries = remaining

    def passive_bonuses(self, needle_effect: bool) -> BattleStats:
        """Passive percentage bonuses from active injections."""
        bonuses = BattleStats()
        for entry in self.entries:
            injection = INJECTION_BY_KIND.get(entry.kind)
            if injection is None:
                continue
            amount = injection.bonus + (injection.needle_bonus if needle_effect else 0)
            setattr(bonuses, injection.stat, getattr(bonuses, injection.stat) + amount)
        return bonuses

    def speed_multiplier(self) -> float:
        return self._stage_multiplier(_SPEED_STAGES)

    def dexterity_multiplier(self) -> float:
        return self._stage_multiplier(_DEXTERITY_STAGES)

    def _stage_multiplier(self, stages: Dict[TempKind, Tuple[float, float]]) -> float:
        # The latest first or second application of any kind sets the multiplier
        multiplier = 1.0
        counts: Dict[TempKind, int] = {}
        for entry in self.entries:
            if entry.kind not in stages:
                continue
            counts[entry.kind] = counts.get(entry.kind, 0) + 1
            if counts[entry.kind] <= 2:
                multiplier = stages[entry.kind][counts[entry.kind] - 1]
        return multiplier
