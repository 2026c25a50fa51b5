"""Armour Effect System for Torn combat.

Per-piece effects applied to a hit after armour mitigation:
- Impenetrable: reduces damage from primary/secondary weapons
- Impregnable: reduces damage from melee weapons
- Insurmountable: reduces damage while the wearer is at or below 25% life
- Impassable: chance to negate the hit entirely

Effects run in priority order and each is gated by its own trigger.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum
import random

from .damage import round_half_up
from .models import ArmourPiece, WeaponSlot


class ArmourEffect(str, Enum):
    IMPENETRABLE = "Impenetrable"
    IMPREGNABLE = "Impregnable"
    INSURMOUNTABLE = "Insurmountable"
    IMPASSABLE = "Impassable"


UNKNOWN_PRIORITY = 999


@dataclass
class ArmourContext:
    """What an armour effect may inspect."""

    attacker_slot: WeaponSlot
    target_life: int
    target_max_life: int
    rng: random.Random
    triggered: List[str] = field(default_factory=list)


class ArmourEffectProcessor(ABC):
    """Base of every armour effect."""

    name: str = ""
    priority: int = UNKNOWN_PRIORITY
    description: str = ""

    def triggers(self, ctx: ArmourContext) -> bool:
        return True

    @abstractmethod
    def apply(self, damage: float, value: float, ctx: ArmourContext) -> float:
        ...

    def describe(self, value: float) -> str:
        return self.description.format(value=_format(value))


class DamageReduction(ArmourEffectProcessor):
    """Flat percentage reduction when the trigger holds."""

    def apply(self, damage, value, ctx):
        if self.name not in ctx.triggered:
            ctx.triggered.append(self.name)
        return round_half_up(damage * (1 - value / 100))


class Impenetrable(DamageReduction):
    name = ArmourEffect.IMPENETRABLE.value
    priority = 1
    description = "{value}% less primary/secondary damage"

    def triggers(self, ctx):
        return ctx.attacker_slot in (WeaponSlot.PRIMARY, WeaponSlot.SECONDARY)


class Impregnable(DamageReduction):
    name = ArmourEffect.IMPREGNABLE.value
    priority = 1
    description = "{value}% less melee damage"

    def triggers(self, ctx):
        return ctx.attacker_slot == WeaponSlot.MELEE


class Insurmountable(DamageReduction):
    name = ArmourEffect.INSURMOUNTABLE.value
    priority = 2
    description = "{value}% less damage at low life"

    def triggers(self, ctx):
        return ctx.target_life <= ctx.target_max_life * 0.25


class Impassable(ArmourEffectProcessor):
    name = ArmourEffect.IMPASSABLE.value
    priority = 3
    description = "{value}% chance to block all damage"

    def apply(self, damage, value, ctx):
        if ctx.rng.random() < value / 100:
            if self.name not in ctx.triggered:
                ctx.triggered.append(self.name)
            return 0
        return damage


ARMOUR_EFFECT_PROCESSORS: Dict[ArmourEffect, ArmourEffectProcessor] = {
    ArmourEffect(p.name): p
    for p in (Impenetrable(), Impregnable(), Insurmountable(), Impassable())
}


def get_armour_processor(name: str) -> Optional[ArmourEffectProcessor]:
    try:
        return ARMOUR_EFFECT_PROCESSORS[ArmourEffect(name)]
    except ValueError:
        return None


def _priority(name: str) -> int:
    processor = get_armour_processor(name)
    return processor.priority if processor else UNKNOWN_PRIORITY


def apply_armour_effects(damage: float, piece: Optional[ArmourPiece], ctx: ArmourContext) -> float:
    """
    Apply a piece's effects to a hit.

    Args:
        damage: Damage after armour mitigation.
        piece: Piece mapped from the struck body part.
        ctx: Armour context; ``triggered`` collects effects that fired.

    Returns:
        Reduced damage.
    """
    if piece is None or not piece.effects:
        return damage

    for effect in sorted(piece.effects, key=lambda e: _priority(e.name)):
        processor = get_armour_processor(effect.name)
        if processor is None or not processor.triggers(ctx):
            continue
        damage = processor.apply(damage, effect.value, ctx)
    return damage


def describe_armour_effects(piece: Optional[ArmourPiece], ctx: ArmourContext) -> str:
    """Log suffix such as `` [Armour: Impassable(10%) - 10% chance to block all damage]``."""
    if piece is None or not piece.effects:
        return ""

    fragments = []
    for effect in piece.effects:
        processor = get_armour_processor(effect.name)
        if processor is None or not processor.triggers(ctx):
            continue
        text = f"{effect.name}({_format(effect.value)}%)"
        if effect.name in ctx.triggered:
            text += " - " + processor.describe(effect.value)
        fragments.append(text)

    if not fragments:
        return ""
    return f" [Armour: {', '.join(fragments)}]"


def _format(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
