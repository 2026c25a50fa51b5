"""Damage over time channels.

A fighter owns four DOT channels that damage their opponent once per
reload-or-attack action. Each channel deals a decaying fraction of the
damage that started it and clears itself on its last tick.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple
from enum import Enum

from .models import CompanyPerks


class DotChannel(str, Enum):
    """DOT channels, in tick order."""

    BURN = "burn"
    POISON = "poison"
    LACERATION = "laceration"
    SEVERE_BURN = "severe_burn"


@dataclass(frozen=True)
class DotCurve:
    """Damage curve of a channel: tick = magnitude * rate * (offset - elapsed)."""

    rate: float
    offset: int
    last_tick: int
    label: str  # Log prefix


DOT_CURVES: Dict[DotChannel, DotCurve] = {
    DotChannel.BURN: DotCurve(0.15 / 5, 6, 5, "Burning"),
    DotChannel.POISON: DotCurve(0.45 / 15, 16, 15, "Poison"),
    DotChannel.LACERATION: DotCurve(0.9 / 9, 10, 9, "Laceration"),
    DotChannel.SEVERE_BURN: DotCurve(0.15 / 5, 10, 9, "Severe burning"),
}


@dataclass
class DotState:
    magnitude: float = 0.0
    elapsed: int = 0


class DotTracker:
    """
    DOT channels owned by one fighter, ticking on their opponent.

    Usage:
        dots = DotTracker()
        dots.apply(DotChannel.BURN, 120)
        for channel, damage in dots.tick(target_life, owner_company, target_company):
            ...
    """

    def __init__(self):
        self.channels: Dict[DotChannel, DotState] = {c: DotState() for c in DotChannel}

    def next_tick(self, channel: DotChannel) -> float:
        """Unrounded damage the channel's next tick would deal."""
        state = self.channels[channel]
        curve = DOT_CURVES[channel]
        return state.magnitude * curve.rate * (curve.offset - state.elapsed)

    def apply(self, channel: DotChannel, damage: float) -> bool:
        """
        Start or overwrite a channel.

        An active channel is only overwritten when the new damage is at
        least its next tick.

        Returns:
            True if the channel was (re)started.
        """
        state = self.channels[channel]
        if state.magnitude > 0 and damage < self.next_tick(channel):
            return False
        state.magnitude = damage
        state.elapsed = 0
        return True

    def tick(
        self,
        target_life: int,
        owner_company: CompanyPerks,
        target_company: CompanyPerks,
    ) -> List[Tuple[DotChannel, int]]:
        """
        Advance every channel by one action.

        Args:
            target_life: Opponent's current life.
            owner_company: Company of the DOT owner.
            target_company: Company of the opponent.

        Returns:
            (channel, damage) for every channel that ticked. Ticks never
            take the opponent below 1 life.
        """
        events = []
        life = target_life

        for channel in DotChannel:
            state = self.channels[channel]
            curve = DOT_CURVES[channel]

            if state.magnitude > 0 and state.elapsed > 0:
                if life > 1:
                    damage = max(0, int(self.next_tick(channel)))
                    if channel == DotChannel.BURN:
                        if target_company.at_least("Gas Station", 7):
                            damage = int(damage / 1.5)
                        if owner_company.name == "Gas Station" and owner_company.star == 10:
                            damage = int(damage * 1.5)
                    damage = min(damage, life - 1)
                    events.append((channel, damage))
                    life -= damage

                # Expires on schedule at 1 life too
                if state.elapsed >= curve.last_tick:
                    state.magnitude = 0.0
                    state.elapsed = 0

            state.elapsed += 1

        return events

    def is_active(self, channel: DotChannel) -> bool:
        return self.channels[channel].magnitude > 0
