"""Shared fixtures for fight simulator tests."""

import pytest

from tornsim.combat.models import (
    BattleStats,
    Combatant,
    Role,
    SlotSetting,
    WeaponSettings,
)
from tornsim.data.game_data import GameData


class ScriptedRandom:
    """Random stream returning queued values, then a fixed fallback."""

    def __init__(self, values=(), fallback=0.5):
        self.values = list(values)
        self.fallback = fallback
        self.calls = 0

    def random(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.fallback


def make_combatant(
    name: str = "Hero",
    role: Role = Role.ATTACK,
    life: int = 1000,
    stats: float = 1000,
    **kwargs,
) -> Combatant:
    """Create a test combatant with equal stats."""
    return Combatant(
        name=name,
        role=role,
        life=life,
        stats=BattleStats(stats, stats, stats, stats),
        **kwargs,
    )


def settings(primary=0, secondary=0, melee=0, temporary=0, reload=False) -> WeaponSettings:
    """Weapon settings with the same reload flag on every slot."""
    return WeaponSettings(
        SlotSetting(primary, reload),
        SlotSetting(secondary, reload),
        SlotSetting(melee, reload),
        SlotSetting(temporary, reload),
    )


@pytest.fixture
def game_data():
    """Game data with only the built-in defaults."""
    return GameData.empty()


@pytest.fixture
def bundled_game_data():
    """Game data loaded from the bundled tables."""
    return GameData.load()
