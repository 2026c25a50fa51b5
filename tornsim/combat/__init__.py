"""Combat simulation module for Torn 1v1 fights.

This module provides a complete fight simulation system including:
- Combatant configuration and per-fight state
- Hit, crit, damage and armour formulas
- Weapon bonus and armour effect registries
- Status effects, DOTs and temporary items
- Monte Carlo win rate simulation
"""

# Combatant model
from .models import (
    ARMOUR_SLOTS,
    EQUIPPED_SLOTS,
    ArmourPiece,
    ArmourSlot,
    BattleStats,
    BonusSpec,
    Combatant,
    CompanyPerks,
    EducationPerks,
    FactionPerks,
    LegacyBonus,
    MeritPerks,
    Perks,
    PropertyPerks,
    Role,
    SlotSetting,
    Weapon,
    WeaponSettings,
    WeaponSlot,
)

# Damage formulas
from .damage import (
    apply_accuracy,
    damage_mitigation,
    final_damage,
    hit_chance,
    max_damage,
    round_half_up,
    select_body_part,
    variance,
)

# Armour
from .armour import armour_mitigation, build_lottery, covering_pieces
from .armour_effects import ArmourEffect, apply_armour_effects, get_armour_processor

# Status effects and DOT
from .status_effects import Debuff, DebuffCounters, Status, StatusEffects
from .dot import DotChannel, DotTracker
from .temp_effects import TempKind, TemporaryEffects

# Weapon state and bonuses
from .weapon_state import AmmoState, WeaponStates, rounds_fired
from .weapon_bonuses import DamageContext, WeaponBonus, get_processor

# Fight
from .fighter import FighterState, build_fighter
from .attributes import AttributeResolver, ResolvedAttributes
from .actions import ActionResolver, choose_weapon
from .stats_collector import AggregatedBattleStats, BattleStatsCollector, SideStats
from .combat_engine import MAX_ROUNDS, CombatEngine, FightOutcome

# Monte Carlo
from .simulation import (
    BattleSummary,
    CombatSimulator,
    DistributionSummary,
    SimulationResult,
    quick_simulate,
)

__all__ = [
    # Combatant model
    "ARMOUR_SLOTS",
    "EQUIPPED_SLOTS",
    "ArmourPiece",
    "ArmourSlot",
    "BattleStats",
    "BonusSpec",
    "Combatant",
    "CompanyPerks",
    "EducationPerks",
    "FactionPerks",
    "LegacyBonus",
    "MeritPerks",
    "Perks",
    "PropertyPerks",
    "Role",
    "SlotSetting",
    "Weapon",
    "WeaponSettings",
    "WeaponSlot",
    # Damage formulas
    "apply_accuracy",
    "damage_mitigation",
    "final_damage",
    "hit_chance",
    "max_damage",
    "round_half_up",
    "select_body_part",
    "variance",
    # Armour
    "armour_mitigation",
    "build_lottery",
    "covering_pieces",
    "ArmourEffect",
    "apply_armour_effects",
    "get_armour_processor",
    # Status effects and DOT
    "Debuff",
    "DebuffCounters",
    "Status",
    "StatusEffects",
    "DotChannel",
    "DotTracker",
    "TempKind",
    "TemporaryEffects",
    # Weapon state and bonuses
    "AmmoState",
    "WeaponStates",
    "rounds_fired",
    "DamageContext",
    "WeaponBonus",
    "get_processor",
    # Fight
    "FighterState",
    "build_fighter",
    "AttributeResolver",
    "ResolvedAttributes",
    "ActionResolver",
    "choose_weapon",
    "AggregatedBattleStats",
    "BattleStatsCollector",
    "SideStats",
    "MAX_ROUNDS",
    "CombatEngine",
    "FightOutcome",
    # Monte Carlo
    "BattleSummary",
    "CombatSimulator",
    "DistributionSummary",
    "SimulationResult",
    "quick_simulate",
]
