"""
Fight simulation service.
"""

import logging
from typing import Dict, Optional

from ...combat.models import (
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
from ...combat.simulation import CombatSimulator, SimulationResult
from ...data.game_data import GameData
from ..config import settings
from ..schemas.combatant import (
    ArmourSchema,
    BattleStatsSchema,
    CombatantSchema,
    SlotSettingSchema,
    WeaponSchema,
)
from ..schemas.simulation import (
    BattleLogSchema,
    DistributionSummarySchema,
    SimulateRequest,
    SimulationResponse,
)


logger = logging.getLogger(__name__)

_WEAPON_SLOTS = {"primary", "secondary", "melee", "temporary"}
_ARMOUR_SLOTS = {slot.value for slot in ArmourSlot}


class SimulationService:
    """Builds combatants from requests and runs the Monte Carlo simulator."""

    def __init__(self, game_data: GameData):
        self.game_data = game_data

    def simulate(self, request: SimulateRequest) -> SimulationResponse:
        """
        Run a simulation request.

        Args:
            request: Hero, villain and iteration settings.

        Returns:
            Aggregated results with percentage rates.

        Raises:
            ValueError: If a combatant references an unknown slot or
                catalog item, or the iteration count is invalid.
        """
        hero = self.build_combatant(request.hero, Role.ATTACK)
        villain = self.build_combatant(request.villain, Role.DEFEND)

        seed = request.seed if request.seed is not None else settings.SIMULATION_SEED
        parallel = request.iterations >= settings.PARALLEL_THRESHOLD

        simulator = CombatSimulator(base_seed=seed, game_data=self.game_data)
        result = simulator.simulate(
            hero,
            villain,
            iterations=request.iterations,
            parallel=parallel,
            max_workers=settings.MAX_WORKERS,
            collect_battles=request.include_battle_logs,
        )
        logger.info(
            "Simulated %s vs %s: %d fights, hero %.1f%%, avg %.2f turns",
            hero.name, villain.name, result.iterations,
            result.hero_win_percent, result.avg_turns,
        )
        return self._to_response(result, request.include_battle_logs)

    # === Request conversion ===

    def build_combatant(self, schema: CombatantSchema, role: Role) -> Combatant:
        """Convert a request combatant into the engine model."""
        weapons: Dict[WeaponSlot, Weapon] = {}
        for slot_name, weapon in schema.weapons.items():
            slot = self._weapon_slot(slot_name)
            weapons[slot] = self._build_weapon(slot, weapon)

        armour: Dict[ArmourSlot, ArmourPiece] = {}
        for slot_name, piece in schema.armour.items():
            if slot_name not in _ARMOUR_SLOTS:
                raise ValueError(f"Unknown armour slot: {slot_name}")
            slot = ArmourSlot(slot_name)
            armour[slot] = self._build_armour(slot, piece)

        perks = schema.perks
        return Combatant(
            name=schema.name,
            life=schema.life,
            max_life=schema.max_life or 0,
            role=role,
            stats=_battle_stats(schema.battle_stats),
            passives=_battle_stats(schema.passives),
            weapons=weapons,
            armour=armour,
            attack_settings=self._build_settings(schema.attack_settings),
            defend_settings=self._build_settings(schema.defend_settings),
            perks=Perks(
                education=EducationPerks(**perks.education.model_dump()),
                faction=FactionPerks(**perks.faction.model_dump()),
                company=CompanyPerks(**perks.company.model_dump()),
                property=PropertyPerks(**perks.property.model_dump()),
                merit=MeritPerks(**perks.merit.model_dump()),
            ),
        )

    @staticmethod
    def _weapon_slot(slot_name: str) -> WeaponSlot:
        if slot_name not in _WEAPON_SLOTS:
            raise ValueError(f"Unknown weapon slot: {slot_name}")
        return WeaponSlot(slot_name)

    def _build_weapon(self, slot: WeaponSlot, schema: WeaponSchema) -> Weapon:
        if schema.damage is None:
            weapon = self.game_data.find_weapon(slot, schema.name)
            if weapon is None:
                raise ValueError(f"Unknown {slot.value} weapon: {schema.name}")
        else:
            weapon = Weapon(name=schema.name, damage=schema.damage)

        # Request fields override catalog values when given
        if schema.accuracy is not None:
            weapon.accuracy = schema.accuracy
        if schema.category is not None:
            weapon.category = schema.category
        if schema.clipsize is not None:
            weapon.clipsize = schema.clipsize
        if schema.rateoffire is not None:
            weapon.rateoffire = schema.rateoffire
        if schema.bonus is not None:
            weapon.bonus = LegacyBonus(schema.bonus.name, schema.bonus.proc)
        weapon.experience = schema.experience
        weapon.ammo = schema.ammo
        weapon.mods = list(schema.mods)
        weapon.weapon_bonuses = [BonusSpec(b.name, b.value) for b in schema.weapon_bonuses]
        return weapon

    def _build_armour(self, slot: ArmourSlot, schema: ArmourSchema) -> ArmourPiece:
        if schema.armour is None:
            piece = self.game_data.find_armour(slot, schema.type)
            if piece is None:
                raise ValueError(f"Unknown {slot.value} armour: {schema.type}")
        else:
            piece = ArmourPiece(armour=schema.armour, set=schema.set, type=schema.type)
        piece.effects = [BonusSpec(e.name, e.value) for e in schema.effects]
        return piece

    def _build_settings(self, schemas: Dict[str, SlotSettingSchema]) -> WeaponSettings:
        result = WeaponSettings()
        for slot_name, setting in schemas.items():
            slot = self._weapon_slot(slot_name)
            result[slot].setting = setting.setting
            result[slot].reload = setting.reload
        return result

    # === Response conversion ===

    def _to_response(
        self, result: SimulationResult, include_battle_logs: bool
    ) -> SimulationResponse:
        battle_logs: Optional[list] = None
        if include_battle_logs:
            battle_logs = [
                BattleLogSchema(
                    battle_number=b.battle_number,
                    winner=b.winner,
                    turns=b.turns,
                    hero_damage_dealt=b.hero_damage_dealt,
                    villain_damage_dealt=b.villain_damage_dealt,
                    hero_final_life=b.hero_final_life,
                    villain_final_life=b.villain_final_life,
                    log=b.log,
                )
                for b in result.battles
            ]

        return SimulationResponse(
            total_simulations=result.iterations,
            hero_wins=result.hero_wins,
            villain_wins=result.villain_wins,
            stalemates=result.stalemates,
            hero_win_rate=result.hero_win_percent,
            villain_win_rate=result.villain_win_percent,
            stalemate_rate=result.stalemate_percent,
            hero_win_rate_confidence=(
                result.hero_win_rate_confidence[0] * 100,
                result.hero_win_rate_confidence[1] * 100,
            ),
            average_turns=result.avg_turns,
            average_hero_life_remaining=result.avg_hero_life,
            average_villain_life_remaining=result.avg_villain_life,
            last_fight_log=result.last_fight_log,
            hero_life_distribution=result.hero_life_distribution,
            villain_life_distribution=result.villain_life_distribution,
            hero_life_summary=DistributionSummarySchema(**result.hero_life_summary.to_dict()),
            villain_life_summary=DistributionSummarySchema(**result.villain_life_summary.to_dict()),
            turns_summary=DistributionSummarySchema(**result.turns_summary.to_dict()),
            battle_stats=result.battle_stats.to_dict(),
            battle_logs=battle_logs,
        )


def _battle_stats(schema: BattleStatsSchema) -> BattleStats:
    return BattleStats(schema.strength, schema.speed, schema.defense, schema.dexterity)
