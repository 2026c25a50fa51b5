"""Tests for the attribute resolver."""

import pytest
from conftest import make_combatant

from tornsim.combat.attributes import BASE_CRIT_CHANCE, AttributeResolver
from tornsim.combat.fighter import build_fighter
from tornsim.combat.models import (
    BattleStats,
    CompanyPerks,
    EducationPerks,
    MeritPerks,
    Perks,
    Role,
    Weapon,
    WeaponSlot,
)
from tornsim.combat.status_effects import Debuff, Status
from tornsim.combat.temp_effects import TempKind
from tornsim.data.game_data import GameData
from tornsim.data.models import FirstTurnBonus, ModData


MODS = {
    "Scope": ModData(acc_bonus=2, crit_chance=3),
    "Light": ModData(enemy_acc_bonus=-5),
    "Trigger": ModData(turn1=FirstTurnBonus(acc_bonus=5)),
}


def rifle(*mods) -> Weapon:
    return Weapon("AK-47", 55, 50, "Rifle", clipsize=30, rateoffire=(3, 5), mods=list(mods))


def fighters(game_data, hero_kwargs=None, villain_kwargs=None):
    hero = build_fighter(make_combatant("Hero", **(hero_kwargs or {})), game_data)
    villain = build_fighter(make_combatant("Villain", role=Role.DEFEND, **(villain_kwargs or {})), game_data)
    return hero, villain


class TestPerkBonuses:
    """Perk bonus tests."""

    def test_base_crit(self, game_data):
        hero, _ = fighters(game_data)
        bonus = AttributeResolver(game_data).perk_bonuses(hero, WeaponSlot.PRIMARY)
        assert bonus.crit == BASE_CRIT_CHANCE
        assert bonus.accuracy == 0
        assert bonus.damage == 0

    def test_experience_and_merits(self, game_data):
        weapon = Weapon("AK-47", 55, 50, "Rifle", clipsize=30, experience=100)
        hero, _ = fighters(game_data, {
            "weapons": {WeaponSlot.PRIMARY: weapon},
            "perks": Perks(merit=MeritPerks(critrate=10, riflemastery=10)),
        })
        bonus = AttributeResolver(game_data).perk_bonuses(hero, WeaponSlot.PRIMARY)
        assert bonus.accuracy == pytest.approx(2 + 2)
        assert bonus.damage == pytest.approx(10 + 10)
        assert bonus.crit == pytest.approx(17)

    def test_melee_company_and_education(self, game_data):
        hero, _ = fighters(game_data, {
            "perks": Perks(
                education=EducationPerks(meleedamage=True, damage=True),
                company=CompanyPerks("Pub", 3),
            ),
        })
        bonus = AttributeResolver(game_data).perk_bonuses(hero, WeaponSlot.MELEE)
        assert bonus.damage == pytest.approx(1 + 2 + 10)

    def test_temporary_mastery(self, game_data):
        hero, _ = fighters(game_data, {"perks": Perks(merit=MeritPerks(temporarymastery=10))})
        bonus = AttributeResolver(game_data).perk_bonuses(hero, WeaponSlot.TEMPORARY)
        assert bonus.accuracy == pytest.approx(2)
        assert bonus.damage == pytest.approx(10)


class TestResolve:
    """Full attribute resolution tests."""

    def test_passives(self, game_data):
        hero, villain = fighters(game_data, {"passives": BattleStats(strength=100)})
        attrs = AttributeResolver(game_data).resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 1)
        assert attrs.x_stats.strength == pytest.approx(2000)
        assert attrs.y_stats.strength == pytest.approx(1000)

    def test_mods_on_loaded_weapon(self):
        game_data = GameData(mods=MODS)
        hero, villain = fighters(game_data, {"weapons": {WeaponSlot.PRIMARY: rifle("Scope", "Light")}})
        attrs = AttributeResolver(game_data).resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 2)
        assert attrs.x_bonus.accuracy == pytest.approx(2)
        assert attrs.x_bonus.crit == pytest.approx(BASE_CRIT_CHANCE + 3)
        assert attrs.y_bonus.accuracy == pytest.approx(-5)

    def test_first_turn_mod(self):
        game_data = GameData(mods=MODS)
        hero, villain = fighters(game_data, {"weapons": {WeaponSlot.PRIMARY: rifle("Trigger")}})
        resolver = AttributeResolver(game_data)
        first = resolver.resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 1)
        later = resolver.resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 2)
        assert first.x_bonus.accuracy == pytest.approx(5)
        assert later.x_bonus.accuracy == 0

    def test_mods_ignored_on_empty_clip_awaiting_reload(self):
        game_data = GameData(mods=MODS)
        hero, villain = fighters(game_data, {"weapons": {WeaponSlot.PRIMARY: rifle("Scope")}})
        hero.settings.primary.reload = True
        hero.weapon_states.primary.ammo_left = 0
        attrs = AttributeResolver(game_data).resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 2)
        assert attrs.x_bonus.accuracy == 0

    def test_demoralize_penalty(self, game_data):
        hero, villain = fighters(game_data)
        villain.debuffs.apply(Debuff.DEMORALIZE)
        attrs = AttributeResolver(game_data).resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 1)
        assert attrs.y_stats.strength == pytest.approx(900)
        assert attrs.y_stats.dexterity == pytest.approx(900)

    def test_injection(self, game_data):
        hero, villain = fighters(game_data)
        hero.temps.inject(TempKind.TYROSINE)
        attrs = AttributeResolver(game_data).resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 1)
        assert attrs.x_stats.dexterity == pytest.approx(6000)

    def test_flash_grenade(self, game_data):
        hero, villain = fighters(game_data)
        villain.temps.afflict(TempKind.FLASH, 15)
        attrs = AttributeResolver(game_data).resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 1)
        assert attrs.y_stats.speed == pytest.approx(200)

    def test_status_applied_last(self, game_data):
        hero, villain = fighters(game_data)
        hero.statuses.add(Status.WITHER, 5, 3)
        attrs = AttributeResolver(game_data).resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 1)
        assert attrs.x_stats.strength == 750

    def test_adult_novelties_slows_opponent(self, game_data):
        hero, villain = fighters(game_data, {"perks": Perks(company=CompanyPerks("Adult Novelties", 7))})
        attrs = AttributeResolver(game_data).resolve(hero, villain, WeaponSlot.PRIMARY, WeaponSlot.MELEE, 1)
        assert attrs.y_stats.speed == pytest.approx(750)
