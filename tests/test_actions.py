"""Tests for weapon choice and action resolution."""

import random

from conftest import ScriptedRandom, make_combatant, settings

from tornsim.combat.actions import ActionResolver, _Attack, ammo_display_name, choose_weapon
from tornsim.combat.fighter import build_fighter
from tornsim.combat.models import EducationPerks, Perks, Role, Weapon, WeaponSlot
from tornsim.combat.stats_collector import HERO, BattleStatsCollector
from tornsim.combat.status_effects import Status
from tornsim.combat.weapon_bonuses import DamageContext


def rifle() -> Weapon:
    return Weapon("AK-47", 55, 50, "Rifle", clipsize=30, rateoffire=(3, 5))


class TestAttackerChoice:
    """Attacker priority tests."""

    def test_lowest_priority_wins(self, game_data):
        fighter = build_fighter(make_combatant(attack_settings=settings(primary=2, secondary=1)), game_data)
        assert choose_weapon(fighter, ScriptedRandom()) == WeaponSlot.SECONDARY

    def test_zero_priority_skipped(self, game_data):
        fighter = build_fighter(make_combatant(attack_settings=settings(melee=3)), game_data)
        assert choose_weapon(fighter, ScriptedRandom()) == WeaponSlot.MELEE

    def test_first_slot_wins_ties(self, game_data):
        fighter = build_fighter(make_combatant(attack_settings=settings(secondary=1, melee=1)), game_data)
        assert choose_weapon(fighter, ScriptedRandom()) == WeaponSlot.SECONDARY

    def test_all_zero_falls_back_to_primary(self, game_data):
        fighter = build_fighter(make_combatant(), game_data)
        assert choose_weapon(fighter, ScriptedRandom()) == WeaponSlot.PRIMARY

    def test_disarmed_slot_skipped(self, game_data):
        fighter = build_fighter(make_combatant(attack_settings=settings(primary=1, melee=2)), game_data)
        fighter.statuses.add(Status.DISARM_PRIMARY, 3)
        assert choose_weapon(fighter, ScriptedRandom()) == WeaponSlot.MELEE

    def test_disarmed_primary_fallback_goes_unarmed(self, game_data):
        fighter = build_fighter(make_combatant(), game_data)
        fighter.statuses.add(Status.DISARM_PRIMARY, 3)
        assert choose_weapon(fighter, ScriptedRandom()) == WeaponSlot.FISTS

    def test_prefer_kick(self, game_data):
        combatant = make_combatant(perks=Perks(education=EducationPerks(preferkick=True)))
        fighter = build_fighter(combatant, game_data)
        fighter.statuses.add(Status.DISARM_PRIMARY, 3)
        assert choose_weapon(fighter, ScriptedRandom()) == WeaponSlot.KICK

    def test_attacker_draws_nothing(self, game_data):
        fighter = build_fighter(make_combatant(attack_settings=settings(primary=1)), game_data)
        rng = ScriptedRandom()
        choose_weapon(fighter, rng)
        assert rng.calls == 0


class TestDefenderChoice:
    """Defender weighted draw tests."""

    def _defender(self, game_data, **weights):
        combatant = make_combatant("Villain", role=Role.DEFEND, defend_settings=settings(**weights))
        return build_fighter(combatant, game_data)

    def test_low_draw_picks_first_weight(self, game_data):
        fighter = self._defender(game_data, primary=50, secondary=50)
        assert choose_weapon(fighter, ScriptedRandom([0.0])) == WeaponSlot.PRIMARY

    def test_high_draw_picks_second_weight(self, game_data):
        fighter = self._defender(game_data, primary=50, secondary=50)
        assert choose_weapon(fighter, ScriptedRandom([0.6])) == WeaponSlot.SECONDARY

    def test_zero_weight_never_chosen(self, game_data):
        fighter = self._defender(game_data, secondary=0, melee=100)
        rng = random.Random(5)
        for _ in range(50):
            assert choose_weapon(fighter, rng) == WeaponSlot.MELEE

    def test_no_weights_goes_unarmed(self, game_data):
        fighter = self._defender(game_data)
        assert choose_weapon(fighter, ScriptedRandom()) == WeaponSlot.FISTS


class TestActionResolver:
    """Action resolution tests."""

    def _pair(self, game_data, reload=True):
        hero = make_combatant(attack_settings=settings(primary=1, reload=reload))
        hero.weapons[WeaponSlot.PRIMARY] = rifle()
        x = build_fighter(hero, game_data)
        y = build_fighter(make_combatant("Villain", role=Role.DEFEND), game_data)
        return x, y

    def test_reload_consumes_action(self, game_data):
        x, y = self._pair(game_data)
        x.weapon_states.primary.ammo_left = 0
        collector = BattleStatsCollector(x, y)
        log = []
        outcome = ActionResolver(game_data, random.Random(1), collector).act(x, y, 3, log)

        assert outcome.slot == WeaponSlot.PRIMARY
        assert log == ["Hero reloaded their AK-47"]
        assert x.weapon_states.primary.is_full
        assert y.life == 1000
        assert collector.sides[HERO].reloads == {"primary": 1}
        assert x.last_used_turn[WeaponSlot.PRIMARY] == 3

    def test_attack_spends_ammo_and_logs(self, game_data):
        x, y = self._pair(game_data)
        log = []
        ActionResolver(game_data, random.Random(2)).act(x, y, 1, log)

        assert x.weapon_states.primary.ammo_left < 30
        assert log[0].startswith("Hero fired ")
        assert "rounds of their AK-47" in log[0]

    def test_empty_clip_without_reload_disables_slot(self, game_data):
        x, y = self._pair(game_data, reload=False)
        x.weapon_states.primary.ammo_left = 1
        ActionResolver(game_data, random.Random(3)).act(x, y, 1, [])
        assert x.settings.primary.setting == 0

    def test_life_never_negative(self, game_data):
        x, y = self._pair(game_data)
        x.combatant.stats.strength = 1e9
        y.life = 1
        ActionResolver(game_data, random.Random(4)).act(x, y, 1, [])
        assert y.life >= 0

    def test_armour_factor_rounds_with_the_hit(self, game_data):
        x, y = self._pair(game_data)
        weapon = x.weapon(WeaponSlot.PRIMARY)
        ctx = DamageContext(
            attacker=x, target=y, weapon=weapon, slot=WeaponSlot.PRIMARY,
            target_slot=WeaponSlot.FISTS, turn=1, rng=ScriptedRandom(),
        )
        attack = _Attack(
            hit=True, body_part=("chest", 1.0), damage=10.6,
            armour_mitigation=50.0, hit_armour=True, hit_line="Hero hit Villain",
        )
        log = []
        ActionResolver(game_data, ScriptedRandom())._land_hit(
            x, y, WeaponSlot.PRIMARY, weapon, ctx, attack, log
        )

        # 10.6 x 0.5 = 5.3; rounding 10.6 first would give 6
        assert attack.damage == 5
        assert y.life == 995
        assert log == ["Hero hit Villain for 5"]

    def test_ammo_names(self):
        assert ammo_display_name("Standard") == "standard"
        assert ammo_display_name(None) == "standard"
        assert ammo_display_name("HP") == "HP"
