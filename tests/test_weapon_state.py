"""Tests for per-fight weapon state."""

from conftest import ScriptedRandom, make_combatant

from tornsim.combat.fighter import build_fighter
from tornsim.combat.models import BonusSpec, CompanyPerks, EducationPerks, Perks, Weapon, WeaponSlot
from tornsim.combat.weapon_state import (
    AmmoState,
    build_ammo_state,
    reload_weapon,
    rounds_fired,
    spend_ammo,
)
from tornsim.data.game_data import GameData
from tornsim.data.models import ModData


def rifle(**kwargs) -> Weapon:
    return Weapon("AK-47", 55, 50, "Rifle", clipsize=30, rateoffire=(3, 5), **kwargs)


class TestAmmoState:
    """Clip construction tests."""

    def test_plain_weapon(self, game_data):
        state = build_ammo_state(rifle(), Perks(), game_data)
        assert state.max_ammo == 30
        assert state.ammo_left == 30
        assert state.clips_left == 3
        assert state.rof == (3, 5)

    def test_mods(self):
        game_data = GameData(mods={"Big Mag": ModData(clip_size_multi=0.5, extra_clips=1)})
        state = build_ammo_state(rifle(mods=["Big Mag"]), Perks(), game_data)
        assert state.max_ammo == 45
        assert state.clips_left == 4

    def test_gun_shop_extra_clip(self, game_data):
        perks = Perks(company=CompanyPerks("Gun Shop", 7))
        assert build_ammo_state(rifle(), perks, game_data).clips_left == 4

    def test_ammo_control(self, game_data):
        perks = Perks(education=EducationPerks(ammocontrol2=True))
        state = build_ammo_state(Weapon("Minigun", 60, 40, clipsize=100, rateoffire=(10, 20)), perks, game_data)
        assert state.rof == (8, 16)

    def test_clipless_weapon(self, game_data):
        state = build_ammo_state(Weapon("Fists", 50, 50), Perks(), game_data)
        assert not state.uses_ammo
        assert not state.is_empty

    def test_specialist_forces_single_clip(self, game_data):
        hero = make_combatant()
        hero.weapons[WeaponSlot.PRIMARY] = rifle(weapon_bonuses=[BonusSpec("Specialist", 10)])
        fighter = build_fighter(hero, game_data)
        assert fighter.weapon_states.primary.clips_left == 1


class TestRoundsFired:
    """Rate of fire tests."""

    def test_capped_by_ammo_left(self):
        state = AmmoState(ammo_left=2, max_ammo=30, rof=(3, 3))
        assert rounds_fired(ScriptedRandom(), state) == 2

    def test_fixed_rate(self):
        state = AmmoState(ammo_left=30, max_ammo=30, rof=(3, 3))
        assert rounds_fired(ScriptedRandom(), state) == 3

    def test_within_range(self):
        state = AmmoState(ammo_left=30, max_ammo=30, rof=(3, 5))
        for value in (0.0, 0.3, 0.6, 0.99):
            rounds = rounds_fired(ScriptedRandom([0.5, 0.5, value]), state)
            assert 3 <= rounds <= 5


class TestSpendAmmo:
    """Ammo consumption tests."""

    def test_partial_spend(self):
        state = AmmoState(ammo_left=10, max_ammo=10, clips_left=3)
        assert not spend_ammo(state, 4, reload=True)
        assert state.ammo_left == 6
        assert state.clips_left == 3

    def test_empty_with_reload(self):
        state = AmmoState(ammo_left=4, max_ammo=10, clips_left=3)
        assert not spend_ammo(state, 4, reload=True)
        assert state.is_empty
        assert state.clips_left == 2

    def test_empty_without_reload_disables(self):
        state = AmmoState(ammo_left=4, max_ammo=10, clips_left=3)
        assert spend_ammo(state, 4, reload=False)

    def test_last_clip_disables(self):
        state = AmmoState(ammo_left=4, max_ammo=10, clips_left=1)
        assert spend_ammo(state, 4, reload=True)

    def test_clipless_never_disables(self):
        state = AmmoState()
        assert not spend_ammo(state, 3, reload=False)

    def test_reload(self):
        state = AmmoState(ammo_left=0, max_ammo=10, clips_left=2)
        reload_weapon(state)
        assert state.is_full
