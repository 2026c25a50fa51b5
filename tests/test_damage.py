"""Tests for damage formulas."""

import math
import random

import pytest
from conftest import ScriptedRandom

from tornsim.combat.damage import (
    apply_accuracy,
    damage_mitigation,
    draw_int,
    final_damage,
    hit_chance,
    hit_or_miss,
    is_critical_part,
    max_damage,
    raw_damage,
    round_half_up,
    select_body_part,
    variance,
)


class TestRounding:
    """Game rounding tests."""

    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4

    def test_negative_halves_round_toward_positive(self):
        assert round_half_up(-2.5) == -2

    def test_below_half_rounds_down(self):
        assert round_half_up(2.49) == 2

    def test_draw_int_bounds(self):
        assert draw_int(ScriptedRandom([0.0]), 100) == 1
        assert draw_int(ScriptedRandom([0.999999]), 100) == 100


class TestMaxDamage:
    """Max damage curve tests."""

    def test_zero_strength(self):
        assert max_damage(0) == 0

    def test_negative_strength(self):
        assert max_damage(-50) == 0

    def test_known_value(self):
        # log10(100 / 10) == 1
        assert max_damage(100) == pytest.approx(64)

    def test_increases_with_strength(self):
        assert max_damage(1_000_000) > max_damage(10_000)


class TestMitigation:
    """Defense mitigation tests."""

    def test_parity_is_half(self):
        assert damage_mitigation(1000, 1000) == pytest.approx(50)

    def test_full_mitigation_at_14x(self):
        assert damage_mitigation(14000, 1000) == 100

    def test_none_at_one_32nd(self):
        assert damage_mitigation(1000, 32000) == 0

    def test_zero_strength_is_full_mitigation(self):
        assert damage_mitigation(1000, 0) == 100

    def test_both_zero_is_finite(self):
        assert damage_mitigation(0, 0) == 0


class TestHitChance:
    """Hit chance tests."""

    def test_parity_is_half(self):
        assert hit_chance(1000, 1000) == pytest.approx(50)

    def test_caps(self):
        assert hit_chance(64000, 1000) == 100
        assert hit_chance(1000, 64000) == 0

    def test_zero_dexterity(self):
        assert hit_chance(1000, 0) == 100

    def test_accuracy_above_50_closes_gap(self):
        assert apply_accuracy(80, 100, 0) == pytest.approx(100)

    def test_accuracy_below_50_shrinks_chance(self):
        assert apply_accuracy(40, 0, 0) == pytest.approx(0)

    def test_neutral_accuracy(self):
        assert apply_accuracy(50, 50, 0) == pytest.approx(50)

    def test_bonus_added_to_accuracy(self):
        assert apply_accuracy(60, 45, 5) == pytest.approx(60)

    def test_hit_roll(self):
        assert hit_or_miss(ScriptedRandom([0.0]), 0)
        assert not hit_or_miss(ScriptedRandom([0.9999]), 50)
        assert hit_or_miss(ScriptedRandom([0.9999]), 100)


class TestBodyPart:
    """Body part selection tests."""

    def test_critical_heart(self):
        rng = ScriptedRandom([0.0, 0.05])
        assert select_body_part(rng, 12) == ("heart", 1.0)

    def test_neck_damage_on_throat(self):
        rng = ScriptedRandom([0.0, 0.15])
        name, multiplier = select_body_part(rng, 12, neck_damage=True)
        assert name == "throat"
        assert multiplier == pytest.approx(1.1)

    def test_normal_groin(self):
        rng = ScriptedRandom([0.999, 0.0])
        assert select_body_part(rng, 12) == ("groin", 1 / 1.75)

    def test_normal_chest(self):
        rng = ScriptedRandom([0.999, 0.999])
        name, multiplier = select_body_part(rng, 12)
        assert name == "chest"
        assert not is_critical_part((name, multiplier))

    def test_two_draws_per_selection(self):
        rng = ScriptedRandom([0.999, 0.5])
        select_body_part(rng, 12)
        assert rng.calls == 2


class TestVarianceAndFinalDamage:
    """Variance and damage combination tests."""

    def test_variance_bounds(self):
        rng = random.Random(7)
        for _ in range(500):
            assert 0.95 <= variance(rng) <= 1.05

    def test_final_damage(self):
        assert final_damage(1.0, 100, 50, 2.0, 1.0, 0) == 100

    def test_damage_bonus(self):
        assert final_damage(1.0, 100, 0, 1.0, 1.0, 10) == 110

    def test_ammo_multiplier(self):
        assert final_damage(1.0, 100, 0, 1.0, 1.0, 0, ammo_multiplier=1.5) == 150

    def test_non_finite_is_zero(self):
        assert final_damage(1.0, math.inf, 100, 1.0, 1.0, 0) == 0

    def test_never_negative(self):
        assert final_damage(1.0, 100, 150, 1.0, 1.0, 0) == 0

    def test_raw_damage_is_unrounded(self):
        assert raw_damage(1.0, 100, 0, 1.0, 1.0, 0.6) == pytest.approx(100.6)
        assert final_damage(1.0, 100, 0, 1.0, 1.0, 0.6) == 101

    def test_raw_damage_guards(self):
        assert raw_damage(1.0, math.inf, 100, 1.0, 1.0, 0) == 0
        assert raw_damage(1.0, 100, 150, 1.0, 1.0, 0) == 0
