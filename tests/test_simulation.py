"""Tests for Monte Carlo Simulation."""

import gc
import weakref

import pytest
from conftest import make_combatant, settings

from tornsim.combat.models import Role, Weapon, WeaponSlot
from tornsim.combat.simulation import (
    CombatSimulator,
    DistributionSummary,
    SimulationResult,
    quick_simulate,
)


@pytest.fixture
def matchup():
    hero = make_combatant("Hero", attack_settings=settings(primary=1, reload=True))
    hero.weapons[WeaponSlot.PRIMARY] = Weapon("AK-47", 55, 50, "Rifle", clipsize=30, rateoffire=(3, 5))
    villain = make_combatant("Villain", role=Role.DEFEND, defend_settings=settings(melee=100))
    villain.weapons[WeaponSlot.MELEE] = Weapon("Knife", 45, 60, "Piercing")
    return hero, villain


class TestCombatSimulator:
    """CombatSimulator tests."""

    def test_rejects_zero_iterations(self, matchup):
        with pytest.raises(ValueError):
            CombatSimulator(base_seed=1).simulate(*matchup, iterations=0)

    def test_counts_add_up(self, matchup):
        result = CombatSimulator(base_seed=1).simulate(*matchup, iterations=50)
        assert result.iterations == 50
        assert result.hero_wins + result.villain_wins + result.stalemates == 50
        assert sum(result.hero_life_distribution.values()) == 50
        assert sum(result.villain_life_distribution.values()) == 50
        assert result.hero_win_rate + result.villain_win_rate + result.stalemate_rate == pytest.approx(1.0)

    def test_seeded_runs_repeat(self, matchup):
        first = CombatSimulator(base_seed=7).simulate(*matchup, iterations=30)
        second = CombatSimulator(base_seed=7).simulate(*matchup, iterations=30)
        assert first.hero_wins == second.hero_wins
        assert first.hero_life_distribution == second.hero_life_distribution
        assert first.last_fight_log == second.last_fight_log

    def test_parallel_matches_sequential(self, matchup):
        sequential = CombatSimulator(base_seed=3).simulate(*matchup, iterations=40)
        parallel = CombatSimulator(base_seed=3).simulate(*matchup, iterations=40, parallel=True, max_workers=4)
        assert parallel.hero_wins == sequential.hero_wins
        assert parallel.villain_wins == sequential.villain_wins
        assert parallel.avg_turns == sequential.avg_turns
        assert parallel.villain_life_distribution == sequential.villain_life_distribution
        assert parallel.last_fight_log == sequential.last_fight_log
        assert parallel.battle_stats.to_dict() == sequential.battle_stats.to_dict()

    def test_life_distribution_keys_sorted(self, matchup):
        result = CombatSimulator(base_seed=2).simulate(*matchup, iterations=30)
        keys = list(result.hero_life_distribution)
        assert keys == sorted(keys)

    def test_battle_logs(self, matchup):
        result = CombatSimulator(base_seed=4).simulate(*matchup, iterations=12, collect_battles=True)
        assert [b.battle_number for b in result.battles] == list(range(1, 13))
        assert result.battles[-1].log == result.last_fight_log

    def test_no_battle_logs_by_default(self, matchup):
        result = CombatSimulator(base_seed=4).simulate(*matchup, iterations=12)
        assert result.battles == []

    def test_battle_stats_cover_every_fight(self, matchup):
        result = CombatSimulator(base_seed=5).simulate(*matchup, iterations=20)
        assert result.battle_stats.fights == 20
        summary = result.battle_stats.to_dict()["hero"]
        assert summary["hitStats"]["totalAttacks"] >= summary["hitStats"]["hits"]

    @pytest.mark.parametrize("parallel", [False, True])
    def test_outcomes_are_not_retained(self, matchup, monkeypatch, parallel):
        produced = []
        run_single = CombatSimulator._run_single

        def tracked(self, hero, villain, seed):
            outcome = run_single(self, hero, villain, seed)
            produced.append(weakref.ref(outcome))
            return outcome

        monkeypatch.setattr(CombatSimulator, "_run_single", tracked)
        result = CombatSimulator(base_seed=6).simulate(*matchup, iterations=60, parallel=parallel)
        gc.collect()

        assert len(produced) == 60
        assert sum(1 for ref in produced if ref() is not None) <= 1
        assert result.last_fight_log
        assert result.battle_stats.fights == 60

    def test_parallel_batches_keep_trial_order(self, matchup, monkeypatch):
        monkeypatch.setattr("tornsim.combat.simulation.PARALLEL_BATCH_PER_WORKER", 2)
        sequential = CombatSimulator(base_seed=8).simulate(*matchup, iterations=25, collect_battles=True)
        parallel = CombatSimulator(base_seed=8).simulate(
            *matchup, iterations=25, parallel=True, max_workers=3, collect_battles=True
        )
        assert [b.log for b in parallel.battles] == [b.log for b in sequential.battles]
        assert parallel.hero_life_distribution == sequential.hero_life_distribution

    def test_unseeded(self, matchup):
        result = CombatSimulator().simulate(*matchup, iterations=5)
        assert 1 <= result.avg_turns <= 25

    def test_quick_simulate(self, matchup):
        rate = quick_simulate(*matchup, iterations=10)
        assert 0.0 <= rate <= 1.0


class TestUnarmedParity:
    """Evenly matched unarmed fighters."""

    def test_million_stat_fists_split_evenly(self):
        hero = make_combatant("Hero", stats=1_000_000)
        villain = make_combatant("Villain", role=Role.DEFEND, stats=1_000_000)

        result = CombatSimulator(base_seed=100).simulate(hero, villain, iterations=2000)

        assert 0.35 <= result.hero_win_rate <= 0.65
        assert 0.35 <= result.villain_win_rate <= 0.65
        assert result.avg_turns < 15


class TestConfidenceInterval:
    """Wilson score interval tests."""

    def test_half(self):
        low, high = CombatSimulator()._calculate_confidence_interval(50, 100)
        assert low == pytest.approx(0.4038, abs=1e-3)
        assert high == pytest.approx(0.5962, abs=1e-3)

    def test_bounds(self):
        low, high = CombatSimulator()._calculate_confidence_interval(0, 10)
        assert low == 0.0
        assert 0 < high < 1

    def test_empty(self):
        assert CombatSimulator()._calculate_confidence_interval(0, 0) == (0.0, 1.0)

    def test_confidence_level_widens_interval(self):
        simulator = CombatSimulator()
        low_95, high_95 = simulator._calculate_confidence_interval(50, 100)
        low_99, high_99 = simulator._calculate_confidence_interval(50, 100, confidence=0.99)
        assert low_99 < low_95
        assert high_99 > high_95
        assert low_99 == pytest.approx(0.3753, abs=1e-3)


class TestSummaries:
    """Result summary tests."""

    def test_distribution_summary(self):
        summary = DistributionSummary.from_values([1, 2, 3, 4, 5])
        assert summary.mean == pytest.approx(3)
        assert summary.p50 == pytest.approx(3)
        assert summary.p5 < summary.p50 < summary.p95

    def test_empty_summary(self):
        assert DistributionSummary.from_values([]).to_dict() == {
            "mean": 0.0, "std": 0.0, "p5": 0.0, "p50": 0.0, "p95": 0.0,
        }

    def test_percent_properties(self):
        result = SimulationResult(
            iterations=4, hero_wins=1, villain_wins=2, stalemates=1,
            avg_turns=3, avg_hero_life=0, avg_villain_life=0,
            hero_life_distribution={}, villain_life_distribution={},
            hero_life_summary=DistributionSummary(),
            villain_life_summary=DistributionSummary(),
            turns_summary=DistributionSummary(),
        )
        assert result.hero_win_percent == 25
        assert result.villain_win_percent == 50
        assert result.stalemate_percent == 25
