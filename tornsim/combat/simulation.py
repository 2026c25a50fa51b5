"""Monte Carlo Fight Simulation for Torn.

Runs the same matchup many times to estimate win rates, fight length,
remaining life distributions and aggregated battle statistics.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, TYPE_CHECKING
from concurrent.futures import ThreadPoolExecutor
from itertools import islice, repeat
from statistics import NormalDist
import logging
import random
import time

import numpy as np

from .combat_engine import CombatEngine, FightOutcome
from .models import Combatant
from .stats_collector import HERO, VILLAIN, AggregatedBattleStats

if TYPE_CHECKING:
    from ..data.game_data import GameData


logger = logging.getLogger(__name__)

# Fights in flight per worker before their outcomes are folded
PARALLEL_BATCH_PER_WORKER = 64


@dataclass
class DistributionSummary:
    """Summary of a sample of per-fight values."""

    mean: float = 0.0
    std: float = 0.0
    p5: float = 0.0
    p50: float = 0.0
    p95: float = 0.0

    @classmethod
    def from_values(cls, values: Sequence[int]) -> "DistributionSummary":
        if len(values) == 0:
            return cls()
        arr = np.asarray(values, dtype=float)
        p5, p50, p95 = np.percentile(arr, [5, 50, 95])
        return cls(
            mean=float(arr.mean()),
            std=float(arr.std()),
            p5=float(p5),
            p50=float(p50),
            p95=float(p95),
        )

    def to_dict(self) -> Dict[str, float]:
        return {"mean": self.mean, "std": self.std, "p5": self.p5, "p50": self.p50, "p95": self.p95}


@dataclass
class BattleSummary:
    """Short record of one fight, kept when battle logs are requested."""

    battle_number: int
    winner: Optional[str]
    turns: int
    hero_damage_dealt: int
    villain_damage_dealt: int
    hero_final_life: int
    villain_final_life: int
    log: List[str] = field(default_factory=list)


@dataclass
class SimulationResult:
    """
    Result of a Monte Carlo fight simulation.

    Rates are fractions in 0.0 to 1.0; ``*_percent`` properties scale
    them to 0 to 100.
    """

    iterations: int

    # Outcome counts
    hero_wins: int
    villain_wins: int
    stalemates: int

    # Averages
    avg_turns: float
    avg_hero_life: float
    avg_villain_life: float

    # terminal life -> count
    hero_life_distribution: Dict[int, int]
    villain_life_distribution: Dict[int, int]

    # Spread of per-fight values
    hero_life_summary: DistributionSummary
    villain_life_summary: DistributionSummary
    turns_summary: DistributionSummary

    # Confidence interval on the hero win rate (95%)
    hero_win_rate_confidence: Tuple[float, float] = (0.0, 1.0)

    last_fight_log: List[str] = field(default_factory=list)
    battle_stats: AggregatedBattleStats = field(default_factory=AggregatedBattleStats)
    battles: List[BattleSummary] = field(default_factory=list)

    @property
    def hero_win_rate(self) -> float:
        return self.hero_wins / self.iterations if self.iterations else 0.0

    @property
    def villain_win_rate(self) -> float:
        return self.villain_wins / self.iterations if self.iterations else 0.0

    @property
    def stalemate_rate(self) -> float:
        return self.stalemates / self.iterations if self.iterations else 0.0

    @property
    def hero_win_percent(self) -> float:
        return self.hero_win_rate * 100

    @property
    def villain_win_percent(self) -> float:
        return self.villain_win_rate * 100

    @property
    def stalemate_percent(self) -> float:
        return self.stalemate_rate * 100


class CombatSimulator:
    """
    Monte Carlo fight simulator.

    Every trial builds fresh fight state and owns its own random
    stream, so trials can run on worker threads.

    Usage:
        simulator = CombatSimulator(base_seed=7, game_data=game_data)
        result = simulator.simulate(hero, villain, iterations=1000)
        print(f"Hero win rate: {result.hero_win_rate:.1%}")
    """

    def __init__(self, base_seed: Optional[int] = None, game_data: Optional["GameData"] = None):
        """
        Initialize simulator.

        Args:
            base_seed: Base seed for reproducibility (fight i uses base_seed + i).
            game_data: Static game tables; built-in defaults when omitted.
        """
        if game_data is None:
            from ..data.game_data import GameData

            game_data = GameData.empty()

        self.base_seed = base_seed
        self.game_data = game_data
        self.rng = random.Random(base_seed)

    def simulate(
        self,
        hero: Combatant,
        villain: Combatant,
        iterations: int = 1000,
        parallel: bool = False,
        max_workers: int = 4,
        collect_battles: bool = False,
    ) -> SimulationResult:
        """
        Run Monte Carlo simulation.

        Outcomes are folded one at a time, so memory does not grow with
        the number of fights unless ``collect_battles`` is set.

        Args:
            hero: First combatant.
            villain: Second combatant.
            iterations: Number of fights.
            parallel: Whether to run fights on a thread pool.
            max_workers: Max parallel workers.
            collect_battles: Keep a short summary and log of every fight.

        Returns:
            SimulationResult with statistical analysis.

        Raises:
            ValueError: If iterations is less than 1.
        """
        if iterations < 1:
            raise ValueError(f"iterations must be at least 1, got {iterations}")

        seeds = (self._get_iteration_seed(i) for i in range(iterations))
        workers = max_workers if parallel and iterations > 10 else 1
        logger.info(
            "Simulating %d fights of %s vs %s (workers=%d)",
            iterations, hero.name, villain.name, workers,
        )
        started = time.perf_counter()

        folder = _OutcomeFolder(iterations, collect_battles)
        if workers > 1:
            self._run_parallel(hero, villain, seeds, workers, folder)
        else:
            self._run_sequential(hero, villain, seeds, folder)

        result = self._analyze_results(folder)
        logger.info(
            "Finished %d fights in %.3fs: hero %.1f%%, villain %.1f%%, stalemate %.1f%%",
            iterations,
            time.perf_counter() - started,
            result.hero_win_percent,
            result.villain_win_percent,
            result.stalemate_percent,
        )
        return result

    def _run_sequential(
        self,
        hero: Combatant,
        villain: Combatant,
        seeds: Iterator[int],
        folder: "_OutcomeFolder",
    ) -> None:
        """Run fights sequentially."""
        for seed in seeds:
            folder.add(self._run_single(hero, villain, seed))

    def _run_parallel(
        self,
        hero: Combatant,
        villain: Combatant,
        seeds: Iterator[int],
        max_workers: int,
        folder: "_OutcomeFolder",
    ) -> None:
        """Run fights in parallel, folded in trial order one batch at a time."""
        batch_size = max_workers * PARALLEL_BATCH_PER_WORKER

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            while True:
                batch = list(islice(seeds, batch_size))
                if not batch:
                    break
                # map yields in submission order
                for outcome in executor.map(self._run_single, repeat(hero), repeat(villain), batch):
                    folder.add(outcome)

    def _run_single(self, hero: Combatant, villain: Combatant, seed: int) -> FightOutcome:
        engine = CombatEngine(self.game_data, seed=seed)
        return engine.run_fight(hero, villain)

    def _get_iteration_seed(self, iteration: int) -> int:
        """Get deterministic seed for an iteration."""
        if self.base_seed is not None:
            return self.base_seed + iteration
        return self.rng.randint(0, 2**31)

    def _analyze_results(self, folder: "_OutcomeFolder") -> SimulationResult:
        """Build the result from folded outcomes."""
        iterations = folder.count
        hero_wins = folder.hero_wins
        villain_wins = folder.villain_wins

        return SimulationResult(
            iterations=iterations,
            hero_wins=hero_wins,
            villain_wins=villain_wins,
            stalemates=iterations - hero_wins - villain_wins,
            avg_turns=float(folder.turns.mean()),
            avg_hero_life=float(folder.hero_lives.mean()),
            avg_villain_life=float(folder.villain_lives.mean()),
            hero_life_distribution=_histogram(folder.hero_lives),
            villain_life_distribution=_histogram(folder.villain_lives),
            hero_life_summary=DistributionSummary.from_values(folder.hero_lives),
            villain_life_summary=DistributionSummary.from_values(folder.villain_lives),
            turns_summary=DistributionSummary.from_values(folder.turns),
            hero_win_rate_confidence=self._calculate_confidence_interval(hero_wins, iterations),
            last_fight_log=folder.last_log,
            battle_stats=folder.battle_stats,
            battles=folder.battles,
        )

    def _calculate_confidence_interval(
        self, successes: int, n: int, confidence: float = 0.95
    ) -> Tuple[float, float]:
        """Calculate Wilson score confidence interval."""
        if n == 0:
            return (0.0, 1.0)

        z = NormalDist().inv_cdf(1 - (1 - confidence) / 2)
        p = successes / n

        denominator = 1 + z * z / n
        center = (p + z * z / (2 * n)) / denominator

        spread = z * ((p * (1 - p) / n + z * z / (4 * n * n)) ** 0.5) / denominator

        lower = max(0.0, center - spread)
        upper = min(1.0, center + spread)

        return (lower, upper)


class _OutcomeFolder:
    """
    Running totals of a simulation.

    Per fight it keeps three integers (terminal lives and turns) for the
    histograms and percentiles. Logs and battle statistics are folded
    and dropped, except the last log and, on request, battle summaries.
    """

    def __init__(self, iterations: int, collect_battles: bool):
        self.count = 0
        self.hero_wins = 0
        self.villain_wins = 0
        self.hero_lives = np.zeros(iterations, dtype=np.int64)
        self.villain_lives = np.zeros(iterations, dtype=np.int64)
        self.turns = np.zeros(iterations, dtype=np.int64)
        self.battle_stats = AggregatedBattleStats()
        self.collect_battles = collect_battles
        self.battles: List[BattleSummary] = []
        self.last_log: List[str] = []

    def add(self, outcome: FightOutcome) -> None:
        i = self.count
        self.count += 1

        if outcome.winner == HERO:
            self.hero_wins += 1
        elif outcome.winner == VILLAIN:
            self.villain_wins += 1

        self.hero_lives[i] = outcome.hero_life
        self.villain_lives[i] = outcome.villain_life
        self.turns[i] = outcome.turns

        if outcome.stats is not None:
            self.battle_stats.add(outcome.stats)
        if self.collect_battles:
            self.battles.append(_summarize_battle(self.count, outcome))
        self.last_log = outcome.log


def _summarize_battle(number: int, outcome: FightOutcome) -> BattleSummary:
    hero_dealt = villain_dealt = 0
    if outcome.stats is not None:
        hero_dealt = outcome.stats.sides[HERO].total_damage
        villain_dealt = outcome.stats.sides[VILLAIN].total_damage
    return BattleSummary(
        battle_number=number,
        winner=outcome.winner,
        turns=outcome.turns,
        hero_damage_dealt=hero_dealt,
        villain_damage_dealt=villain_dealt,
        hero_final_life=outcome.hero_life,
        villain_final_life=outcome.villain_life,
        log=list(outcome.log),
    )


def _histogram(values: np.ndarray) -> Dict[int, int]:
    """Count of each terminal life value, ascending."""
    if len(values) == 0:
        return {}
    keys, counts = np.unique(values, return_counts=True)
    return {int(k): int(c) for k, c in zip(keys, counts)}


def quick_simulate(
    hero: Combatant,
    villain: Combatant,
    iterations: int = 100,
    game_data: Optional["GameData"] = None,
) -> float:
    """
    Quick simulation helper returning the hero win rate.

    Args:
        hero: First combatant.
        villain: Second combatant.
        iterations: Number of fights.
        game_data: Static game tables.

    Returns:
        Hero win rate (0.0 to 1.0).
    """
    simulator = CombatSimulator(game_data=game_data)
    result = simulator.simulate(hero, villain, iterations=iterations)
    return result.hero_win_rate
