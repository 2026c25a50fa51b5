"""Combat Engine for Torn 1v1 fights.

The round loop that drives one fight:
- Fresh fight state for both combatants
- Bleed ticks and status countdown at the start of each round
- Stun/suppress skips and Home Run deflection
- Win, loss and stalemate detection after every round
"""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING
import random

from .actions import ActionResolver, choose_weapon
from .fighter import FighterState, build_fighter
from .models import Combatant, Role, WeaponSlot
from .stats_collector import HERO, VILLAIN, BattleStatsCollector
from .status_effects import Status

if TYPE_CHECKING:
    from ..data.game_data import GameData


MAX_ROUNDS = 25


@dataclass
class FightOutcome:
    """
    Result of a single fight.

    Attributes:
        hero_life: Hero life at the end, never negative.
        villain_life: Villain life at the end, never negative.
        turns: Rounds played (1 to 25).
        log: Human-readable action log.
        winner: ``"hero"``, ``"villain"`` or None for a stalemate.
        stats: Per-side battle statistics of this fight.
    """

    hero_life: int
    villain_life: int
    turns: int
    log: List[str] = field(default_factory=list)
    winner: Optional[str] = None
    stats: Optional[BattleStatsCollector] = None

    @property
    def is_stalemate(self) -> bool:
        return self.winner is None


class CombatEngine:
    """
    Runs one fight between two combatants.

    The attacker-role combatant acts first in every round.

    Usage:
        engine = CombatEngine(game_data, seed=42)
        outcome = engine.run_fight(hero, villain)
        print(outcome.winner, outcome.turns)
    """

    def __init__(
        self,
        game_data: "GameData",
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize combat engine.

        Args:
            game_data: Static game tables.
            seed: Random seed for deterministic fights.
            rng: Explicit random stream; takes precedence over ``seed``.
        """
        self.game_data = game_data
        self.rng = rng if rng is not None else random.Random(seed)

    def run_fight(self, hero: Combatant, villain: Combatant) -> FightOutcome:
        """
        Fight until one side reaches 0 life or the round cap.

        Args:
            hero: First combatant (read only).
            villain: Second combatant (read only).

        Returns:
            FightOutcome of the fight.
        """
        h = build_fighter(hero, self.game_data)
        v = build_fighter(villain, self.game_data)
        collector = BattleStatsCollector(h, v)
        resolver = ActionResolver(self.game_data, self.rng, collector)

        first, second = (v, h) if v.role == Role.ATTACK and h.role != Role.ATTACK else (h, v)

        log: List[str] = []
        winner: Optional[str] = None
        turns = 0

        for turn in range(1, MAX_ROUNDS + 1):
            turns = turn
            self._play_round(resolver, first, second, turn, log)

            if h.life <= 0:
                winner = VILLAIN
                log.append(f"{v.name} won. ")
                break
            if v.life <= 0:
                winner = HERO
                log.append(f"{h.name} won. ")
                break
        else:
            log.append("Stalemate.")

        return FightOutcome(
            hero_life=max(0, h.life),
            villain_life=max(0, v.life),
            turns=turns,
            log=log,
            winner=winner,
            stats=collector,
        )

    def _play_round(
        self,
        resolver: ActionResolver,
        first: FighterState,
        second: FighterState,
        turn: int,
        log: List[str],
    ) -> None:
        for fighter in (first, second):
            self._bleed(fighter, log)
        first.statuses.decrement()
        second.statuses.decrement()

        home_run = False
        if not self._skips(first, log):
            home_run = resolver.act(first, second, turn, log).home_run

        if second.life <= 0 or first.life <= 0:
            return
        if self._skips(second, log):
            return

        if home_run and choose_weapon(second, self.rng) == WeaponSlot.TEMPORARY:
            log.append(f"{second.name}'s temporary weapon attack was deflected by Home Run!")
            second.settings.temporary.setting = 0
            return

        resolver.act(second, first, turn, log)

    @staticmethod
    def _bleed(fighter: FighterState, log: List[str]) -> None:
        damage = fighter.statuses.bleed_damage(fighter.life)
        if damage > 0:
            fighter.life -= damage
            log.append(f"{fighter.name} suffers {damage} bleeding damage")

    def _skips(self, fighter: FighterState, log: List[str]) -> bool:
        if not fighter.statuses.should_skip_turn(self.rng):
            return False
        reason = "stunned" if fighter.statuses.has(Status.STUN) else "suppressed"
        log.append(f"{fighter.name} is {reason} and skips their turn")
        return True
