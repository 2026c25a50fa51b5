"""Battle statistics collection.

Per fight and per side, records damage by weapon slot, hit/crit counts,
body part hits, ammo use, reloads and weapon choices. The simulator
sums fight records into an aggregate across all trials.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .fighter import FighterState


HERO = "hero"
VILLAIN = "villain"

BODY_REGIONS = ("head", "body", "hands", "legs", "feet")


def body_region(body_part: str) -> str:
    """Map a struck body part to a reporting region."""
    part = body_part.lower()
    if part in ("head", "heart", "throat"):
        return "head"
    if part in ("chest", "stomach", "groin"):
        return "body"
    if "arm" in part or "hand" in part:
        return "hands"
    if "leg" in part:
        return "legs"
    if "foot" in part:
        return "feet"
    return "body"


def _zero_regions() -> Dict[str, int]:
    return {region: 0 for region in BODY_REGIONS}


def _add_counts(target: Dict[str, int], source: Dict[str, int]) -> None:
    for key, value in source.items():
        target[key] = target.get(key, 0) + value


@dataclass
class SideStats:
    """Statistics of one side, for one fight or summed over many."""

    weapon_damage: Dict[str, int] = field(default_factory=dict)
    normal_damage: int = 0
    critical_damage: int = 0
    dot_damage: int = 0
    max_single_hit: int = 0
    damaging_hits: int = 0
    total_attacks: int = 0
    hits: int = 0
    criticals: int = 0
    body_part_hits: Dict[str, int] = field(default_factory=_zero_regions)
    body_part_damage: Dict[str, int] = field(default_factory=_zero_regions)
    ammo_consumed: Dict[str, int] = field(default_factory=dict)
    reloads: Dict[str, int] = field(default_factory=dict)
    weapon_choices: Dict[str, int] = field(default_factory=dict)

    @property
    def total_damage(self) -> int:
        return self.normal_damage + self.critical_damage + self.dot_damage

    @property
    def hit_rate(self) -> float:
        """Hits per attack in percent, rounded to 2 decimals."""
        if self.total_attacks == 0:
            return 0.0
        return round(self.hits / self.total_attacks * 100, 2)

    @property
    def crit_rate(self) -> float:
        """Crits per hit in percent, rounded to 2 decimals."""
        if self.hits == 0:
            return 0.0
        return round(self.criticals / self.hits * 100, 2)

    @property
    def most_chosen_weapon(self) -> Optional[str]:
        if not self.weapon_choices:
            return None
        return max(self.weapon_choices.items(), key=lambda item: item[1])[0]

    def merge(self, other: "SideStats") -> None:
        """Add another record into this one."""
        _add_counts(self.weapon_damage, other.weapon_damage)
        self.normal_damage += other.normal_damage
        self.critical_damage += other.critical_damage
        self.dot_damage += other.dot_damage
        self.max_single_hit = max(self.max_single_hit, other.max_single_hit)
        self.damaging_hits += other.damaging_hits
        self.total_attacks += other.total_attacks
        self.hits += other.hits
        self.criticals += other.criticals
        _add_counts(self.body_part_hits, other.body_part_hits)
        _add_counts(self.body_part_damage, other.body_part_damage)
        _add_counts(self.ammo_consumed, other.ammo_consumed)
        _add_counts(self.reloads, other.reloads)
        _add_counts(self.weapon_choices, other.weapon_choices)


class BattleStatsCollector:
    """
    Records the statistics of one fight.

    Usage:
        collector = BattleStatsCollector(hero_state, villain_state)
        collector.record_attack(hero_state, hit=True, critical=False)
    """

    def __init__(self, hero: "FighterState", villain: "FighterState"):
        self._hero = hero
        self._villain = villain
        self.sides: Dict[str, SideStats] = {HERO: SideStats(), VILLAIN: SideStats()}

    def side(self, fighter: "FighterState") -> SideStats:
        return self.sides[HERO if fighter is self._hero else VILLAIN]

    def opponent_side(self, fighter: "FighterState") -> SideStats:
        return self.sides[VILLAIN if fighter is self._hero else HERO]

    def record_weapon_choice(self, fighter: "FighterState", slot: str) -> None:
        choices = self.side(fighter).weapon_choices
        choices[slot] = choices.get(slot, 0) + 1

    def record_attack(self, fighter: "FighterState", hit: bool, critical: bool) -> None:
        stats = self.side(fighter)
        stats.total_attacks += 1
        if hit:
            stats.hits += 1
            if critical:
                stats.criticals += 1

    def record_damage(
        self,
        attacker: "FighterState",
        slot: str,
        damage: int,
        critical: bool,
        body_part: str,
    ) -> None:
        """Record a landed hit for the attacker and the struck region for the defender."""
        stats = self.side(attacker)
        stats.weapon_damage[slot] = stats.weapon_damage.get(slot, 0) + damage
        if critical:
            stats.critical_damage += damage
        else:
            stats.normal_damage += damage
        stats.max_single_hit = max(stats.max_single_hit, damage)
        stats.damaging_hits += 1

        region = body_region(body_part)
        defender = self.opponent_side(attacker)
        defender.body_part_hits[region] += 1
        defender.body_part_damage[region] += damage

    def record_dot(self, owner: "FighterState", damage: int) -> None:
        self.side(owner).dot_damage += damage

    def record_ammo(self, fighter: "FighterState", slot: str, rounds: int) -> None:
        ammo = self.side(fighter).ammo_consumed
        ammo[slot] = ammo.get(slot, 0) + rounds

    def record_reload(self, fighter: "FighterState", slot: str) -> None:
        reloads = self.side(fighter).reloads
        reloads[slot] = reloads.get(slot, 0) + 1


@dataclass
class AggregatedBattleStats:
    """Battle statistics summed over every fight of a simulation."""

    fights: int = 0
    hero: SideStats = field(default_factory=SideStats)
    villain: SideStats = field(default_factory=SideStats)

    def add(self, collector: BattleStatsCollector) -> None:
        self.fights += 1
        self.hero.merge(collector.sides[HERO])
        self.villain.merge(collector.sides[VILLAIN])

    def merge(self, other: "AggregatedBattleStats") -> None:
        self.fights += other.fights
        self.hero.merge(other.hero)
        self.villain.merge(other.villain)

    def summary(self, side: SideStats) -> Dict:
        """Derived metrics of one side."""
        return {
            "totalDamage": side.total_damage,
            "averageDamagePerFight": round(side.total_damage / self.fights, 2) if self.fights else 0.0,
            "averageDamagePerHit": (
                round((side.normal_damage + side.critical_damage) / side.damaging_hits, 2)
                if side.damaging_hits
                else 0.0
            ),
            "hitRate": side.hit_rate,
            "critRate": side.crit_rate,
            "maxSingleHit": side.max_single_hit,
            "mostChosenWeapon": side.most_chosen_weapon,
            "weaponDamage": dict(side.weapon_damage),
            "damageTypes": {
                "normal": side.normal_damage,
                "critical": side.critical_damage,
                "dot": side.dot_damage,
            },
            "hitStats": {
                "totalAttacks": side.total_attacks,
                "hits": side.hits,
                "criticals": side.criticals,
            },
            "bodyPartHits": dict(side.body_part_hits),
            "bodyPartDamage": dict(side.body_part_damage),
            "ammoConsumption": dict(side.ammo_consumed),
            "reloadCount": dict(side.reloads),
            "weaponChoices": dict(side.weapon_choices),
        }

    def to_dict(self) -> Dict:
        return {
            "fights": self.fights,
            "hero": self.summary(self.hero),
            "villain": self.summary(self.villain),
        }
