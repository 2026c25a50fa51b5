"""Damage formulas for Torn combat.

Handles the numeric core of an attack:
- Hit chance from the Speed/Dexterity ratio and weapon accuracy
- Critical and body part selection
- Max damage from Strength
- Mitigation from the Defense/Strength ratio
- Damage variance and stochastic rounding

All randomness is drawn through ``rng.random()`` so a fight is fully
reproducible from its random stream.
"""

from typing import List, Tuple
import math
import random


# Log curve scale factors for mitigation
MITIGATION_LOG_14 = 50 / math.log(14)
MITIGATION_LOG_32 = 50 / math.log(32)

# Draw space for hit and armour rolls
PARTIAL_FREQUENCY = 10000

BodyPart = Tuple[str, float]

CHEST: BodyPart = ("chest", 1 / 1.75)

# (upper bound of a 1..100 draw, body part, multiplier)
CRITICAL_BANDS: List[Tuple[int, str, float]] = [
    (11, "heart", 1.0),
    (21, "throat", 1.0),
    (101, "head", 1.0),
]

NORMAL_BANDS: List[Tuple[int, str, float]] = [
    (6, "groin", 1 / 1.75),
    (11, "left arm", 1 / 3.5),
    (16, "right arm", 1 / 3.5),
    (21, "left hand", 1 / 5),
    (26, "right hand", 1 / 5),
    (31, "left foot", 1 / 5),
    (36, "right foot", 1 / 5),
    (46, "left leg", 1 / 3.5),
    (56, "right leg", 1 / 3.5),
    (76, "stomach", 1 / 1.75),
    (101, "chest", 1 / 1.75),
]

JAPANESE_BLADES = ("Katana", "Wakizashi", "Naginata")


def round_half_up(value: float) -> int:
    """Round halves toward positive infinity (game rounding)."""
    return math.floor(value + 0.5)


def draw_int(rng: random.Random, size: int) -> int:
    """Uniform integer in [1, size]."""
    return math.floor(rng.random() * size + 1)


def proc(rng: random.Random, chance_percent: float) -> bool:
    """Roll a percentage proc."""
    return rng.random() < chance_percent / 100


def is_japanese(weapon_name: str) -> bool:
    """Check if a weapon is a Japanese blade."""
    return any(blade in weapon_name for blade in JAPANESE_BLADES)


def max_damage(strength: float) -> float:
    """
    Maximum base damage for an effective Strength.

    Args:
        strength: Effective Strength.

    Returns:
        Max damage before multipliers, 0 for non-positive Strength.
    """
    if strength <= 0:
        return 0.0
    log_value = math.log10(strength / 10)
    return 7 * log_value ** 2 + 27 * log_value + 30


def damage_mitigation(defense: float, strength: float) -> float:
    """
    Percentage of damage mitigated by Defense.

    0% at ratio 1/32 or below, 50% at parity, 100% at 14x or above.
    """
    ratio = _safe_ratio(defense, strength)

    if ratio >= 14:
        return 100.0
    if ratio >= 1:
        return 50 + MITIGATION_LOG_14 * math.log(ratio)
    if ratio > 1 / 32:
        return 50 + MITIGATION_LOG_32 * math.log(ratio)
    return 0.0


def hit_chance(speed: float, dexterity: float) -> float:
    """
    Base hit chance (0-100) from the Speed/Dexterity ratio.

    0% at ratio 1/64 or below, 50% at parity, 100% at 64x or above.
    """
    ratio = _safe_ratio(speed, dexterity)

    if ratio >= 64:
        return 100.0
    if ratio >= 1:
        return 100 - (50 / 7) * (8 * math.sqrt(1 / ratio) - 1)
    if ratio > 1 / 64:
        return (50 / 7) * (8 * math.sqrt(ratio) - 1)
    return 0.0


def apply_accuracy(base_hit_chance: float, display_accuracy: float, bonus: float) -> float:
    """
    Adjust hit chance by weapon accuracy.

    Accuracy above 50 closes the gap to 100%, below 50 shrinks the
    chance toward 0%.
    """
    accuracy = max(0.0, display_accuracy + bonus)
    if base_hit_chance > 50:
        return base_hit_chance + ((accuracy - 50) / 50) * (100 - base_hit_chance)
    return base_hit_chance + ((accuracy - 50) / 50) * base_hit_chance


def hit_or_miss(rng: random.Random, chance: float) -> bool:
    """Roll a hit against a 0-100 hit chance."""
    return draw_int(rng, PARTIAL_FREQUENCY) <= 1 + chance * 100


def select_body_part(
    rng: random.Random, crit_chance: float, neck_damage: bool = False
) -> BodyPart:
    """
    Pick the struck body part.

    A crit roll picks among heart, throat and head at full damage;
    otherwise one of eleven other locations is picked.

    Args:
        rng: Random stream.
        crit_chance: Critical chance in percent.
        neck_damage: Education perk adding 10% on throat crits.

    Returns:
        (body part name, damage multiplier).
    """
    is_critical = draw_int(rng, 1000) <= 1 + crit_chance * 10
    bands = CRITICAL_BANDS if is_critical else NORMAL_BANDS
    roll = draw_int(rng, 100)

    for upper, name, multiplier in bands:
        if roll <= upper:
            if name == "throat" and neck_damage:
                multiplier *= 1.1
            return (name, multiplier)

    return CHEST


def is_critical_part(body_part: BodyPart) -> bool:
    """Critical locations carry a multiplier of at least 1."""
    return body_part[1] >= 1


def variance(rng: random.Random) -> float:
    """Damage variance in [0.95, 1.05] from a resampled normal draw."""
    while True:
        u = 0.0
        v = 0.0
        while u == 0:
            u = rng.random()
        while v == 0:
            v = rng.random()
        num = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        num = (20 * (num / 10.0 + 0.5) - 10 + 100) / 100
        if 0.95 <= num <= 1.05:
            return num


def s_rounding(rng: random.Random, value: float) -> int:
    """Stochastically round to one of the two neighbouring integers."""
    low = math.floor(value)
    high = low + 1
    roll = round_half_up(rng.random() * 1000 * (high - low) + low) / 1000
    return low if roll <= value else high


def raw_damage(
    body_multiplier: float,
    max_dmg: float,
    mitigation: float,
    weapon_multiplier: float,
    damage_variance: float,
    damage_bonus: float,
    ammo_multiplier: float = 1.0,
) -> float:
    """
    Unrounded product of the damage factors.

    Non-finite and negative results are forced to 0.
    """
    raw = (
        body_multiplier
        * max_dmg
        * (1 - mitigation / 100)
        * weapon_multiplier
        * damage_variance
        * (1 + damage_bonus / 100)
        * ammo_multiplier
    )
    if not math.isfinite(raw):
        return 0.0
    return max(0.0, raw)


def final_damage(
    body_multiplier: float,
    max_dmg: float,
    mitigation: float,
    weapon_multiplier: float,
    damage_variance: float,
    damage_bonus: float,
    ammo_multiplier: float = 1.0,
) -> int:
    """Combine the damage factors into an integer hit."""
    return round_half_up(raw_damage(
        body_multiplier,
        max_dmg,
        mitigation,
        weapon_multiplier,
        damage_variance,
        damage_bonus,
        ammo_multiplier,
    ))


def _safe_ratio(numerator: float, denominator: float) -> float:
    """Ratio where a zero denominator maps to the favoured boundary."""
    if denominator <= 0:
        return math.inf if numerator > 0 else 0.0
    return numerator / denominator
