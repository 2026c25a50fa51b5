"""Armour mitigation for Torn combat.

Resolves which worn piece absorbs a hit on a given body part. Pieces
whose type covers the body part take part in a coverage lottery over
the draw space [1, 10000].
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import random

from .damage import PARTIAL_FREQUENCY, draw_int
from .models import ARMOUR_SLOTS, ArmourPiece, ArmourSlot, CompanyPerks


CoverageTable = Dict[str, Dict[str, float]]

BODY_PART_TO_ARMOUR_SLOT: Dict[str, ArmourSlot] = {
    "head": ArmourSlot.HEAD,
    "throat": ArmourSlot.HEAD,
    "heart": ArmourSlot.BODY,
    "chest": ArmourSlot.BODY,
    "stomach": ArmourSlot.BODY,
    "groin": ArmourSlot.BODY,
    "left arm": ArmourSlot.HANDS,
    "right arm": ArmourSlot.HANDS,
    "left hand": ArmourSlot.HANDS,
    "right hand": ArmourSlot.HANDS,
    "left leg": ArmourSlot.LEGS,
    "right leg": ArmourSlot.LEGS,
    "left foot": ArmourSlot.FEET,
    "right foot": ArmourSlot.FEET,
}


@dataclass
class CoveringPiece:
    """A worn piece that covers the struck body part."""

    slot: ArmourSlot
    armour: float
    coverage: float  # Percent of the body part covered


@dataclass
class ArmourLottery:
    """
    Draw bands for one body part.

    Attributes:
        bands: (inclusive upper draw bound, armour value), ascending.
        fallback: Armour value when the draw is beyond every band.
    """

    bands: List[Tuple[float, float]] = field(default_factory=list)
    fallback: float = 0.0

    def resolve(self, draw: int) -> float:
        """Armour value selected by a draw in [1, 10000]."""
        for upper, armour in self.bands:
            if draw <= upper:
                return armour
        return self.fallback


def covering_pieces(
    body_part: str,
    armour: Dict[ArmourSlot, ArmourPiece],
    coverage: CoverageTable,
) -> List[CoveringPiece]:
    """Pieces with non-zero coverage of a body part, in slot order."""
    part_coverage = coverage.get(body_part, {})
    pieces = []
    for slot in ARMOUR_SLOTS:
        piece = armour.get(slot)
        if piece is None:
            continue
        percent = part_coverage.get(piece.type or "", 0)
        if percent:
            pieces.append(CoveringPiece(slot, piece.armour, percent))
    return pieces


def build_lottery(pieces: List[CoveringPiece]) -> ArmourLottery:
    """
    Build the draw bands for a set of covering pieces.

    With total coverage of at least 100%, pieces are ranked by armour
    value (ties keep slot order). The best piece wins outright if it
    alone covers the part; otherwise the top pieces except the lowest
    get cumulative bands and the lowest piece takes the rest.

    With less than 100% total coverage the pieces get cumulative bands
    in slot order and anything beyond them is unarmoured.
    """
    if not pieces:
        return ArmourLottery()

    total = sum(p.coverage for p in pieces)

    if total < 100:
        return ArmourLottery(bands=_cumulative_bands(pieces), fallback=0.0)

    ranked = sorted(pieces, key=lambda p: -p.armour)
    best = ranked[0]
    if len(ranked) == 1 or best.coverage >= 100:
        return ArmourLottery(bands=[(PARTIAL_FREQUENCY, best.armour)], fallback=best.armour)

    lowest = ranked[-1]
    return ArmourLottery(bands=_cumulative_bands(ranked[:-1]), fallback=lowest.armour)


def armour_mitigation(
    rng: random.Random,
    body_part: str,
    armour: Dict[ArmourSlot, ArmourPiece],
    coverage: CoverageTable,
) -> float:
    """
    Roll the armour value that mitigates a hit.

    Args:
        rng: Random stream.
        body_part: Struck body part.
        armour: Defender's worn armour.
        coverage: body part -> armour type -> coverage percent.

    Returns:
        Mitigation percent (the selected piece's armour value), 0 if
        no piece was hit.
    """
    draw = draw_int(rng, PARTIAL_FREQUENCY)
    pieces = covering_pieces(body_part, armour, coverage)
    if not pieces:
        return 0.0
    return build_lottery(pieces).resolve(draw)


def apply_company_armour(
    armour: Dict[ArmourSlot, ArmourPiece], company: CompanyPerks
) -> Dict[ArmourSlot, ArmourPiece]:
    """
    Copy of worn armour with the wearer's company bonus applied.

    Clothing Store (10 stars) adds 20% armour. Private Security Firm
    (7+ stars) adds 25% when all five pieces belong to one named set.
    """
    resolved = {slot: piece.copy() for slot, piece in armour.items()}

    multiplier = 1.0
    if company.name == "Clothing Store" and company.star == 10:
        multiplier = 1.2
    elif company.at_least("Private Security Firm", 7) and _is_full_set(resolved):
        multiplier = 1.25

    if multiplier != 1.0:
        for piece in resolved.values():
            piece.armour *= multiplier
    return resolved


def armour_piece_for(
    body_part: str,
    armour: Dict[ArmourSlot, ArmourPiece],
    coverage: CoverageTable,
) -> Optional[ArmourPiece]:
    """
    Worn piece whose effects apply to a hit on a body part.

    The piece is the one mapped from the body part, and only counts when
    it covers that body part.
    """
    slot = BODY_PART_TO_ARMOUR_SLOT.get(body_part)
    if slot is None:
        return None
    if all(p.slot != slot for p in covering_pieces(body_part, armour, coverage)):
        return None
    return armour.get(slot)


def _cumulative_bands(pieces: List[CoveringPiece]) -> List[Tuple[float, float]]:
    bands = []
    running = 0.0
    for piece in pieces:
        running += piece.coverage
        bands.append((running * 100, piece.armour))
    return bands


def _is_full_set(armour: Dict[ArmourSlot, ArmourPiece]) -> bool:
    if len(armour) != len(ARMOUR_SLOTS):
        return False
    sets = {piece.set for piece in armour.values()}
    return len(sets) == 1 and "n/a" not in sets
