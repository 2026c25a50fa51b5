"""Tests for armour mitigation."""

import random

import pytest
from conftest import ScriptedRandom

from tornsim.combat.armour import (
    CoveringPiece,
    apply_company_armour,
    armour_mitigation,
    armour_piece_for,
    build_lottery,
    covering_pieces,
)
from tornsim.combat.models import ARMOUR_SLOTS, ArmourPiece, ArmourSlot, CompanyPerks


COVERAGE = {
    "head": {"Assault Helmet": 100, "Leather Helmet": 60},
    "chest": {"Riot Body": 100, "Riot Gloves": 10},
    "left arm": {"Riot Body": 30, "Riot Gloves": 50},
}


class TestArmourMitigation:
    """Armour roll tests."""

    def test_full_head_coverage_is_deterministic(self):
        armour = {ArmourSlot.HEAD: ArmourPiece(armour=500, type="Assault Helmet")}
        rng = random.Random(3)
        for _ in range(200):
            assert armour_mitigation(rng, "head", armour, COVERAGE) == 500

    def test_no_armour(self):
        rng = random.Random(3)
        assert armour_mitigation(rng, "head", {}, COVERAGE) == 0

    def test_uncovered_body_part(self):
        armour = {ArmourSlot.HEAD: ArmourPiece(armour=40, type="Assault Helmet")}
        assert armour_mitigation(random.Random(1), "left foot", armour, COVERAGE) == 0

    def test_always_draws(self):
        rng = ScriptedRandom()
        armour_mitigation(rng, "left foot", {}, COVERAGE)
        assert rng.calls == 1


class TestCoveringPieces:
    """Covering piece tests."""

    def test_slot_order_and_zero_coverage(self):
        armour = {
            ArmourSlot.HANDS: ArmourPiece(armour=30, type="Riot Gloves"),
            ArmourSlot.BODY: ArmourPiece(armour=40, type="Riot Body"),
            ArmourSlot.HEAD: ArmourPiece(armour=50, type="Assault Helmet"),
        }
        pieces = covering_pieces("left arm", armour, COVERAGE)
        assert [p.slot for p in pieces] == [ArmourSlot.BODY, ArmourSlot.HANDS]
        assert [p.coverage for p in pieces] == [30, 50]


class TestLottery:
    """Coverage lottery tests."""

    def test_partial_coverage_bands(self):
        lottery = build_lottery([
            CoveringPiece(ArmourSlot.BODY, 40, 30),
            CoveringPiece(ArmourSlot.HANDS, 30, 50),
        ])
        assert lottery.resolve(1) == 40
        assert lottery.resolve(3000) == 40
        assert lottery.resolve(3001) == 30
        assert lottery.resolve(8000) == 30
        assert lottery.resolve(8001) == 0

    def test_single_full_piece_wins_outright(self):
        lottery = build_lottery([
            CoveringPiece(ArmourSlot.HEAD, 20, 100),
            CoveringPiece(ArmourSlot.BODY, 45, 100),
        ])
        for draw in (1, 5000, 10000):
            assert lottery.resolve(draw) == 45

    def test_overlapping_pieces_rank_by_armour(self):
        lottery = build_lottery([
            CoveringPiece(ArmourSlot.BODY, 40, 60),
            CoveringPiece(ArmourSlot.HANDS, 50, 70),
        ])
        assert lottery.resolve(7000) == 50
        assert lottery.resolve(7001) == 40

    @staticmethod
    def _expected(bands, fallback, draw):
        for upper, armour in bands:
            if draw <= upper:
                return armour
        return fallback

    def test_bands_partition_draw_space(self):
        pieces = [
            CoveringPiece(ArmourSlot.HEAD, 10, 40),
            CoveringPiece(ArmourSlot.BODY, 20, 30),
            CoveringPiece(ArmourSlot.HANDS, 30, 20),
            CoveringPiece(ArmourSlot.LEGS, 40, 50),
        ]
        lottery = build_lottery(pieces)
        bands = [(5000, 40), (7000, 30), (10000, 20)]
        assert lottery.bands == bands
        for draw in range(1, 10001):
            assert lottery.resolve(draw) == self._expected(bands, 10, draw), draw
        for upper, armour in bands:
            assert lottery.resolve(upper) == armour
        assert lottery.resolve(5001) == 30
        assert lottery.resolve(7001) == 20

    def test_lowest_piece_takes_remaining_draws(self):
        pieces = [
            CoveringPiece(ArmourSlot.HEAD, 10, 60),
            CoveringPiece(ArmourSlot.HANDS, 30, 20),
            CoveringPiece(ArmourSlot.LEGS, 40, 30),
        ]
        lottery = build_lottery(pieces)
        bands = [(3000, 40), (5000, 30)]
        assert lottery.bands == bands
        assert lottery.fallback == 10
        for draw in range(1, 10001):
            assert lottery.resolve(draw) == self._expected(bands, 10, draw), draw
        assert lottery.resolve(3000) == 40
        assert lottery.resolve(3001) == 30
        assert lottery.resolve(5000) == 30
        assert lottery.resolve(5001) == 10
        assert lottery.resolve(10000) == 10

    def test_equal_armour_keeps_slot_order(self):
        lottery = build_lottery([
            CoveringPiece(ArmourSlot.BODY, 40, 60),
            CoveringPiece(ArmourSlot.HANDS, 40, 70),
            CoveringPiece(ArmourSlot.LEGS, 10, 10),
        ])
        assert lottery.bands[0] == (6000, 40)

    def test_empty(self):
        assert build_lottery([]).resolve(1) == 0


class TestCompanyArmour:
    """Company armour bonus tests."""

    @staticmethod
    def _full_set(set_name="Riot"):
        return {slot: ArmourPiece(armour=40, set=set_name, type="x") for slot in ARMOUR_SLOTS}

    def test_clothing_store(self):
        armour = {ArmourSlot.HEAD: ArmourPiece(armour=40)}
        resolved = apply_company_armour(armour, CompanyPerks("Clothing Store", 10))
        assert resolved[ArmourSlot.HEAD].armour == pytest.approx(48)
        assert armour[ArmourSlot.HEAD].armour == 40

    def test_security_firm_full_set(self):
        resolved = apply_company_armour(self._full_set(), CompanyPerks("Private Security Firm", 7))
        assert all(p.armour == pytest.approx(50) for p in resolved.values())

    def test_security_firm_mixed_set(self):
        armour = self._full_set()
        armour[ArmourSlot.FEET] = ArmourPiece(armour=40, set="Combat", type="x")
        resolved = apply_company_armour(armour, CompanyPerks("Private Security Firm", 10))
        assert resolved[ArmourSlot.HEAD].armour == 40

    def test_security_firm_no_set(self):
        resolved = apply_company_armour(self._full_set("n/a"), CompanyPerks("Private Security Firm", 10))
        assert resolved[ArmourSlot.HEAD].armour == 40

    def test_piece_for_body_part(self):
        helmet = ArmourPiece(armour=40, type="Assault Helmet")
        assert armour_piece_for("head", {ArmourSlot.HEAD: helmet}, COVERAGE) is helmet
        assert armour_piece_for("left foot", {ArmourSlot.HEAD: helmet}, COVERAGE) is None

    def test_piece_must_cover_body_part(self):
        coverage = {"throat": {"Leather Helmet": 0, "Riot Body": 20}}
        armour = {
            ArmourSlot.HEAD: ArmourPiece(armour=20, type="Leather Helmet"),
            ArmourSlot.BODY: ArmourPiece(armour=40, type="Riot Body"),
        }
        assert armour_piece_for("throat", armour, coverage) is None
        coverage["throat"]["Leather Helmet"] = 10
        assert armour_piece_for("throat", armour, coverage) is armour[ArmourSlot.HEAD]
