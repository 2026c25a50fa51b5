"""Tests for simulator API routes."""

from fastapi.testclient import TestClient
from tornsim.api.main import app

client = TestClient(app)


def _combatant(name, weapon_name="Test Rifle", damage=50):
    return {
        "name": name,
        "life": 2500,
        "battleStats": {"strength": 5000, "speed": 5000, "defense": 5000, "dexterity": 5000},
        "weapons": {
            "primary": {
                "name": weapon_name,
                "damage": damage,
                "accuracy": 55,
                "category": "Rifle",
                "clipsize": 30,
                "rateoffire": [2, 4],
            },
        },
        "attackSettings": {"primary": {"setting": 1, "reload": True}},
        "defendSettings": {"primary": {"setting": 1, "reload": True}},
    }


def _request(**overrides):
    body = {
        "hero": _combatant("Hero"),
        "villain": _combatant("Villain"),
        "iterations": 100,
        "seed": 1,
    }
    body.update(overrides)
    return body


class TestRootEndpoints:
    """Tests for root endpoints."""

    def test_root(self):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["name"] == "Torn Fight Simulator API"

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSimulateRoutes:
    """Tests for the simulation route."""

    def test_simulate(self):
        response = client.post("/api/simulate", json=_request())
        assert response.status_code == 200
        data = response.json()
        assert data["totalSimulations"] == 100
        assert data["heroWins"] + data["villainWins"] + data["stalemates"] == 100
        total_rate = data["heroWinRate"] + data["villainWinRate"] + data["stalemateRate"]
        assert abs(total_rate - 100.0) < 1e-6
        assert 1 <= data["averageTurns"] <= 25
        assert data["lastFightLog"]
        assert "hero" in data["battleStats"]
        assert data["battleLogs"] is None

    def test_confidence_interval_is_percent(self):
        data = client.post("/api/simulate", json=_request()).json()
        lower, upper = data["heroWinRateConfidence"]
        assert 0 <= lower <= upper <= 100
        assert upper - lower < 25

    def test_life_distribution_counts(self):
        data = client.post("/api/simulate", json=_request()).json()
        assert sum(data["heroLifeDistribution"].values()) == 100
        assert sum(data["villainLifeDistribution"].values()) == 100

    def test_same_seed_same_result(self):
        first = client.post("/api/simulate", json=_request()).json()
        second = client.post("/api/simulate", json=_request()).json()
        assert first["heroWins"] == second["heroWins"]
        assert first["lastFightLog"] == second["lastFightLog"]

    def test_battle_logs(self):
        response = client.post("/api/simulate", json=_request(includeBattleLogs=True))
        assert response.status_code == 200
        logs = response.json()["battleLogs"]
        assert len(logs) == 100
        assert logs[0]["battleNumber"] == 1
        assert logs[0]["log"]

    def test_snake_case_request(self):
        body = _request(include_battle_logs=True)
        body["hero"]["attack_settings"] = body["hero"].pop("attackSettings")
        response = client.post("/api/simulate", json=body)
        assert response.status_code == 200
        assert len(response.json()["battleLogs"]) == 100

    def test_too_few_iterations(self):
        response = client.post("/api/simulate", json=_request(iterations=50))
        assert response.status_code == 422

    def test_too_many_mods(self):
        body = _request()
        body["hero"]["weapons"]["primary"]["mods"] = ["ACOG Sight", "Bipod", "Tripod"]
        response = client.post("/api/simulate", json=body)
        assert response.status_code == 422

    def test_unknown_weapon_slot(self):
        body = _request()
        body["hero"]["weapons"]["sidearm"] = body["hero"]["weapons"]["primary"]
        response = client.post("/api/simulate", json=body)
        assert response.status_code == 400
        assert "sidearm" in response.json()["detail"]

    def test_unknown_armour_slot(self):
        body = _request()
        body["villain"]["armour"] = {"tail": {"type": "Riot Body", "armour": 40}}
        response = client.post("/api/simulate", json=body)
        assert response.status_code == 400

    def test_catalog_weapon(self):
        body = _request()
        body["hero"]["weapons"]["primary"] = {"name": "AK-47"}
        body["villain"]["armour"] = {"head": {"type": "Riot Helmet"}}
        response = client.post("/api/simulate", json=body)
        assert response.status_code == 200

    def test_unknown_catalog_weapon(self):
        body = _request()
        body["hero"]["weapons"]["primary"] = {"name": "Laser Rifle"}
        response = client.post("/api/simulate", json=body)
        assert response.status_code == 400
        assert "Laser Rifle" in response.json()["detail"]


class TestDataRoutes:
    """Tests for static data routes."""

    def test_get_mods(self):
        response = client.get("/api/data/mods")
        assert response.status_code == 200
        assert response.json()["ACOG Sight"]["acc_bonus"] == 1.5

    def test_get_mod(self):
        response = client.get("/api/data/mods/Extra Clip")
        assert response.status_code == 200
        assert response.json()["extra_clips"] == 1

    def test_get_missing_mod(self):
        response = client.get("/api/data/mods/Nope")
        assert response.status_code == 404

    def test_get_coverage(self):
        response = client.get("/api/data/coverage")
        assert response.status_code == 200
        assert response.json()["head"]["Riot Helmet"] == 100

    def test_get_weapon_names(self):
        response = client.get("/api/data/weapons/primary")
        assert response.status_code == 200
        assert "AK-47" in response.json()

    def test_unarmed_slot_has_no_catalog(self):
        response = client.get("/api/data/weapons/fists")
        assert response.status_code == 404

    def test_get_armour_names(self):
        response = client.get("/api/data/armour/head")
        assert response.status_code == 200
        assert "Delta Gas Mask" in response.json()

    def test_invalid_armour_slot(self):
        response = client.get("/api/data/armour/tail")
        assert response.status_code == 422
