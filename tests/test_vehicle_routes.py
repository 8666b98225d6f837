# tests/test_vehicle_routes.py
"""API tests for fleet listing and vehicle purchase."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch
from sqlalchemy.exc import IntegrityError
from cybertaxi.config import settings
from cybertaxi.models.vehicle import Vehicle
from cybertaxi.schemas.vehicle import VehicleCreate
from cybertaxi.services.identity_service import ResolvedIdentity
from cybertaxi.services.vehicle_service import purchase_vehicle
from cybertaxi.utils.security import create_access_token
from conftest import auth_headers, signup

AUSTIN = [30.2672, -97.7431]


def buy(client, player, **overrides):
    body = {"type": "Model Y", "cost": 45000, "coords": AUSTIN}
    body.update(overrides)
    return client.post("/api/vehicles", json=body, headers=player["headers"])


def balance(client, player):
    resp = client.get(f"/api/player/{player['username']}/balance", headers=player["headers"])
    return resp.json()["bank_balance"]


class TestPurchase:
    def test_purchase_debits_exact_cost(self, client, alice):
        before = balance(client, alice)
        resp = buy(client, alice, cost=45000.50)
        assert resp.status_code == 201
        body = resp.json()
        assert body["vehicle_id"] == "CT-001"
        assert body["bank_balance"] == before - 45000.50
        assert balance(client, alice) == before - 45000.50

    def test_vehicle_ids_increment(self, client, alice):
        assert buy(client, alice).json()["vehicle_id"] == "CT-001"
        assert buy(client, alice).json()["vehicle_id"] == "CT-002"

    def test_insufficient_funds_leaves_balance_unchanged(self, client):
        poor = signup(client, "poor", bank_balance=100)
        resp = buy(client, poor, cost=45000)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Insufficient funds"
        assert balance(client, poor) == 100
        listed = client.get(f"/api/vehicles/{poor['player_id']}", headers=poor["headers"])
        assert listed.json()["vehicles"] == []

    def test_exact_balance_is_enough(self, client):
        player = signup(client, "exact", bank_balance=45000)
        assert buy(client, player, cost=45000).status_code == 201
        assert balance(client, player) == 0

    def test_coords_round_trip_without_dest(self, client, alice):
        buy(client, alice)
        resp = client.get(f"/api/vehicles/{alice['player_id']}", headers=alice["headers"])
        vehicle = resp.json()["vehicles"][0]
        assert vehicle["coords"] == AUSTIN
        assert vehicle["dest"] is None
        assert vehicle["player_id"] == alice["player_id"]

    def test_dest_round_trip(self, client, alice):
        buy(client, alice, dest=[30.25, -97.75])
        resp = client.get(f"/api/vehicles/{alice['player_id']}", headers=alice["headers"])
        assert resp.json()["vehicles"][0]["dest"] == [30.25, -97.75]

    def test_out_of_range_latitude_rejected(self, client, alice):
        resp = buy(client, alice, coords=[90.0001, -97.7431])
        assert resp.status_code == 400
        assert "latitude" in resp.json()["message"]
        assert balance(client, alice) == 100000

    def test_out_of_range_longitude_rejected(self, client, alice):
        resp = buy(client, alice, coords=[30.2672, -180.5])
        assert resp.status_code == 400
        assert "longitude" in resp.json()["message"]

    def test_malformed_coords_rejected(self, client, alice):
        assert buy(client, alice, coords=[30.2672]).status_code == 400
        assert buy(client, alice, coords="30.2672,-97.7431").status_code == 400

    def test_unknown_type_and_status_rejected(self, client, alice):
        assert buy(client, alice, type="Model T").status_code == 400
        assert buy(client, alice, status="flying").status_code == 400

    def test_purchase_for_another_player_forbidden(self, client, alice, bob):
        resp = buy(client, alice, player_id=bob["player_id"])
        assert resp.status_code == 403
        assert balance(client, bob) == 100000

    def test_new_vehicle_scheduled_for_delivery(self, client, alice, db):
        buy(client, alice)
        vehicle = db.query(Vehicle).filter(Vehicle.id == "CT-001").first()
        expected = datetime.utcnow() + timedelta(hours=settings.DELIVERY_DELAY_HOURS)
        assert vehicle.status == "new"
        assert abs((vehicle.delivery_timestamp - expected).total_seconds()) < 60

    def test_active_vehicle_has_no_delivery(self, client, alice):
        buy(client, alice, status="Active")
        resp = client.get(f"/api/vehicles/{alice['player_id']}", headers=alice["headers"])
        vehicle = resp.json()["vehicles"][0]
        assert vehicle["status"] == "active"
        assert vehicle["delivery_timestamp"] is None


class TestListing:
    def test_other_players_vehicles_forbidden(self, client):
        token = create_access_token(7)
        resp = client.get("/api/vehicles/42", headers=auth_headers(token))
        assert resp.status_code == 403
        assert resp.json() == {"status": "Error", "message": "Unauthorized access to player vehicles"}

    def test_no_token_is_401(self, client):
        resp = client.get("/api/vehicles/1")
        assert resp.status_code == 401
        assert resp.json()["message"] == "No token provided"

    def test_bad_token_is_401(self, client):
        resp = client.get("/api/vehicles/1", headers=auth_headers("garbage.token.here"))
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid token"

    def test_status_filter(self, client, alice):
        buy(client, alice, status="active")
        buy(client, alice, status="parked")
        resp = client.get(f"/api/vehicles/{alice['player_id']}", params={"status": "parked"},
                          headers=alice["headers"])
        vehicles = resp.json()["vehicles"]
        assert [v["status"] for v in vehicles] == ["parked"]

    def test_invalid_status_filter_is_400(self, client, alice):
        resp = client.get(f"/api/vehicles/{alice['player_id']}", params={"status": "flying"},
                          headers=alice["headers"])
        assert resp.status_code == 400

    def test_others_excludes_own_vehicles(self, client, alice, bob):
        buy(client, alice, status="active")
        buy(client, bob, status="active")
        resp = client.get("/api/vehicles/others", headers=alice["headers"])
        assert resp.status_code == 200
        vehicles = resp.json()["vehicles"]
        assert [v["id"] for v in vehicles] == ["CT-002"]
        assert vehicles[0]["player_id"] == bob["player_id"]

    def test_listing_by_username(self, client, alice):
        buy(client, alice)
        resp = client.get("/api/player/alice/vehicles", headers=alice["headers"])
        assert [v["id"] for v in resp.json()["vehicles"]] == ["CT-001"]

    def test_listing_does_not_change_rows(self, client, alice, db):
        buy(client, alice)
        before = db.query(Vehicle).filter(Vehicle.id == "CT-001").first()
        snapshot = (before.status, before.delivery_timestamp, before.updated_at)
        db.expire_all()

        client.get(f"/api/vehicles/{alice['player_id']}", headers=alice["headers"])
        client.get("/api/player/alice/vehicles", headers=alice["headers"])

        after = db.query(Vehicle).filter(Vehicle.id == "CT-001").first()
        assert (after.status, after.delivery_timestamp, after.updated_at) == snapshot


class TestPurchaseLimits:
    def test_cost_beyond_column_range_rejected(self, client):
        rich = signup(client, "rich", bank_balance="9999999999.99")
        resp = buy(client, rich, cost=100000000)
        assert resp.status_code == 400
        assert balance(client, rich) == 9999999999.99

    def test_cost_with_fractional_cents_rejected(self, client, alice):
        assert buy(client, alice, cost="100.005").status_code == 400


class TestVehicleIdAllocation:
    def test_collision_is_retried(self, client, alice):
        buy(client, alice)
        with patch("cybertaxi.services.vehicle_service.next_vehicle_id", side_effect=["CT-001", "CT-002"]):
            resp = buy(client, alice, cost=1000)
        assert resp.status_code == 201
        assert resp.json()["vehicle_id"] == "CT-002"
        assert balance(client, alice) == 100000 - 45000 - 1000

    def test_persistent_collision_is_409_without_debit(self, client, alice):
        buy(client, alice)
        with patch("cybertaxi.services.vehicle_service.next_vehicle_id", return_value="CT-001") as allocate:
            resp = buy(client, alice, cost=1000)
        assert resp.status_code == 409
        assert resp.json()["message"] == "Could not allocate a vehicle id, please retry"
        assert allocate.call_count == settings.ID_ALLOCATION_ATTEMPTS
        assert balance(client, alice) == 100000 - 45000
        listed = client.get(f"/api/vehicles/{alice['player_id']}", headers=alice["headers"])
        assert [v["id"] for v in listed.json()["vehicles"]] == ["CT-001"]

    def test_other_integrity_errors_are_not_retried(self):
        db = MagicMock()
        db.commit.side_effect = IntegrityError("INSERT INTO vehicles", {}, Exception("foreign key"))
        db.query.return_value.filter.return_value.first.return_value = None
        identity = ResolvedIdentity(surrogate_key=3, public_player_id=7, username="alice")
        body = VehicleCreate(type="Model Y", cost=1000, coords=AUSTIN)

        with patch("cybertaxi.services.vehicle_service.next_vehicle_id", return_value="CT-005"), \
                patch("cybertaxi.services.vehicle_service.debit_balance"):
            with pytest.raises(IntegrityError):
                purchase_vehicle(db, identity, body)

        db.commit.assert_called_once()
        db.rollback.assert_called_once()
