"""
Integration tests for the KPI endpoints.

Tests cover:
- Dashboard roll-up, tenant-wide and per farm
- Cycle KPIs for running and completed cycles, 404 for unknown ids
- Ponds overview rows
- 500 envelope when the store fails
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from services.api.kpi import KPIStore
from services.api.models import Cycle, CycleStatus, FeedingLog, HarvestRecord
from services.api.routes.kpi import get_kpi_store

API = "/api/v1/kpi"


# =============================================================
# TEST: GET /kpi/dashboard
# =============================================================

class TestDashboard:
    """Dashboard KPIs."""

    def test_all_farms(self, client, auth_headers, seeded):
        response = client.get(f"{API}/dashboard", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {
            "totalPonds": 6,
            "activePonds": 3,
            "activeCycles": 2,
            "completedCycles": 1,
            "totalBiomass": 41962.0,
            "averageSurvivalRate": 73.0,
            "averageFCR": 0.0,
            "totalRevenue": 61118.98,
            "totalCosts": 47071.99,
            "profit": 14046.99,
        }

    def test_single_farm(self, client, auth_headers, seeded):
        response = client.get(
            f"{API}/dashboard", params={"farmId": seeded.verde.id}, headers=auth_headers
        )

        data = response.json()["data"]
        assert data["totalPonds"] == 2
        assert data["activePonds"] == 0
        assert data["activeCycles"] == 0
        assert data["totalBiomass"] == 0
        assert data["totalCosts"] == 300
        assert data["profit"] == -300

    def test_fcr_uses_all_biomass_in_scope(self, client, auth_headers, seeded, db):
        # Feed of the completed cycle over harvests of every cycle, running ones included
        db.add_all(
            [
                FeedingLog(cycle_id=seeded.completed.id, pond_id=seeded.gamma.id,
                           date=datetime(2024, 6, 1, tzinfo=timezone.utc), quantity=50000),
                HarvestRecord(cycle_id=seeded.growing.id, total_weight=8038,
                              average_weight=12.0, survival_rate=95),
            ]
        )
        db.commit()

        data = client.get(
            f"{API}/dashboard", params={"farmId": seeded.ocean.id}, headers=auth_headers
        ).json()["data"]

        assert data["totalBiomass"] == 50000
        assert data["averageFCR"] == 1.0
        assert data["averageSurvivalRate"] == 84.0

    def test_empty_database(self, client, auth_headers):
        data = client.get(f"{API}/dashboard", headers=auth_headers).json()["data"]

        assert all(value == 0 for value in data.values())


# =============================================================
# TEST: GET /kpi/cycle/{id}
# =============================================================

class TestCycle:
    """Cycle KPIs."""

    def test_growing_cycle(self, client, auth_headers, seeded):
        response = client.get(f"{API}/cycle/{seeded.growing.id}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["cycleId"] == seeded.growing.id
        assert data["cycleName"] == "Cycle 2024-Q3"
        assert data["pondName"] == "Pond Alpha"
        assert data["pondArea"] == 4.8
        assert data["daysInCycle"] == 78
        assert data["survivalRate"] == 99.61
        assert data["currentWeight"] == 30
        assert data["fcr"] == 0
        assert data["biomass"] == 0
        assert data["costPerLb"] == 0
        assert data["profit"] == 0

    def test_completed_cycle(self, client, auth_headers, seeded):
        data = client.get(
            f"{API}/cycle/{seeded.completed.id}", headers=auth_headers
        ).json()["data"]

        assert data == {
            "cycleId": seeded.completed.id,
            "cycleName": "Cycle 2024-Q2",
            "pondName": "Pond Gamma",
            "pondArea": 5.2,
            "daysInCycle": 100,
            "currentWeight": 25.27,
            "survivalRate": 100.0,
            "fcr": 0.0,
            "biomass": 41962.0,
            "biomassPerHa": 8069.62,
            "costPerLb": 1.09,
            "gainPerHaPerDay": 29.9,
            "totalRevenue": 61118.98,
            "totalCost": 45571.49,
            "profit": 15547.49,
        }

    def test_latest_harvest_sets_current_weight(self, client, auth_headers, seeded, db):
        db.add_all(
            [
                HarvestRecord(cycle_id=seeded.growing.id, total_weight=900, average_weight=21.0,
                              created_at=datetime(2024, 9, 20, tzinfo=timezone.utc)),
                HarvestRecord(cycle_id=seeded.growing.id, total_weight=600, average_weight=15.5,
                              created_at=datetime(2024, 9, 1, tzinfo=timezone.utc)),
            ]
        )
        db.commit()

        data = client.get(f"{API}/cycle/{seeded.growing.id}", headers=auth_headers).json()["data"]

        assert data["currentWeight"] == 21.0
        assert data["biomass"] == 1500
        assert data["fcr"] == round(2688 / 1500, 2)

    def test_harvests_added_in_one_commit_use_the_last_added(self, client, auth_headers, seeded, db):
        db.add_all(
            [HarvestRecord(cycle_id=seeded.growing.id, total_weight=300, average_weight=weight)
             for weight in (16.0, 23.5, 19.0, 27.25, 20.0)]
        )
        db.commit()

        data = client.get(f"{API}/cycle/{seeded.growing.id}", headers=auth_headers).json()["data"]

        assert data["currentWeight"] == 20.0
        assert data["biomass"] == 1500

    def test_unknown_cycle(self, client, auth_headers, seeded):
        response = client.get(f"{API}/cycle/does-not-exist", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Cycle not found"}


# =============================================================
# TEST: GET /kpi/ponds-overview
# =============================================================

class TestPondsOverview:
    """Ponds overview."""

    def test_farm_overview(self, client, auth_headers, seeded):
        response = client.get(
            f"{API}/ponds-overview", params={"farmId": seeded.ocean.id}, headers=auth_headers
        )

        assert response.status_code == 200
        rows = response.json()["data"]
        assert [row["code"] for row in rows] == ["P-01", "P-02", "P-03", "P-04"]

        alpha, beta, gamma, delta = rows
        assert alpha == {
            "id": seeded.alpha.id,
            "code": "P-01",
            "name": "Pond Alpha",
            "area": 4.8,
            "status": "ACTIVE",
            "activeCycleName": "Cycle 2024-Q3",
            "daysInCycle": 78,
            "survivalRate": 99.61,
            "lastTemperature": 29.5,
            "lastPh": 7.8,
            "lastDO": 6.2,
        }
        assert beta["activeCycleName"] == "Cycle 2024-Q3-B"
        assert beta["daysInCycle"] == 61
        assert beta["survivalRate"] == 100.0
        assert beta["lastTemperature"] is None

        # Completed cycles are not active
        assert gamma["activeCycleName"] is None
        assert gamma["daysInCycle"] == 0
        assert gamma["survivalRate"] == 0

        assert delta["status"] == "PREPARING"
        assert delta["lastDO"] is None

    def test_unscheduled_active_cycle_wins(self, client, auth_headers, seeded, db):
        db.add(Cycle(pond_id=seeded.beta.id, name="Cycle 2024-Q4-B", status=CycleStatus.STOCKING))
        db.commit()

        rows = client.get(
            f"{API}/ponds-overview", params={"farmId": seeded.ocean.id}, headers=auth_headers
        ).json()["data"]

        beta = rows[1]
        assert beta["activeCycleName"] == "Cycle 2024-Q4-B"
        assert beta["daysInCycle"] == 0
        assert beta["survivalRate"] == 0

    def test_all_farms(self, client, auth_headers, seeded):
        rows = client.get(f"{API}/ponds-overview", headers=auth_headers).json()["data"]

        assert [row["code"] for row in rows] == ["P-01", "P-02", "P-03", "P-04", "P-05", "P-06"]

    def test_unknown_farm(self, client, auth_headers, seeded):
        response = client.get(
            f"{API}/ponds-overview", params={"farmId": "nope"}, headers=auth_headers
        )

        assert response.json() == {"success": True, "data": []}


# =============================================================
# TEST: store failures
# =============================================================

@pytest.fixture
def broken_store(app):
    store = MagicMock(spec=KPIStore)
    failure = OperationalError("SELECT 1", {}, Exception("connection refused"))
    for method in ("get_cycle", "list", "count", "sum", "avg", "latest_per"):
        getattr(store, method).side_effect = failure

    app.dependency_overrides[get_kpi_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_kpi_store, None)


@pytest.mark.parametrize(
    "path, message",
    [
        ("/dashboard", "Failed to compute dashboard KPIs"),
        ("/cycle/some-id", "Failed to compute cycle KPIs"),
        ("/ponds-overview", "Failed to compute ponds overview"),
    ],
)
def test_store_failure_returns_500(client, auth_headers, broken_store, path, message):
    response = client.get(f"{API}{path}", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": message}
