"""
Shared fixtures

Every test gets a fresh in-memory SQLite database. ``seeded`` loads two farms
modelled on the demo farm data: three cycles (two growing, one completed and
harvested), 28 feeding logs, mortality, costs, revenue and water samples.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from services.api.core.database import Base, create_session_factory
from services.api.core.security import create_access_token
from services.api.kpi import KPIService, KPIStore
from services.api.main import create_app
from services.api.models import (
    Cycle,
    CycleStatus,
    Farm,
    FeedingLog,
    HarvestRecord,
    MortalityRecord,
    OperationalCost,
    Pond,
    PondStatus,
    ProductionCost,
    RevenueRecord,
    StockingRecord,
    WaterQualityLog,
)
from services.api.routes.kpi import get_kpi_service, get_kpi_store

# Reference "now" for every time-dependent KPI in the test-suite
NOW = datetime(2024, 10, 1, tzinfo=timezone.utc)


def utc(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return KPIStore(db)


@pytest.fixture
def app(session_factory):
    app = create_app(session_factory=session_factory)

    def fixed_clock_service(store: KPIStore = Depends(get_kpi_store)) -> KPIService:
        return KPIService(store, clock=lambda: NOW)

    app.dependency_overrides[get_kpi_service] = fixed_clock_service
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": "user-1", "email": "admin@shrimp.test", "roles": ["Admin"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def seeded(db):
    ocean = Farm(name="Ocean Farm", location="Guayas")
    verde = Farm(name="Costa Verde Farm", location="El Oro")
    db.add_all([ocean, verde])
    db.flush()

    alpha = Pond(farm_id=ocean.id, code="P-01", name="Pond Alpha", area=4.8, status=PondStatus.ACTIVE)
    beta = Pond(farm_id=ocean.id, code="P-02", name="Pond Beta", area=3.5, status=PondStatus.ACTIVE)
    gamma = Pond(farm_id=ocean.id, code="P-03", name="Pond Gamma", area=5.2, status=PondStatus.ACTIVE)
    delta = Pond(farm_id=ocean.id, code="P-04", name="Pond Delta", area=4.0, status=PondStatus.PREPARING)
    epsilon = Pond(farm_id=verde.id, code="P-05", name="Pond Epsilon", area=3.8, status=PondStatus.MAINTENANCE)
    zeta = Pond(farm_id=verde.id, code="P-06", name="Pond Zeta", area=4.2, status=PondStatus.INACTIVE)
    db.add_all([delta, beta, alpha, gamma, zeta, epsilon])
    db.flush()

    growing = Cycle(
        pond_id=alpha.id,
        name="Cycle 2024-Q3",
        species="Litopenaeus vannamei",
        status=CycleStatus.GROWING,
        start_date=utc(2024, 7, 15),
        expected_end_date=utc(2024, 10, 15),
        target_weight=30,
    )
    growing_b = Cycle(
        pond_id=beta.id,
        name="Cycle 2024-Q3-B",
        species="Litopenaeus vannamei",
        status=CycleStatus.GROWING,
        start_date=utc(2024, 8, 1),
        expected_end_date=utc(2024, 11, 1),
        target_weight=28,
    )
    completed = Cycle(
        pond_id=gamma.id,
        name="Cycle 2024-Q2",
        species="Litopenaeus vannamei",
        status=CycleStatus.COMPLETED,
        start_date=utc(2024, 4, 1),
        actual_end_date=utc(2024, 7, 10),
        target_weight=32,
    )
    db.add_all([growing, growing_b, completed])
    db.flush()

    db.add_all(
        [
            StockingRecord(cycle_id=growing.id, date=utc(2024, 7, 15), quantity=720000, average_weight=0.01),
            StockingRecord(cycle_id=growing_b.id, date=utc(2024, 8, 1), quantity=525000, average_weight=0.01),
            StockingRecord(cycle_id=completed.id, date=utc(2024, 4, 1), quantity=780000, average_weight=0.01),
            MortalityRecord(cycle_id=growing.id, date=utc(2024, 7, 20), count=1500, cause="Natural"),
            MortalityRecord(cycle_id=growing.id, date=utc(2024, 7, 25), count=800, cause="Water quality"),
            MortalityRecord(cycle_id=growing.id, date=utc(2024, 8, 1), count=500, cause="Unknown"),
        ]
    )

    for day in range(14):
        date = utc(2024, 7, 15) + timedelta(days=day)
        db.add_all(
            [
                FeedingLog(cycle_id=growing.id, pond_id=alpha.id, date=date, quantity=80 + day * 5,
                           feed_type="Masterline EXT #5 BI"),
                FeedingLog(cycle_id=growing.id, pond_id=alpha.id, date=date, quantity=60 + day * 3,
                           feed_type="Optiline AD EXT #5"),
                WaterQualityLog(pond_id=alpha.id, date=date, temperature=28.0, ph=7.5, dissolved_oxygen=5.5),
            ]
        )
    # Latest sample for Pond Alpha, inserted before an older one on purpose
    db.add_all(
        [
            WaterQualityLog(pond_id=alpha.id, date=utc(2024, 7, 29), temperature=29.5, ph=7.8,
                            dissolved_oxygen=6.2),
            WaterQualityLog(pond_id=alpha.id, date=utc(2024, 7, 1), temperature=26.0, ph=7.1,
                            dissolved_oxygen=4.0),
        ]
    )

    db.add_all(
        [
            HarvestRecord(cycle_id=completed.id, date=utc(2024, 7, 10), quantity=569400, total_weight=41962,
                          average_weight=25.27, survival_rate=73, total_revenue=61119),
            ProductionCost(cycle_id=completed.id, amount=32000, date=utc(2024, 7, 10), category="Feed"),
            ProductionCost(cycle_id=completed.id, amount=8500, date=utc(2024, 7, 10), category="Labor"),
            ProductionCost(cycle_id=completed.id, amount=5071.49, date=utc(2024, 7, 10), category="Energy"),
            RevenueRecord(cycle_id=completed.id, amount=61118.98, date=utc(2024, 7, 12),
                          source="Pacific Seafood Exports"),
            OperationalCost(farm_id=ocean.id, amount=1200.5, date=utc(2024, 7, 31), category="Energy"),
            OperationalCost(farm_id=verde.id, amount=300, date=utc(2024, 7, 31), category="Maintenance"),
        ]
    )
    db.commit()

    return SimpleNamespace(
        ocean=ocean,
        verde=verde,
        alpha=alpha,
        beta=beta,
        gamma=gamma,
        delta=delta,
        growing=growing,
        growing_b=growing_b,
        completed=completed,
    )
