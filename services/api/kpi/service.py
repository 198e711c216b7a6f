"""
KPI Service

Resolves a reporting scope (whole tenant, one farm, one cycle) into the
record sets and aggregates the metric calculator needs, then hands them over.

Each figure is its own query round-trip, so a record written between two of
them can appear in one total and not in another.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..core.exceptions import NotFoundError
from ..models import (
    ACTIVE_CYCLE_STATUSES,
    Cycle,
    CycleStatus,
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
from ..schemas.kpi import CycleKPI, DashboardKPI, PondSummary
from . import calculator
from .store import CycleIn, CycleScope, FarmScope, KPIStore, StatusIn

logger = logging.getLogger(__name__)


class KPIService:
    """
    Orchestrates KPI computation for one request.

    Args:
        store: Query facade bound to the request's session
        clock: Returns the reference "now" for open cycles; defaults to the
            calculator's current UTC time
    """

    def __init__(self, store: KPIStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock

    def _now(self) -> Optional[datetime]:
        return self.clock() if self.clock is not None else None

    def dashboard(self, farm_id: Optional[str] = None) -> DashboardKPI:
        store = self.store
        scope = [FarmScope(farm_id)] if farm_id else []
        completed = StatusIn([CycleStatus.COMPLETED])

        completed_ids = [cycle.id for cycle in store.list(Cycle, *scope, completed)]

        return calculator.compute_dashboard_kpi(
            total_ponds=store.count(Pond, *scope),
            active_ponds=store.count(Pond, *scope, StatusIn([PondStatus.ACTIVE])),
            active_cycles=store.count(Cycle, *scope, StatusIn(ACTIVE_CYCLE_STATUSES)),
            completed_cycles=len(completed_ids),
            total_biomass=store.sum(HarvestRecord, HarvestRecord.total_weight, *scope),
            average_survival_rate=store.avg(
                HarvestRecord, HarvestRecord.survival_rate, *scope
            ),
            production_costs=store.sum(ProductionCost, ProductionCost.amount, *scope),
            operational_costs=store.sum(OperationalCost, OperationalCost.amount, *scope),
            total_revenue=store.sum(RevenueRecord, RevenueRecord.amount, *scope),
            completed_cycle_feed=store.sum(
                FeedingLog, FeedingLog.quantity, CycleIn(completed_ids)
            ),
        )

    def cycle(self, cycle_id: str) -> CycleKPI:
        cycle = self.store.get_cycle(cycle_id)
        if cycle is None:
            raise NotFoundError("Cycle not found")

        scope = CycleScope(cycle.id)
        records = self.store.list

        return calculator.compute_cycle_kpi(
            cycle,
            stocking_records=records(StockingRecord, scope),
            mortality_records=records(MortalityRecord, scope),
            feeding_logs=records(FeedingLog, scope),
            harvest_records=records(
                HarvestRecord, scope, order_by=(HarvestRecord.created_at, HarvestRecord.id)
            ),
            production_costs=records(ProductionCost, scope),
            revenue_records=records(RevenueRecord, scope),
            pond=cycle.pond,
            now=self._now(),
        )

    def ponds_overview(self, farm_id: Optional[str] = None) -> List[PondSummary]:
        store = self.store
        scope = [FarmScope(farm_id)] if farm_id else []

        ponds = store.list(Pond, *scope, order_by=Pond.code)

        # Newest active cycle wins when a pond somehow has several; an
        # unscheduled one (no start date) counts as newest
        active_cycles = {}
        for cycle in store.list(
            Cycle,
            *scope,
            StatusIn(ACTIVE_CYCLE_STATUSES),
            order_by=Cycle.start_date.desc().nulls_first(),
        ):
            active_cycles.setdefault(cycle.pond_id, cycle)

        cycle_ids = CycleIn([cycle.id for cycle in active_cycles.values()])
        stocking = calculator.group_by(store.list(StockingRecord, cycle_ids), "cycle_id")
        mortality = calculator.group_by(store.list(MortalityRecord, cycle_ids), "cycle_id")

        latest_water_quality = store.latest_per(
            WaterQualityLog, WaterQualityLog.pond_id, WaterQualityLog.date, *scope
        )

        logger.debug(
            "ponds overview: %d ponds, %d active cycles", len(ponds), len(active_cycles)
        )

        return calculator.compute_ponds_overview(
            ponds,
            active_cycles,
            stocking,
            mortality,
            latest_water_quality,
            now=self._now(),
        )
