"""
Metric Calculator

Pure functions deriving production KPIs from record sets that were already
fetched by the store. Nothing here performs I/O or keeps state: the same
inputs (including ``now``) always give the same output.

Conventions:
    - Every division is guarded and degrades to 0 on an empty divisor.
    - Raw values are computed first; each presented field is then rounded
      to 2 decimals independently with ``round2``.
    - ``now`` is injectable for determinism. Naive datetimes are UTC.

Formulas:
    survival_rate     = (stocked - mortality) / stocked * 100
    fcr               = feed / harvested weight
    cost_per_lb       = production cost / harvested weight
    biomass_per_ha    = harvested weight / pond area
    gain_per_ha_per_day = (revenue - cost) / pond area / days in cycle

FCR here divides by total harvested weight, not biomass gain.
"""

import math
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..models import (
    Cycle,
    FeedingLog,
    HarvestRecord,
    MortalityRecord,
    Pond,
    ProductionCost,
    RevenueRecord,
    StockingRecord,
    WaterQualityLog,
)
from ..schemas.kpi import CycleKPI, DashboardKPI, PondSummary

SECONDS_PER_DAY = 60 * 60 * 24


def round2(value: float) -> float:
    """Round to 2 decimals, half away from zero, on ``value * 100``."""
    scaled = math.floor(abs(value) * 100 + 0.5)
    return math.copysign(scaled, value) / 100 if scaled else 0.0


def _total(records: Iterable, field: str) -> float:
    return sum(getattr(record, field) or 0 for record in records)


def _utc(value: Optional[datetime], now: datetime) -> datetime:
    if value is None:
        return now
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _now(now: Optional[datetime]) -> datetime:
    return _utc(now, now) if now is not None else datetime.now(timezone.utc)


def _elapsed_days(start: datetime, end: datetime) -> int:
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


def survival_rate(stocking_records: Iterable[StockingRecord],
                  mortality_records: Iterable[MortalityRecord]) -> float:
    """Unrounded survival percentage, 0 when nothing was stocked."""
    stocked = _total(stocking_records, "quantity")
    if stocked <= 0:
        return 0.0
    lost = _total(mortality_records, "count")
    return (stocked - lost) / stocked * 100


def compute_cycle_kpi(
    cycle: Cycle,
    stocking_records: Sequence[StockingRecord],
    mortality_records: Sequence[MortalityRecord],
    feeding_logs: Sequence[FeedingLog],
    harvest_records: Sequence[HarvestRecord],
    production_costs: Sequence[ProductionCost],
    revenue_records: Sequence[RevenueRecord],
    pond: Pond,
    now: Optional[datetime] = None,
) -> CycleKPI:
    """
    Compute the KPIs of one production cycle.

    Args:
        harvest_records: In insertion order; the last one supplies
            ``current_weight``.
        pond: The cycle's pond. ``pond.area`` must not be None.
        now: Reference time for open cycles (defaults to current UTC time).

    Returns:
        CycleKPI: Rounded KPI values
    """
    now = _now(now)

    total_harvested = _total(harvest_records, "total_weight")
    total_feed = _total(feeding_logs, "quantity")
    total_revenue = _total(revenue_records, "amount")
    total_cost = _total(production_costs, "amount")
    area = pond.area

    fcr = total_feed / total_harvested if total_harvested > 0 else 0.0
    cost_per_lb = total_cost / total_harvested if total_harvested > 0 else 0.0

    start = _utc(cycle.start_date, now)
    end = _utc(cycle.actual_end_date, now)
    days_in_cycle = max(1, _elapsed_days(start, end))

    if area > 0:
        biomass_per_ha = total_harvested / area
        gain_per_ha_per_day = (total_revenue - total_cost) / area / days_in_cycle
    else:
        biomass_per_ha = 0.0
        gain_per_ha_per_day = 0.0

    # A harvest without an average weight (null or 0) falls back to the target
    last_weight = harvest_records[-1].average_weight if harvest_records else None
    current_weight = last_weight or cycle.target_weight or 0.0

    return CycleKPI(
        cycle_id=cycle.id,
        cycle_name=cycle.name,
        pond_name=pond.name,
        pond_area=area,
        days_in_cycle=days_in_cycle,
        current_weight=current_weight,
        survival_rate=round2(survival_rate(stocking_records, mortality_records)),
        fcr=round2(fcr),
        biomass=round2(total_harvested),
        biomass_per_ha=round2(biomass_per_ha),
        cost_per_lb=round2(cost_per_lb),
        gain_per_ha_per_day=round2(gain_per_ha_per_day),
        total_revenue=round2(total_revenue),
        total_cost=round2(total_cost),
        profit=round2(total_revenue - total_cost),
    )


def compute_dashboard_kpi(
    total_ponds: int,
    active_ponds: int,
    active_cycles: int,
    completed_cycles: int,
    total_biomass: float,
    average_survival_rate: float,
    production_costs: float,
    operational_costs: float,
    total_revenue: float,
    completed_cycle_feed: float,
) -> DashboardKPI:
    """
    Roll pre-aggregated store figures up into the dashboard KPIs.

    ``average_fcr`` divides the feed of completed cycles by the harvested
    biomass of every cycle in scope, including cycles still running.
    """
    average_fcr = completed_cycle_feed / total_biomass if total_biomass > 0 else 0.0
    total_costs = production_costs + operational_costs

    return DashboardKPI(
        total_ponds=total_ponds,
        active_ponds=active_ponds,
        active_cycles=active_cycles,
        completed_cycles=completed_cycles,
        total_biomass=round2(total_biomass),
        average_survival_rate=round2(average_survival_rate),
        average_fcr=round2(average_fcr),
        total_revenue=round2(total_revenue),
        total_costs=round2(total_costs),
        profit=round2(total_revenue - total_costs),
    )


def compute_ponds_overview(
    ponds: Sequence[Pond],
    active_cycles: Mapping[str, Cycle],
    stocking_records: Mapping[str, Sequence[StockingRecord]],
    mortality_records: Mapping[str, Sequence[MortalityRecord]],
    latest_water_quality: Mapping[str, WaterQualityLog],
    now: Optional[datetime] = None,
) -> List[PondSummary]:
    """
    Summarize each pond with its active cycle and latest water sample.

    Args:
        ponds: Ponds in display order.
        active_cycles: Active cycle per pond id; ponds without one are absent.
        stocking_records: Stocking records per cycle id.
        mortality_records: Mortality records per cycle id.
        latest_water_quality: Most recent sample per pond id.
        now: Reference time (defaults to current UTC time).

    Unlike ``compute_cycle_kpi``, ``days_in_cycle`` is not floored at 1:
    a cycle starting at ``now`` reports 0, and so does a pond without an
    active cycle.
    """
    now = _now(now)
    overview = []

    for pond in ponds:
        cycle = active_cycles.get(pond.id)
        sample = latest_water_quality.get(pond.id)

        rate = 0.0
        days_in_cycle = 0
        if cycle is not None:
            rate = survival_rate(
                stocking_records.get(cycle.id, ()),
                mortality_records.get(cycle.id, ()),
            )
            days_in_cycle = _elapsed_days(_utc(cycle.start_date, now), now)

        overview.append(
            PondSummary(
                id=pond.id,
                code=pond.code,
                name=pond.name,
                area=pond.area,
                status=pond.status,
                active_cycle_name=cycle.name if cycle is not None else None,
                days_in_cycle=days_in_cycle,
                survival_rate=round2(rate),
                last_temperature=sample.temperature if sample is not None else None,
                last_ph=sample.ph if sample is not None else None,
                last_do=sample.dissolved_oxygen if sample is not None else None,
            )
        )

    return overview


def group_by(records: Iterable, key: str) -> Dict[str, list]:
    """Bucket records by an attribute, keeping their order."""
    groups: Dict[str, list] = {}
    for record in records:
        groups.setdefault(getattr(record, key), []).append(record)
    return groups
