"""
Models Package

SQLAlchemy ORM models for the farm entity store:
- Farms, ponds and farm-level costs
- Production cycles and their event records
- Cycle-level costs and revenue
"""

from .cycle import Cycle, FeedingLog, HarvestRecord, MortalityRecord, StockingRecord
from .enums import ACTIVE_CYCLE_STATUSES, CycleStatus, PondStatus
from .farm import Farm, OperationalCost, Pond, WaterQualityLog
from .financial import ProductionCost, RevenueRecord

__all__ = [
    "ACTIVE_CYCLE_STATUSES",
    "Cycle",
    "CycleStatus",
    "Farm",
    "FeedingLog",
    "HarvestRecord",
    "MortalityRecord",
    "OperationalCost",
    "Pond",
    "PondStatus",
    "ProductionCost",
    "RevenueRecord",
    "StockingRecord",
    "WaterQualityLog",
]
