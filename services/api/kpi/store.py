"""
KPI Entity Store

Read-only query facade over a SQLAlchemy session.

Filters are small typed objects rather than ad-hoc ``where`` dicts. Each one
knows how to scope any model it applies to, following the ownership chain
record -> cycle -> pond -> farm, so callers never spell out joins::

    store.count(Pond, FarmScope(farm_id), StatusIn([PondStatus.ACTIVE]))
    store.sum(HarvestRecord, HarvestRecord.total_weight, FarmScope(farm_id))

Empty result sets come back as ``[]`` or ``0.0``, never ``None``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Type

from sqlalchemy import and_, false, func, select, true
from sqlalchemy.orm import Session

from ..models import (
    Cycle,
    FeedingLog,
    HarvestRecord,
    MortalityRecord,
    OperationalCost,
    Pond,
    ProductionCost,
    RevenueRecord,
    StockingRecord,
    WaterQualityLog,
)

# Models owned by a cycle
CYCLE_RECORDS = (
    StockingRecord,
    MortalityRecord,
    FeedingLog,
    HarvestRecord,
    ProductionCost,
    RevenueRecord,
)
# Models owned directly by a pond
POND_RECORDS = (WaterQualityLog,)


class UnsupportedFilterError(TypeError):
    """A filter was applied to a model it cannot scope."""

    def __init__(self, query_filter, model):
        super().__init__(
            f"{type(query_filter).__name__} cannot filter {model.__name__}"
        )


class QueryFilter:
    """Base class for typed query filters."""

    def clause(self, model: Type) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class FarmScope(QueryFilter):
    farm_id: str

    def clause(self, model):
        if model is Pond or model is OperationalCost:
            return model.farm_id == self.farm_id
        ponds = select(Pond.id).where(Pond.farm_id == self.farm_id)
        if model is Cycle or model in POND_RECORDS:
            return model.pond_id.in_(ponds)
        if model in CYCLE_RECORDS:
            cycles = select(Cycle.id).where(Cycle.pond_id.in_(ponds))
            return model.cycle_id.in_(cycles)
        raise UnsupportedFilterError(self, model)


@dataclass(frozen=True)
class PondScope(QueryFilter):
    pond_id: str

    def clause(self, model):
        if model is Pond:
            return Pond.id == self.pond_id
        if model is Cycle or model in POND_RECORDS or model is FeedingLog:
            return model.pond_id == self.pond_id
        if model in CYCLE_RECORDS:
            cycles = select(Cycle.id).where(Cycle.pond_id == self.pond_id)
            return model.cycle_id.in_(cycles)
        raise UnsupportedFilterError(self, model)


@dataclass(frozen=True)
class CycleScope(QueryFilter):
    cycle_id: str

    def clause(self, model):
        if model is Cycle:
            return Cycle.id == self.cycle_id
        if model in CYCLE_RECORDS:
            return model.cycle_id == self.cycle_id
        raise UnsupportedFilterError(self, model)


@dataclass(frozen=True)
class CycleIn(QueryFilter):
    """Records of any of ``cycle_ids``. An empty list matches nothing."""

    cycle_ids: Sequence[str]

    def clause(self, model):
        if model is Cycle:
            column = Cycle.id
        elif model in CYCLE_RECORDS:
            column = model.cycle_id
        else:
            raise UnsupportedFilterError(self, model)
        if not self.cycle_ids:
            return false()
        return column.in_(list(self.cycle_ids))


@dataclass(frozen=True)
class StatusIn(QueryFilter):
    statuses: Sequence[Any]

    def clause(self, model):
        if model is Pond or model is Cycle:
            return model.status.in_(list(self.statuses))
        raise UnsupportedFilterError(self, model)


@dataclass(frozen=True)
class DateRange(QueryFilter):
    """Inclusive date window on the record's ``date`` column."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def clause(self, model):
        column = getattr(model, "date", None)
        if column is None:
            raise UnsupportedFilterError(self, model)
        if self.start is not None and self.end is not None:
            return column.between(self.start, self.end)
        if self.start is not None:
            return column >= self.start
        if self.end is not None:
            return column <= self.end
        return true()


class KPIStore:
    """Query facade handed to the KPI service, one per request session."""

    def __init__(self, session: Session):
        self.session = session

    def _where(self, statement, model, filters):
        for query_filter in filters:
            statement = statement.where(query_filter.clause(model))
        return statement

    def get_cycle(self, cycle_id: str) -> Optional[Cycle]:
        return self.session.get(Cycle, cycle_id)

    def list(self, model: Type, *filters: QueryFilter, order_by=None) -> List[Any]:
        statement = self._where(select(model), model, filters)
        if order_by is not None:
            statement = statement.order_by(*_as_tuple(order_by))
        return list(self.session.scalars(statement).all())

    def count(self, model: Type, *filters: QueryFilter) -> int:
        statement = self._where(select(func.count()).select_from(model), model, filters)
        return self.session.scalar(statement) or 0

    def sum(self, model: Type, column, *filters: QueryFilter) -> float:
        statement = self._where(select(func.sum(column)), model, filters)
        return float(self.session.scalar(statement) or 0)

    def avg(self, model: Type, column, *filters: QueryFilter) -> float:
        statement = self._where(select(func.avg(column)), model, filters)
        return float(self.session.scalar(statement) or 0)

    def latest_per(self, model: Type, key, column, *filters: QueryFilter) -> Dict[Any, Any]:
        """
        Newest row per ``key`` value, by ``column``, in a single query.

        Rows tied on the newest ``column`` value resolve to the one created last.

        Returns:
            Dict mapping each ``key`` value to its newest row; keys without
            rows are absent
        """
        newest = self._where(
            select(key.label("key"), func.max(column).label("newest")), model, filters
        ).group_by(key).subquery()

        statement = (
            select(model)
            .join(newest, and_(key == newest.c.key, column == newest.c.newest))
            .order_by(model.created_at.desc())
        )

        rows: Dict[Any, Any] = {}
        for record in self.session.scalars(statement):
            rows.setdefault(getattr(record, key.key), record)
        return rows


def _as_tuple(order_by):
    return order_by if isinstance(order_by, (list, tuple)) else (order_by,)
