"""Production cycle and cycle event models"""

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..core.database import Base
from .base import RecordMixin
from .enums import CycleStatus


class Cycle(RecordMixin, Base):
    """
    One stocking-to-harvest production run in a single pond.

    Lifecycle: PLANNING -> STOCKING -> GROWING -> HARVESTING -> COMPLETED,
    or CANCELLED at any point. COMPLETED and CANCELLED are terminal.
    """

    __tablename__ = "cycles"

    pond_id = Column(String(36), ForeignKey("ponds.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    species = Column(String(255))
    status = Column(
        Enum(CycleStatus, name="cycle_status"),
        nullable=False,
        default=CycleStatus.PLANNING,
        index=True,
    )
    start_date = Column(DateTime(timezone=True))
    expected_end_date = Column(DateTime(timezone=True))
    actual_end_date = Column(DateTime(timezone=True))
    target_weight = Column(Float)  # Grams per organism

    pond = relationship("Pond", back_populates="cycles")

    def __repr__(self):
        return f"<Cycle(name='{self.name}', status='{self.status}')>"


class StockingRecord(RecordMixin, Base):
    """Post-larvae stocked into a cycle. Restocking adds more rows."""

    __tablename__ = "stocking_records"

    cycle_id = Column(String(36), ForeignKey("cycles.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True))
    quantity = Column(Integer, nullable=False, default=0)  # Organisms
    average_weight = Column(Float, default=0.0)  # Grams
    source = Column(String(255))  # Hatchery


class MortalityRecord(RecordMixin, Base):
    __tablename__ = "mortality_records"

    cycle_id = Column(String(36), ForeignKey("cycles.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True))
    count = Column(Integer, nullable=False, default=0)  # Organisms lost
    cause = Column(String(255))


class FeedingLog(RecordMixin, Base):
    __tablename__ = "feeding_logs"

    cycle_id = Column(String(36), ForeignKey("cycles.id"), nullable=False, index=True)
    pond_id = Column(String(36), ForeignKey("ponds.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)  # Kilograms fed
    feed_type = Column(String(255))


class HarvestRecord(RecordMixin, Base):
    """
    Harvest of a cycle (partial or final).

    ``survival_rate`` is what the farm recorded at harvest time; it is not
    recomputed from stocking and mortality.
    """

    __tablename__ = "harvest_records"

    cycle_id = Column(String(36), ForeignKey("cycles.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True))
    quantity = Column(Integer, default=0)  # Organisms harvested
    total_weight = Column(Float, nullable=False, default=0.0)
    average_weight = Column(Float, default=0.0)  # Grams per organism
    survival_rate = Column(Float, default=0.0)  # Percent
    total_revenue = Column(Float, default=0.0)
