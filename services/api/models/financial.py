"""Cycle-level cost and revenue models"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, String

from ..core.database import Base
from .base import RecordMixin


class ProductionCost(RecordMixin, Base):
    __tablename__ = "production_costs"

    cycle_id = Column(String(36), ForeignKey("cycles.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False, default=0.0)
    date = Column(DateTime(timezone=True), nullable=False)
    category = Column(String(100))  # Feed, Labor, Energy, ...
    description = Column(String(500))


class RevenueRecord(RecordMixin, Base):
    __tablename__ = "revenue_records"

    cycle_id = Column(String(36), ForeignKey("cycles.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False, default=0.0)
    date = Column(DateTime(timezone=True), nullable=False)
    source = Column(String(255))  # Buyer / packing plant
    description = Column(String(500))
