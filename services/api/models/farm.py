"""Farm, pond and farm-level record models"""

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, String
from sqlalchemy.orm import relationship

from ..core.database import Base
from .base import RecordMixin
from .enums import PondStatus


class Farm(RecordMixin, Base):
    """
    A farm site owned by a company (tenant).

    Farms group ponds and carry operational costs that are not attributable
    to a single production cycle (energy, labor overhead, maintenance).
    """

    __tablename__ = "farms"

    company_id = Column(String(36), index=True)  # Owning tenant
    name = Column(String(255), nullable=False)
    location = Column(String(255))

    ponds = relationship("Pond", back_populates="farm")

    def __repr__(self):
        return f"<Farm(name='{self.name}')>"


class Pond(RecordMixin, Base):
    """
    A production pond.

    ``area`` is in hectares and is the divisor of every per-hectare KPI.
    """

    __tablename__ = "ponds"

    farm_id = Column(String(36), ForeignKey("farms.id"), nullable=False, index=True)
    code = Column(String(50), nullable=False, index=True)  # Short label, e.g. "P-01"
    name = Column(String(255), nullable=False)
    area = Column(Float, nullable=False, default=0.0)  # Hectares
    status = Column(
        Enum(PondStatus, name="pond_status"),
        nullable=False,
        default=PondStatus.ACTIVE,
    )

    farm = relationship("Farm", back_populates="ponds")
    cycles = relationship("Cycle", back_populates="pond")

    def __repr__(self):
        return f"<Pond(code='{self.code}', name='{self.name}')>"


class WaterQualityLog(RecordMixin, Base):
    """Point-in-time water sample for a pond."""

    __tablename__ = "water_quality_logs"

    pond_id = Column(String(36), ForeignKey("ponds.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    temperature = Column(Float)  # Celsius
    ph = Column(Float)
    dissolved_oxygen = Column(Float)  # mg/L
    salinity = Column(Float)  # ppt


class OperationalCost(RecordMixin, Base):
    """Farm-wide expense not tied to a cycle."""

    __tablename__ = "operational_costs"

    farm_id = Column(String(36), ForeignKey("farms.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False, default=0.0)
    date = Column(DateTime(timezone=True), nullable=False)
    category = Column(String(100))
    description = Column(String(500))
