"""
KPI Response Schemas

Field names are snake_case in Python and camelCase on the wire. Values are
already rounded by the metric calculator; the schemas do no arithmetic.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.enums import PondStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class DashboardKPI(CamelModel):
    """Farm-wide (or tenant-wide) roll-up."""

    total_ponds: int
    active_ponds: int
    active_cycles: int
    completed_cycles: int
    total_biomass: float
    average_survival_rate: float
    average_fcr: float = Field(alias="averageFCR")
    total_revenue: float
    total_costs: float
    profit: float


class CycleKPI(CamelModel):
    """Production KPIs of a single cycle."""

    cycle_id: str
    cycle_name: str
    pond_name: str
    pond_area: float
    days_in_cycle: int
    current_weight: float  # Grams per organism
    survival_rate: float  # Percent
    fcr: float
    biomass: float  # Total harvested weight
    biomass_per_ha: float
    cost_per_lb: float
    gain_per_ha_per_day: float
    total_revenue: float
    total_cost: float
    profit: float


class PondSummary(CamelModel):
    """One row of the ponds overview."""

    id: str
    code: str
    name: str
    area: float
    status: PondStatus
    active_cycle_name: Optional[str] = None
    days_in_cycle: int
    survival_rate: float
    # None when the pond has no water-quality samples
    last_temperature: Optional[float] = None
    last_ph: Optional[float] = None
    last_do: Optional[float] = Field(default=None, alias="lastDO")
