"""
Schemas Package

Pydantic schemas for API responses:
- Response envelopes shared by all endpoints
- KPI payloads (dashboard, cycle, ponds overview)
"""

from .common import ApiResponse, ErrorResponse
from .kpi import CycleKPI, DashboardKPI, PondSummary

__all__ = ["ApiResponse", "CycleKPI", "DashboardKPI", "ErrorResponse", "PondSummary"]
