"""
KPI Package

Derived production metrics:
- calculator: pure KPI arithmetic over fetched records
- store: typed query filters and the read-only entity store facade
- service: scope resolution and orchestration per request
"""

from .service import KPIService
from .store import KPIStore

__all__ = ["KPIService", "KPIStore"]
