"""
Routes Package

API route definitions and handlers:
- KPI routes (dashboard, cycle, ponds overview)
- Health check route
"""

from fastapi import APIRouter

from .health import router as health_router
from .kpi import router as kpi_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(kpi_router)

__all__ = ["api_router"]
