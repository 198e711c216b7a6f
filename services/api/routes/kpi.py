"""
KPI Routes

Read-only endpoints over the metric calculator:

    GET /kpi/dashboard?farmId=        -> DashboardKPI
    GET /kpi/cycle/{cycle_id}         -> CycleKPI (404 "Cycle not found")
    GET /kpi/ponds-overview?farmId=   -> PondSummary[]

All routes require a bearer token. Store failures are logged with their
traceback and answered with a fixed 500 message; nothing is retried here.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.exceptions import AppError
from ..core.security import get_current_user
from ..kpi import KPIService, KPIStore
from ..schemas import ApiResponse, CycleKPI, DashboardKPI, ErrorResponse, PondSummary

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/kpi",
    tags=["kpi"],
    dependencies=[Depends(get_current_user)],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


def get_kpi_store(db: Session = Depends(get_db)) -> KPIStore:
    return KPIStore(db)


def get_kpi_service(store: KPIStore = Depends(get_kpi_store)) -> KPIService:
    return KPIService(store)


@router.get("/dashboard", response_model=ApiResponse[DashboardKPI])
def dashboard_kpi(
    farm_id: Optional[str] = Query(None, alias="farmId"),
    service: KPIService = Depends(get_kpi_service),
):
    """Pond, cycle, biomass and financial roll-up for one farm or all farms."""
    try:
        data = service.dashboard(farm_id)
    except Exception:
        logger.exception("Failed to compute dashboard KPIs (farm_id=%s)", farm_id)
        raise AppError("Failed to compute dashboard KPIs")

    return ApiResponse[DashboardKPI](data=data)


@router.get(
    "/cycle/{cycle_id}",
    response_model=ApiResponse[CycleKPI],
    responses={404: {"model": ErrorResponse}},
)
def cycle_kpi(
    cycle_id: str,
    service: KPIService = Depends(get_kpi_service),
):
    """Survival, FCR, biomass and profitability of one production cycle."""
    try:
        data = service.cycle(cycle_id)
    except AppError:
        raise
    except Exception:
        logger.exception("Failed to compute cycle KPIs (cycle_id=%s)", cycle_id)
        raise AppError("Failed to compute cycle KPIs")

    return ApiResponse[CycleKPI](data=data)


@router.get("/ponds-overview", response_model=ApiResponse[List[PondSummary]])
def ponds_overview(
    farm_id: Optional[str] = Query(None, alias="farmId"),
    service: KPIService = Depends(get_kpi_service),
):
    """Every pond with its active cycle and latest water-quality sample."""
    try:
        data = service.ponds_overview(farm_id)
    except Exception:
        logger.exception("Failed to compute ponds overview (farm_id=%s)", farm_id)
        raise AppError("Failed to compute ponds overview")

    return ApiResponse[List[PondSummary]](data=data)
