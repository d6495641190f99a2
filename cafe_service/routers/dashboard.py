from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_service.db_depends import get_db
from cafe_service.schemas.dashboard import DashboardStats, RevenueReport
from cafe_service.service.commands import execute

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(db: AsyncSession = Depends(get_db)):
    logger.info("Request to GET dashboard stats")
    return await execute(db, "dashboard_stats")


@router.get("/revenue", response_model=RevenueReport)
async def get_revenue(
    period: str = Query(default="7d"),
    db: AsyncSession = Depends(get_db),
):
    logger.info(
        "Request to GET revenue analytics. period='{period}'",
        period=period,
    )
    return await execute(db, "revenue_for_period", period=period)
