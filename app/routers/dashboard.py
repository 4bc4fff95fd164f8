from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from app.config import settings
from app.database import get_db
from app.core.auth import get_current_user, department_scope
from app.schemas.report import DashboardStats, RankedEmployee, DepartmentRanking
from app.services import reports

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    period_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await reports.get_dashboard_stats(db, period_id, department_scope(current_user))


@router.get("/top-performers", response_model=List[RankedEmployee])
async def get_top_performers(
    period_id: int,
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await reports.get_top_performers(
        db,
        period_id,
        department_id=department_scope(current_user),
        limit=limit or settings.TOP_PERFORMERS_LIMIT,
    )


@router.get("/department-rankings", response_model=List[DepartmentRanking])
async def get_department_rankings(
    period_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await reports.get_department_rankings(db, period_id)
