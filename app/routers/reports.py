from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.database import get_db
from app.core.auth import get_current_user, department_scope
from app.schemas.report import EvaluationReport, DepartmentRanking
from app.services import reports

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/evaluation/{period_id}", response_model=EvaluationReport)
async def get_evaluation_report(
    period_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await reports.get_evaluation_report(db, period_id, department_scope(current_user))


@router.get("/departments/{period_id}", response_model=List[DepartmentRanking])
async def get_department_report(
    period_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await reports.get_department_rankings(db, period_id, include_unscored=True)
