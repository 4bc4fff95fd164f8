from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from app.core.auth import get_current_user, get_accessible_employee, department_scope
from app.core.dependencies import get_scoring_service
from app.models.employee import Employee
from app.schemas.score import EmployeeScoreResponse
from app.services.recompute import ScoringService

router = APIRouter(prefix="/scores", tags=["scores"])


@router.get("/employee/{employee_id}/period/{period_id}", response_model=EmployeeScoreResponse)
async def get_employee_score(
    period_id: int,
    employee: Employee = Depends(get_accessible_employee),
    service: ScoringService = Depends(get_scoring_service),
):
    snapshot = await service.get_snapshot(employee.id, period_id)
    if snapshot is None:
        raise HTTPException(404, "No score for this employee in this period")
    return snapshot


@router.get("/period/{period_id}", response_model=List[EmployeeScoreResponse])
async def list_period_scores(
    period_id: int,
    department_id: Optional[int] = Query(None),
    current_user = Depends(get_current_user),
    service: ScoringService = Depends(get_scoring_service),
):
    # Department-bound roles only ever see their own department
    scope = department_scope(current_user)
    if scope is not None:
        if department_id is not None and department_id != scope:
            raise HTTPException(403, "Cannot access other departments")
        department_id = scope
    return await service.list_snapshots(period_id, department_id=department_id)
