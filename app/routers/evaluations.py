from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.database import get_db
from app.core.auth import get_current_user, require_roles, ensure_can_evaluate, get_accessible_employee
from app.core.dependencies import get_scoring_service
from app.models.criterion import Criterion
from app.models.employee import Employee
from app.models.evaluation import Evaluation
from app.models.period import EvaluationPeriod
from app.models.user import User
from app.schemas.evaluation import (
    CriterionResponse,
    PeriodResponse,
    EvaluationSubmit,
    EvaluationDetail,
)
from app.schemas.score import EmployeeScoreResponse, SubmitEvaluationResponse, RecalculateResponse
from app.services.recompute import CriterionScore, ScoringService
from typing import List

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.get("/criteria", response_model=List[CriterionResponse])
async def list_criteria(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(select(Criterion).order_by(Criterion.category, Criterion.name))
    return result.scalars().all()


@router.get("/periods", response_model=List[PeriodResponse])
async def list_periods(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(select(EvaluationPeriod).order_by(EvaluationPeriod.start_date.desc()))
    return result.scalars().all()


@router.get("/employee/{employee_id}/period/{period_id}", response_model=List[EvaluationDetail])
async def get_employee_evaluations(
    period_id: int,
    employee: Employee = Depends(get_accessible_employee),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Evaluation, Criterion.name, Criterion.weight, User.full_name)
        .join(Criterion, Criterion.id == Evaluation.criterion_id)
        .join(User, User.id == Evaluation.evaluator_id)
        .where(Evaluation.employee_id == employee.id)
        .where(Evaluation.period_id == period_id)
        .order_by(Criterion.name, Evaluation.evaluator_id)
    )
    return [
        EvaluationDetail(
            id=evaluation.id,
            criteria_id=evaluation.criterion_id,
            criteria_name=criteria_name,
            weight=weight,
            score=evaluation.score,
            comments=evaluation.comments,
            evaluator_id=evaluation.evaluator_id,
            evaluator_name=evaluator_name,
        )
        for evaluation, criteria_name, weight, evaluator_name in result.all()
    ]


@router.post("/submit", response_model=SubmitEvaluationResponse)
async def submit_evaluation(
    payload: EvaluationSubmit,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(require_roles("manager", "supervisor", "admin")),
    service: ScoringService = Depends(get_scoring_service),
):
    # Verify department access for managers
    result = await db.execute(select(Employee).where(Employee.id == payload.employee_id))
    employee = result.scalar_one_or_none()
    if not employee:
        raise HTTPException(404, "Employee not found")
    ensure_can_evaluate(current_user, employee)
    evaluator_id = current_user.id

    # the request session must not hold a transaction while the engine runs its own;
    # rollback expires current_user and employee, so only locals are used below
    await db.rollback()

    snapshot = await service.submit_evaluation(
        employee_id=payload.employee_id,
        evaluator_id=evaluator_id,
        period_id=payload.period_id,
        criterion_scores=[
            CriterionScore(criterion_id=item.criteria_id, score=item.score, comments=item.comments)
            for item in payload.evaluations
        ],
    )
    return SubmitEvaluationResponse(
        message="Evaluation submitted successfully",
        score=EmployeeScoreResponse.model_validate(snapshot) if snapshot else None,
    )


@router.post("/recalculate/{period_id}", response_model=RecalculateResponse)
async def recalculate_period(
    period_id: int,
    current_user = Depends(require_roles("admin", "supervisor")),
    service: ScoringService = Depends(get_scoring_service),
):
    snapshots = await service.recalculate_period(period_id)
    return RecalculateResponse(
        message="Scores recalculated successfully",
        period_id=period_id,
        snapshots=snapshots,
    )
