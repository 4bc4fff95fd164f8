"""Read models for dashboards and reports. Everything here reads snapshots; nothing recomputes them."""
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_
from app.core.exceptions import PeriodNotFoundError
from app.models.criterion import Criterion
from app.models.department import Department
from app.models.employee import Employee
from app.models.evaluation import Evaluation
from app.models.period import EvaluationPeriod
from app.models.score import EmployeeScore
from app.models.user import User
from app.schemas.evaluation import CriterionResponse, PeriodResponse
from app.schemas.report import (
    DashboardStats,
    DepartmentRanking,
    EvaluationReport,
    RankedEmployee,
    ReportEvaluationItem,
)


async def get_period(db: AsyncSession, period_id: int) -> EvaluationPeriod:
    result = await db.execute(select(EvaluationPeriod).where(EvaluationPeriod.id == period_id))
    period = result.scalar_one_or_none()
    if period is None:
        raise PeriodNotFoundError(period_id)
    return period


def _ranked_employee(employee: Employee, department_name: str, score: Optional[EmployeeScore]) -> RankedEmployee:
    item = RankedEmployee(
        id=employee.id,
        employee_code=employee.employee_code,
        full_name=employee.full_name,
        position=employee.position,
        department_id=employee.department_id,
        department_name=department_name,
    )
    if score is not None:
        item.total_score = score.total_score
        item.weighted_score = score.weighted_score
        item.rank_overall = score.rank_overall
        item.rank_in_department = score.rank_in_department
        item.is_best_overall = score.is_best_overall
        item.is_best_in_department = score.is_best_in_department
    return item


async def _scored_employees(
    db: AsyncSession,
    period_id: int,
    department_id: Optional[int] = None,
    include_unscored: bool = False,
):
    """(Employee, department name, snapshot or None) for active employees, best score first."""
    score_join = and_(EmployeeScore.employee_id == Employee.id, EmployeeScore.period_id == period_id)
    query = (
        select(Employee, Department.name, EmployeeScore)
        .join(Department, Department.id == Employee.department_id)
        .where(Employee.is_active.is_(True))
    )
    if include_unscored:
        query = query.outerjoin(EmployeeScore, score_join)
    else:
        query = query.join(EmployeeScore, score_join)
    if department_id is not None:
        query = query.where(Employee.department_id == department_id)
    query = query.order_by(EmployeeScore.weighted_score.desc().nulls_last(), Employee.full_name)

    result = await db.execute(query)
    return result.all()


async def get_dashboard_stats(
    db: AsyncSession, period_id: Optional[int] = None, department_id: Optional[int] = None
) -> DashboardStats:
    # 1. Active employees (scoped for managers)
    employee_query = select(func.count(Employee.id)).where(Employee.is_active.is_(True))
    if department_id is not None:
        employee_query = employee_query.where(Employee.department_id == department_id)
    total_employees = (await db.execute(employee_query)).scalar_one()

    # 2. Active periods
    active_periods = (
        await db.execute(select(func.count(EvaluationPeriod.id)).where(EvaluationPeriod.is_active.is_(True)))
    ).scalar_one()

    # 3. Evaluations recorded
    evaluation_query = select(func.count(Evaluation.id))
    if period_id is not None:
        evaluation_query = evaluation_query.where(Evaluation.period_id == period_id)
    if department_id is not None:
        evaluation_query = (
            evaluation_query.join(Employee, Employee.id == Evaluation.employee_id)
            .where(Employee.department_id == department_id)
        )
    completed_evaluations = (await db.execute(evaluation_query)).scalar_one()

    # 4. Departments
    total_departments = (await db.execute(select(func.count(Department.id)))).scalar_one()

    return DashboardStats(
        total_employees=total_employees,
        active_periods=active_periods,
        completed_evaluations=completed_evaluations,
        total_departments=total_departments,
    )


async def get_top_performers(
    db: AsyncSession, period_id: int, department_id: Optional[int] = None, limit: int = 10
) -> List[RankedEmployee]:
    await get_period(db, period_id)
    rows = await _scored_employees(db, period_id, department_id)
    return [_ranked_employee(employee, name, score) for employee, name, score in rows[:limit]]


async def get_department_rankings(
    db: AsyncSession, period_id: int, include_unscored: bool = False
) -> List[DepartmentRanking]:
    """
    Per-department summary of a period.

    With include_unscored the employee count covers every active employee of
    the department, and departments without any snapshot are still listed.
    """
    await get_period(db, period_id)
    rows = await _scored_employees(db, period_id, include_unscored=include_unscored)

    summaries: Dict[int, dict] = {}
    for employee, department_name, score in rows:
        summary = summaries.setdefault(employee.department_id, {
            "department_id": employee.department_id,
            "department_name": department_name,
            "employee_count": 0,
            "scores": [],
            "best_employee": None,
        })
        summary["employee_count"] += 1
        if score is None:
            continue
        summary["scores"].append(score.weighted_score)
        # rows come sorted by score then name, so the first best wins the label
        if score.is_best_in_department and summary["best_employee"] is None:
            summary["best_employee"] = employee.full_name

    rankings = []
    for summary in summaries.values():
        scores = summary.pop("scores")
        rankings.append(DepartmentRanking(
            **summary,
            avg_score=round(sum(scores) / len(scores), 4) if scores else None,
            best_score=max(scores) if scores else None,
            lowest_score=min(scores) if scores else None,
        ))

    rankings.sort(key=lambda r: (r.avg_score is None, -(r.avg_score or 0.0), r.department_name))
    return rankings


async def get_evaluation_report(
    db: AsyncSession, period_id: int, department_id: Optional[int] = None
) -> EvaluationReport:
    period = await get_period(db, period_id)
    rows = await _scored_employees(db, period_id, department_id, include_unscored=True)

    criteria_result = await db.execute(
        select(Criterion).where(Criterion.is_active.is_(True)).order_by(Criterion.name)
    )
    criteria = criteria_result.scalars().all()

    scored_ids = [employee.id for employee, _, score in rows if score is not None]
    evaluations: Dict[int, List[ReportEvaluationItem]] = {employee_id: [] for employee_id in scored_ids}
    if scored_ids:
        detail = await db.execute(
            select(Evaluation, Criterion.name, Criterion.weight, User.full_name)
            .join(Criterion, Criterion.id == Evaluation.criterion_id)
            .join(User, User.id == Evaluation.evaluator_id)
            .where(Evaluation.period_id == period_id)
            .where(Evaluation.employee_id.in_(scored_ids))
            .order_by(Evaluation.employee_id, Criterion.name, Evaluation.evaluator_id)
        )
        for evaluation, criteria_name, weight, evaluator_name in detail.all():
            evaluations[evaluation.employee_id].append(ReportEvaluationItem(
                criteria_name=criteria_name,
                weight=weight,
                score=evaluation.score,
                comments=evaluation.comments,
                evaluator_name=evaluator_name,
            ))

    return EvaluationReport(
        period=PeriodResponse.model_validate(period),
        employees=[_ranked_employee(employee, name, score) for employee, name, score in rows],
        criteria=[CriterionResponse.model_validate(c) for c in criteria],
        evaluations=evaluations,
    )
