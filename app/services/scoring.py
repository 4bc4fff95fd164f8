from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.config import settings
from app.models.evaluation import Evaluation
from app.models.criterion import Criterion


@dataclass(frozen=True)
class WeightedScore:
    criterion_id: int
    evaluator_id: int
    score: int
    weight: float


@dataclass(frozen=True)
class ScoreAggregate:
    total_score: float
    weighted_score: float


async def fetch_weighted_scores(
    db: AsyncSession, employee_id: int, period_id: int
) -> List[WeightedScore]:
    """Raw scores for the pair joined to the current weight of each active criterion."""
    result = await db.execute(
        select(Evaluation.criterion_id, Evaluation.evaluator_id, Evaluation.score, Criterion.weight)
        .join(Criterion, Criterion.id == Evaluation.criterion_id)
        .where(Evaluation.employee_id == employee_id)
        .where(Evaluation.period_id == period_id)
        .where(Criterion.is_active.is_(True))
        .order_by(Evaluation.criterion_id, Evaluation.evaluator_id)
    )
    return [
        WeightedScore(
            criterion_id=row.criterion_id,
            evaluator_id=row.evaluator_id,
            score=int(row.score),
            weight=float(row.weight or 0.0),
        )
        for row in result.all()
    ]


async def fetch_period_weighted_scores(
    db: AsyncSession, period_id: int
) -> Dict[int, List[WeightedScore]]:
    """Same join as fetch_weighted_scores for every employee in the period, grouped by employee."""
    result = await db.execute(
        select(
            Evaluation.employee_id,
            Evaluation.criterion_id,
            Evaluation.evaluator_id,
            Evaluation.score,
            Criterion.weight,
        )
        .join(Criterion, Criterion.id == Evaluation.criterion_id)
        .where(Evaluation.period_id == period_id)
        .where(Criterion.is_active.is_(True))
        .order_by(Evaluation.employee_id, Evaluation.criterion_id, Evaluation.evaluator_id)
    )
    grouped: Dict[int, List[WeightedScore]] = {}
    for row in result.all():
        grouped.setdefault(row.employee_id, []).append(
            WeightedScore(
                criterion_id=row.criterion_id,
                evaluator_id=row.evaluator_id,
                score=int(row.score),
                weight=float(row.weight or 0.0),
            )
        )
    return grouped


def aggregate_scores(rows: Iterable[WeightedScore], precision: Optional[int] = None) -> Optional[ScoreAggregate]:
    """
    Simple Additive Weighting.

    weighted_score is the weight-normalised mean of the scores present, so it
    stays on the 1–5 scale whatever subset of criteria was scored. Returns None
    when there is nothing to aggregate; callers must not store a zero for that.
    """
    rows = list(rows)
    if not rows:
        return None
    if precision is None:
        precision = settings.SCORE_PRECISION

    total_score = sum(row.score for row in rows)
    total_weight = sum(row.weight for row in rows)
    weighted_sum = sum(row.score * row.weight for row in rows)

    weighted_score = weighted_sum / total_weight if total_weight > 0 else 0.0

    return ScoreAggregate(
        total_score=float(total_score),
        weighted_score=round(weighted_score, precision),
    )


async def calculate_employee_score(
    db: AsyncSession, employee_id: int, period_id: int
) -> Optional[ScoreAggregate]:
    rows = await fetch_weighted_scores(db, employee_id, period_id)
    return aggregate_scores(rows)
