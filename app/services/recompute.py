"""
Recomputation orchestrator.

Every run (one employee's submission, or a whole period) is a single
transaction: raw evaluation changes, snapshot upserts and the period-wide
re-rank commit together or not at all. Runs for the same period are
serialized; different periods use different locks.
"""
import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.core.exceptions import (
    EmployeeNotFoundError,
    EvaluationValidationError,
    PeriodNotFoundError,
    TransactionFailure,
)
from app.models.criterion import Criterion
from app.models.employee import Employee
from app.models.evaluation import Evaluation
from app.models.period import EvaluationPeriod
from app.models.score import EmployeeScore
from app.services.ranking import RankingEntry, resolve_rankings
from app.services.scoring import (
    ScoreAggregate,
    aggregate_scores,
    calculate_employee_score,
    fetch_period_weighted_scores,
)

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5


@dataclass(frozen=True)
class CriterionScore:
    criterion_id: int
    score: int
    comments: Optional[str] = None


def validate_criterion_scores(criterion_scores: Iterable[CriterionScore]) -> List[CriterionScore]:
    scores = list(criterion_scores)
    if not scores:
        raise EvaluationValidationError("At least one criterion score is required")

    seen = set()
    for item in scores:
        if isinstance(item.score, bool) or not isinstance(item.score, int):
            raise EvaluationValidationError(f"Score for criterion {item.criterion_id} must be an integer")
        if not MIN_SCORE <= item.score <= MAX_SCORE:
            raise EvaluationValidationError(
                f"Score for criterion {item.criterion_id} must be between {MIN_SCORE} and {MAX_SCORE}"
            )
        if item.criterion_id in seen:
            raise EvaluationValidationError(f"Criterion {item.criterion_id} appears more than once")
        seen.add(item.criterion_id)
    return scores


class ScoringService:
    """Entry points of the scoring engine: submissions, bulk recalculation and snapshot reads."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        *,
        isolation_level: Optional[str] = None,
    ) -> None:
        self._session_factory = session_factory
        self._isolation_level = isolation_level or settings.SCORING_ISOLATION_LEVEL
        # entries vanish once no run holds or waits on the lock
        self._period_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    async def submit_evaluation(
        self,
        employee_id: int,
        evaluator_id: int,
        period_id: int,
        criterion_scores: Sequence[CriterionScore],
    ) -> Optional[EmployeeScore]:
        """
        Replace the evaluator's scores for (employee, period), then recompute
        that employee's snapshot and re-rank the whole period.

        Returns the employee's new snapshot, or None when no active criterion
        was scored for them in the period.
        """
        scores = validate_criterion_scores(criterion_scores)

        async with self._session_factory() as session:
            await self._require_employee(session, employee_id)
            await self._require_period(session, period_id)
            await self._require_active_criteria(session, [item.criterion_id for item in scores])

        calculated_at = datetime.now(timezone.utc)
        async with self._period_transaction(period_id) as session:
            await self._replace_evaluations(session, employee_id, evaluator_id, period_id, scores)
            aggregate = await calculate_employee_score(session, employee_id, period_id)
            existing = await self._load_snapshots(session, period_id, employee_id=employee_id)
            snapshot = await self._write_snapshot(
                session, existing.get(employee_id), employee_id, period_id, aggregate, calculated_at
            )
            ranked = await self._rerank_period(session, period_id)

        logger.info(
            "Evaluation submitted: employee=%s evaluator=%s period=%s criteria=%d ranked=%d",
            employee_id, evaluator_id, period_id, len(scores), ranked,
        )
        return snapshot

    async def recalculate_period(self, period_id: int) -> int:
        """Rebuild every snapshot of the period from raw evaluations. Returns the number of snapshots."""
        async with self._session_factory() as session:
            await self._require_period(session, period_id)

        calculated_at = datetime.now(timezone.utc)
        async with self._period_transaction(period_id) as session:
            grouped = await fetch_period_weighted_scores(session, period_id)
            existing = await self._load_snapshots(session, period_id)

            for employee_id, rows in grouped.items():
                await self._write_snapshot(
                    session, existing.get(employee_id), employee_id, period_id,
                    aggregate_scores(rows), calculated_at,
                )

            # employees whose raw data disappeared since the last run
            for employee_id, stale in existing.items():
                if employee_id not in grouped:
                    await session.delete(stale)

            ranked = await self._rerank_period(session, period_id)

        logger.info("Period %s recalculated: %d snapshots", period_id, ranked)
        return ranked

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_snapshot(self, employee_id: int, period_id: int) -> Optional[EmployeeScore]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(EmployeeScore)
                .where(EmployeeScore.employee_id == employee_id)
                .where(EmployeeScore.period_id == period_id)
            )
            return result.scalar_one_or_none()

    async def list_snapshots(
        self, period_id: int, department_id: Optional[int] = None
    ) -> List[EmployeeScore]:
        """Snapshots of the period by weighted score, highest first. Department uses current membership."""
        async with self._session_factory() as session:
            await self._require_period(session, period_id)
            query = (
                select(EmployeeScore)
                .where(EmployeeScore.period_id == period_id)
                .order_by(EmployeeScore.weighted_score.desc())
            )
            if department_id is not None:
                query = (
                    query.join(Employee, Employee.id == EmployeeScore.employee_id)
                    .where(Employee.department_id == department_id)
                )
            result = await session.execute(query)
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Transaction scope
    # ------------------------------------------------------------------

    def _period_lock(self, period_id: int) -> asyncio.Lock:
        lock = self._period_locks.get(period_id)
        if lock is None:
            lock = asyncio.Lock()
            self._period_locks[period_id] = lock
        return lock

    @asynccontextmanager
    async def _period_transaction(self, period_id: int) -> AsyncIterator[AsyncSession]:
        """
        One locked transaction for a period.

        The asyncio lock only queues runs inside this process. Across worker
        processes the period row lock takes over; at SERIALIZABLE a run that
        waited on it fails with a serialization error, which surfaces as
        TransactionFailure for the caller to retry.
        """
        async with self._period_lock(period_id):
            async with self._session_factory() as session:
                try:
                    async with session.begin():
                        await session.connection(
                            execution_options={"isolation_level": self._isolation_level}
                        )
                        # row lock on the period for runs in other processes
                        await session.execute(
                            select(EvaluationPeriod.id)
                            .where(EvaluationPeriod.id == period_id)
                            .with_for_update()
                        )
                        yield session
                except SQLAlchemyError as exc:
                    logger.exception("Recomputation for period %s rolled back", period_id)
                    raise TransactionFailure() from exc

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _replace_evaluations(
        self,
        session: AsyncSession,
        employee_id: int,
        evaluator_id: int,
        period_id: int,
        scores: Sequence[CriterionScore],
    ) -> None:
        # only this evaluator's rows; other evaluators' scores stay untouched
        await session.execute(
            delete(Evaluation)
            .where(Evaluation.employee_id == employee_id)
            .where(Evaluation.evaluator_id == evaluator_id)
            .where(Evaluation.period_id == period_id)
        )
        session.add_all(
            Evaluation(
                employee_id=employee_id,
                evaluator_id=evaluator_id,
                period_id=period_id,
                criterion_id=item.criterion_id,
                score=item.score,
                comments=item.comments or "",
            )
            for item in scores
        )
        await session.flush()

    async def _load_snapshots(
        self, session: AsyncSession, period_id: int, employee_id: Optional[int] = None
    ) -> Dict[int, EmployeeScore]:
        query = select(EmployeeScore).where(EmployeeScore.period_id == period_id)
        if employee_id is not None:
            query = query.where(EmployeeScore.employee_id == employee_id)
        result = await session.execute(query)
        return {snapshot.employee_id: snapshot for snapshot in result.scalars().all()}

    async def _write_snapshot(
        self,
        session: AsyncSession,
        snapshot: Optional[EmployeeScore],
        employee_id: int,
        period_id: int,
        aggregate: Optional[ScoreAggregate],
        calculated_at: datetime,
    ) -> Optional[EmployeeScore]:
        if aggregate is None:
            # no data is not a zero score: the employee drops out of the period
            if snapshot is not None:
                await session.delete(snapshot)
            return None

        if snapshot is None:
            snapshot = EmployeeScore(employee_id=employee_id, period_id=period_id)
            session.add(snapshot)

        snapshot.total_score = aggregate.total_score
        snapshot.weighted_score = aggregate.weighted_score
        snapshot.calculated_at = calculated_at
        return snapshot

    async def _rerank_period(self, session: AsyncSession, period_id: int) -> int:
        await session.flush()
        result = await session.execute(
            select(EmployeeScore, Employee.department_id)
            .join(Employee, Employee.id == EmployeeScore.employee_id)
            .where(EmployeeScore.period_id == period_id)
        )
        rows = result.all()

        rankings = resolve_rankings(
            RankingEntry(
                employee_id=snapshot.employee_id,
                department_id=department_id,
                weighted_score=snapshot.weighted_score,
            )
            for snapshot, department_id in rows
        )
        for snapshot, _ in rows:
            ranking = rankings[snapshot.employee_id]
            snapshot.rank_overall = ranking.rank_overall
            snapshot.rank_in_department = ranking.rank_in_department
            snapshot.is_best_overall = ranking.is_best_overall
            snapshot.is_best_in_department = ranking.is_best_in_department

        await session.flush()
        return len(rows)

    # ------------------------------------------------------------------
    # Lookups (run before the transaction opens)
    # ------------------------------------------------------------------

    async def _require_employee(self, session: AsyncSession, employee_id: int) -> None:
        result = await session.execute(select(Employee.id).where(Employee.id == employee_id))
        if result.scalar_one_or_none() is None:
            raise EmployeeNotFoundError(employee_id)

    async def _require_period(self, session: AsyncSession, period_id: int) -> None:
        result = await session.execute(select(EvaluationPeriod.id).where(EvaluationPeriod.id == period_id))
        if result.scalar_one_or_none() is None:
            raise PeriodNotFoundError(period_id)

    async def _require_active_criteria(self, session: AsyncSession, criterion_ids: List[int]) -> None:
        result = await session.execute(
            select(Criterion.id)
            .where(Criterion.id.in_(criterion_ids))
            .where(Criterion.is_active.is_(True))
        )
        found = set(result.scalars().all())
        missing = sorted(set(criterion_ids) - found)
        if missing:
            raise EvaluationValidationError(
                f"Unknown or inactive criteria: {', '.join(str(c) for c in missing)}"
            )
