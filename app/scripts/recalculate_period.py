"""
Rebuild scores and rankings for evaluation periods from raw evaluations.

Usage:
    python -m app.scripts.recalculate_period 3            # one period
    python -m app.scripts.recalculate_period 3 4 7        # several, one run each
    python -m app.scripts.recalculate_period --all        # every period
"""

import argparse
import asyncio
import logging
import sys

from sqlalchemy import select

from app.config import settings
from app.core.exceptions import ScoringException
from app.core.logging import configure_logging
from app.database import AsyncSessionLocal, engine
from app.models.period import EvaluationPeriod
from app.services.recompute import ScoringService

logger = logging.getLogger(__name__)


async def _all_period_ids():
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(EvaluationPeriod.id).order_by(EvaluationPeriod.id))
        return list(result.scalars().all())


async def run(period_ids, recalc_all: bool = False) -> int:
    service = ScoringService(AsyncSessionLocal)
    if recalc_all:
        period_ids = await _all_period_ids()

    failures = 0
    for period_id in period_ids:
        try:
            count = await service.recalculate_period(period_id)
            logger.info("Period %s: %d snapshots ranked", period_id, count)
        except ScoringException as e:
            failures += 1
            logger.error("Period %s FAILED: %s", period_id, e)

    await engine.dispose()
    return failures


def main():
    ap = argparse.ArgumentParser(description="Recalculate employee scores and rankings for evaluation periods")
    ap.add_argument("period_ids", nargs="*", type=int, help="Evaluation period ids")
    ap.add_argument("--all", action="store_true", help="Recalculate every period")
    args = ap.parse_args()

    if not args.period_ids and not args.all:
        ap.error("give at least one period id or --all")

    configure_logging(settings.LOG_LEVEL)
    failures = asyncio.run(run(args.period_ids, recalc_all=args.all))
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
