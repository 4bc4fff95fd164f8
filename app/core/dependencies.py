"""
FastAPI dependency injection for the scoring engine.
"""

from functools import lru_cache

from app.database import AsyncSessionLocal
from app.services.recompute import ScoringService


@lru_cache()
def get_scoring_service() -> ScoringService:
    """Get cached ScoringService instance (one per process, so period locks are shared)."""
    return ScoringService(AsyncSessionLocal)
