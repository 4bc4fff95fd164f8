# tests/conftest.py

"""
Pytest fixtures shared by the engine and API tests.

SEED DATA REFERENCE:
- Departments: 1 Engineering, 2 Sales
- Employees:   1 Alice (Eng), 2 Bob (Eng), 3 Carol (Sales), 4 Dave (Sales, never evaluated)
- Users:       1 admin, 2 manager (Eng), 3 supervisor, 4 manager (Sales), 5 staff (role employee)
- Criteria:    1 Quality 40, 2 Teamwork 30, 3 Delivery 30, 4 Legacy 50 (inactive)
- Periods:     1 Q1 2026 (active), 2 Q2 2026
"""

import asyncio
import os
import tempfile
from datetime import date
from types import SimpleNamespace

# must be set before app modules are imported
_TMP_DIR = tempfile.mkdtemp(prefix="employee-dss-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'app.db')}"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.database import Base
from app.models.criterion import Criterion
from app.models.department import Department
from app.models.employee import Employee
from app.models.period import EvaluationPeriod
from app.models.user import User
from app.services.recompute import ScoringService
from app.utils.password import hash_password

PASSWORD = "secret-pass-123"


def run(coro):
    """Drive a coroutine to completion from a synchronous test."""
    return asyncio.run(coro)


async def _create_schema(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _seed(session_factory):
    hashed = hash_password(PASSWORD)
    async with session_factory() as session:
        async with session.begin():
            session.add_all([
                Department(id=1, name="Engineering"),
                Department(id=2, name="Sales"),
            ])
            await session.flush()
            session.add_all([
                Employee(id=1, employee_code="E001", full_name="Alice", position="Engineer", department_id=1),
                Employee(id=2, employee_code="E002", full_name="Bob", position="Engineer", department_id=1),
                Employee(id=3, employee_code="E003", full_name="Carol", position="Account Exec", department_id=2),
                Employee(id=4, employee_code="E004", full_name="Dave", position="Account Exec", department_id=2),
                User(id=1, username="admin", email="admin@example.com", full_name="Ada Admin",
                     hashed_password=hashed, role="admin"),
                User(id=2, username="eng_manager", email="eng@example.com", full_name="Erin Manager",
                     hashed_password=hashed, role="manager", department_id=1),
                User(id=3, username="supervisor", email="sup@example.com", full_name="Sam Supervisor",
                     hashed_password=hashed, role="supervisor"),
                User(id=4, username="sales_manager", email="sales@example.com", full_name="Sid Manager",
                     hashed_password=hashed, role="manager", department_id=2),
                User(id=5, username="staff", email="staff@example.com", full_name="Stan Staff",
                     hashed_password=hashed, role="employee", department_id=1),
                Criterion(id=1, name="Quality", category="Performance", weight=40.0),
                Criterion(id=2, name="Teamwork", category="Behaviour", weight=30.0),
                Criterion(id=3, name="Delivery", category="Performance", weight=30.0),
                Criterion(id=4, name="Legacy", category="Other", weight=50.0, is_active=False),
                EvaluationPeriod(id=1, name="Q1 2026", type="quarterly",
                                 start_date=date(2026, 1, 1), end_date=date(2026, 3, 31), is_active=True),
                EvaluationPeriod(id=2, name="Q2 2026", type="quarterly",
                                 start_date=date(2026, 4, 1), end_date=date(2026, 6, 30)),
            ])


@pytest.fixture
def session_factory(tmp_path):
    """Fresh seeded SQLite database per test; NullPool so every asyncio.run gets its own connections."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'scoring.db'}", poolclass=NullPool)
    run(_create_schema(engine))
    factory = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    run(_seed(factory))
    yield factory
    run(engine.dispose())


@pytest.fixture
def service(session_factory):
    return ScoringService(session_factory)


@pytest.fixture
def ids():
    return SimpleNamespace(
        engineering=1, sales=2,
        alice=1, bob=2, carol=3, dave=4,
        admin=1, eng_manager=2, supervisor=3, sales_manager=4, staff=5,
        quality=1, teamwork=2, delivery=3, legacy=4,
        q1=1, q2=2,
    )
