# app/models/score.py
from sqlalchemy import Column, Integer, Float, Boolean, DateTime, ForeignKey, UniqueConstraint
from app.database import Base

class EmployeeScore(Base):
    """One row per (employee, period); every recomputation replaces all fields."""
    __tablename__ = "employee_scores"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    period_id = Column(Integer, ForeignKey("evaluation_periods.id"), nullable=False, index=True)

    total_score = Column(Float, nullable=False)
    weighted_score = Column(Float, nullable=False)

    rank_overall = Column(Integer, nullable=True)
    rank_in_department = Column(Integer, nullable=True)
    is_best_overall = Column(Boolean, default=False, nullable=False)
    is_best_in_department = Column(Boolean, default=False, nullable=False)

    calculated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "period_id", name="uq_employee_period"),
    )
