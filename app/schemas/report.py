from pydantic import BaseModel
from typing import Optional, List, Dict
from .evaluation import CriterionResponse, PeriodResponse

class RankedEmployee(BaseModel):
    id: int
    employee_code: str
    full_name: str
    position: Optional[str]
    department_id: int
    department_name: str
    total_score: Optional[float] = None
    weighted_score: Optional[float] = None
    rank_overall: Optional[int] = None
    rank_in_department: Optional[int] = None
    is_best_overall: bool = False
    is_best_in_department: bool = False

class DashboardStats(BaseModel):
    total_employees: int
    active_periods: int
    completed_evaluations: int
    total_departments: int

class DepartmentRanking(BaseModel):
    department_id: int
    department_name: str
    employee_count: int
    avg_score: Optional[float]
    best_score: Optional[float]
    lowest_score: Optional[float] = None
    best_employee: Optional[str]

class ReportEvaluationItem(BaseModel):
    criteria_name: str
    weight: float
    score: int
    comments: Optional[str]
    evaluator_name: str

class EvaluationReport(BaseModel):
    period: PeriodResponse
    employees: List[RankedEmployee]
    criteria: List[CriterionResponse]
    evaluations: Dict[int, List[ReportEvaluationItem]]
