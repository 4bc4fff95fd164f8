from pydantic import BaseModel
from datetime import datetime
from typing import Optional

class EmployeeScoreResponse(BaseModel):
    employee_id: int
    period_id: int
    total_score: float
    weighted_score: float
    rank_overall: Optional[int]
    rank_in_department: Optional[int]
    is_best_overall: bool
    is_best_in_department: bool
    calculated_at: datetime

    model_config = {"from_attributes": True}

class SubmitEvaluationResponse(BaseModel):
    message: str
    score: Optional[EmployeeScoreResponse] = None

class RecalculateResponse(BaseModel):
    message: str
    period_id: int
    snapshots: int
