from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, List

class CriterionResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    category: str
    weight: float
    is_active: bool

    model_config = {"from_attributes": True}

class PeriodResponse(BaseModel):
    id: int
    name: str
    type: str
    start_date: date
    end_date: date
    is_active: bool

    model_config = {"from_attributes": True}

class CriterionScoreIn(BaseModel):
    criteria_id: int
    score: int = Field(..., ge=1, le=5)
    comments: Optional[str] = Field(None, max_length=2000)

class EvaluationSubmit(BaseModel):
    employee_id: int
    period_id: int
    evaluations: List[CriterionScoreIn] = Field(..., min_length=1)

class EvaluationDetail(BaseModel):
    id: int
    criteria_id: int
    criteria_name: str
    weight: float
    score: int
    comments: Optional[str]
    evaluator_id: int
    evaluator_name: str
