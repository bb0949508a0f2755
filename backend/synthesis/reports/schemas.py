"""Growth report schemas."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..models.enums import CompetencyLevel
from ..models.submission import GradingStatus


class RubricRow(BaseModel):
    criterion_id: str
    score_or_feedback: str
    performance_note: str


class ReportResponse(BaseModel):
    id: str
    submission_id: str
    score: float
    competency_level: CompetencyLevel
    rubric_breakdown: List[RubricRow] = []
    evaluation_details: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("rubric_breakdown", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []


class GradingInProgress(BaseModel):
    status: GradingStatus


class FollowUpResponse(BaseModel):
    assignment_id: str
