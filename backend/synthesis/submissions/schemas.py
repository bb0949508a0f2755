"""Request/response schemas for submissions."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.submission import SubmissionState, GradingStatus


class SubmissionSave(BaseModel):
    """Draft body; for quizzes ``body_text`` is the JSON-encoded answer payload."""
    body_text: Optional[str] = Field(None, max_length=200_000)
    file_ref: Optional[str] = Field(None, max_length=500)


class SubmissionResponse(BaseModel):
    id: str
    assignment_id: str
    state: SubmissionState
    grading_status: GradingStatus
    body_text: Optional[str] = None
    file_ref: Optional[str] = None
    submitted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    has_report: bool = False

    model_config = ConfigDict(from_attributes=True)


class SubmissionList(BaseModel):
    items: List[SubmissionResponse]
