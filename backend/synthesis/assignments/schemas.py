"""Request/response schemas for assignments."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.assignment import AssignmentType, AssignmentStatus, AssignmentFormat


class AssignmentCreate(BaseModel):
    topic: str = Field(..., max_length=2000)
    resource_ids: List[str] = []
    format: Optional[AssignmentFormat] = None

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('topic is required (e.g. "I want a test on X").')
        return v


class AssignmentResponse(BaseModel):
    id: str
    type: AssignmentType
    title: Optional[str] = None
    prompt: Optional[str] = None
    topic: Optional[str] = None
    format: Optional[AssignmentFormat] = None
    resource_ids: List[str] = []
    status: AssignmentStatus
    rubric_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("resource_ids", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []


class AssignmentList(BaseModel):
    items: List[AssignmentResponse]


class RubricResponse(BaseModel):
    id: str
    name: str
    criteria: List[Dict[str, Any]] = []

    model_config = ConfigDict(from_attributes=True)


class RubricEnvelope(BaseModel):
    rubric: Optional[RubricResponse] = None


class QuizItem(BaseModel):
    id: str
    type: str = "mcq"
    question: str
    options: Optional[List[str]] = None
    correct_index: Optional[int] = None


class QuizResponse(BaseModel):
    items: List[QuizItem]


class ShortAnswer(BaseModel):
    question: str
    user_answer: str


class EvaluateShortAnswersRequest(BaseModel):
    short_answers: List[ShortAnswer] = Field(..., min_length=1)


class ShortAnswerEvaluation(BaseModel):
    question: str
    user_answer: str
    evaluation: str
    score: float


class EvaluationsResponse(BaseModel):
    evaluations: List[ShortAnswerEvaluation]
