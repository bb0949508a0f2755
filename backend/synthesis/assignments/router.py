"""Assignment endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..ai import AIClient, get_ai_client
from ..auth.models import User
from ..auth.service import get_current_active_user
from ..database import get_db
from ..models.assignment import AssignmentStatus
from ..pagination import Paging
from .schemas import (
    AssignmentCreate, AssignmentResponse, AssignmentList, RubricEnvelope,
    QuizResponse, EvaluateShortAnswersRequest, EvaluationsResponse,
)
from .service import AssignmentService

router = APIRouter(prefix="/assignments", tags=["Assignments"])


def get_assignment_service(
    db: Session = Depends(get_db),
    ai: AIClient = Depends(get_ai_client),
) -> AssignmentService:
    """Dependency to get an instance of AssignmentService."""
    return AssignmentService(db, ai)


@router.get("", response_model=AssignmentList)
async def list_assignments(
    paging: Paging = Depends(),
    status_filter: Optional[AssignmentStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_active_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Assignment history, newest first, optionally filtered by status."""
    return {"items": service.list_assignments(current_user, paging.limit, paging.offset, status_filter)}


@router.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def create_assignment(
    data: AssignmentCreate,
    current_user: User = Depends(get_current_active_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Create an assignment from a topic and optional linked resources."""
    return service.create_from_topic(current_user, data.topic, data.resource_ids, data.format)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment(
    assignment_id: str,
    current_user: User = Depends(get_current_active_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    return service.get_assignment(current_user, assignment_id)


@router.get("/{assignment_id}/rubric", response_model=RubricEnvelope)
async def get_assignment_rubric(
    assignment_id: str,
    current_user: User = Depends(get_current_active_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Rubric to show before submitting; null for quizzes."""
    return {"rubric": service.get_rubric(current_user, assignment_id)}


@router.post("/{assignment_id}/quiz", response_model=QuizResponse)
def generate_quiz(
    assignment_id: str,
    current_user: User = Depends(get_current_active_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    return {"items": service.generate_quiz(current_user, assignment_id)}


@router.post("/{assignment_id}/evaluate-short-answers", response_model=EvaluationsResponse)
def evaluate_short_answers(
    assignment_id: str,
    data: EvaluateShortAnswersRequest,
    current_user: User = Depends(get_current_active_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    items = [a.model_dump() for a in data.short_answers]
    return {"evaluations": service.evaluate_short_answers(current_user, assignment_id, items)}
