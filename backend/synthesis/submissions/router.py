"""Submission endpoints."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..auth.models import User
from ..auth.service import get_current_active_user
from ..database import get_db
from .schemas import SubmissionSave, SubmissionResponse, SubmissionList
from .service import SubmissionService

router = APIRouter(tags=["Submissions"])


def get_submission_service(db: Session = Depends(get_db)) -> SubmissionService:
    return SubmissionService(db)


@router.get("/assignments/{assignment_id}/submissions", response_model=SubmissionList)
async def list_submissions(
    assignment_id: str,
    current_user: User = Depends(get_current_active_user),
    service: SubmissionService = Depends(get_submission_service),
):
    return {"items": service.list_submissions(current_user, assignment_id)}


@router.post("/assignments/{assignment_id}/submissions", response_model=SubmissionResponse)
async def save_draft(
    assignment_id: str,
    data: SubmissionSave,
    response: Response,
    current_user: User = Depends(get_current_active_user),
    service: SubmissionService = Depends(get_submission_service),
):
    """Save work in progress. 201 when a new draft is started, 200 when the latest draft is updated."""
    submission, created = service.save_draft(current_user, assignment_id, data)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return submission


@router.get("/assignments/{assignment_id}/submissions/draft", response_model=SubmissionResponse)
async def get_draft(
    assignment_id: str,
    current_user: User = Depends(get_current_active_user),
    service: SubmissionService = Depends(get_submission_service),
):
    return service.get_draft(current_user, assignment_id)


@router.post("/submissions/{submission_id}/submit", response_model=SubmissionResponse)
async def submit(
    submission_id: str,
    current_user: User = Depends(get_current_active_user),
    service: SubmissionService = Depends(get_submission_service),
):
    """Finalize a submission; grading runs when its report is first requested."""
    return service.submit(current_user, submission_id)
