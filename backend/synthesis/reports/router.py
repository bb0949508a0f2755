"""Growth report endpoints."""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..ai import AIClient, get_ai_client
from ..auth.models import User
from ..auth.service import get_current_active_user
from ..database import get_db
from .schemas import ReportResponse, GradingInProgress, FollowUpResponse
from .service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(
    db: Session = Depends(get_db),
    ai: AIClient = Depends(get_ai_client),
) -> ReportService:
    return ReportService(db, ai)


@router.get(
    "/{submission_id}",
    response_model=ReportResponse,
    responses={202: {"model": GradingInProgress}},
)
def get_report(
    submission_id: str,
    current_user: User = Depends(get_current_active_user),
    service: ReportService = Depends(get_report_service),
):
    """
    Growth report for a submission.

    Grades on first request. Returns 202 with the grading status while
    another request holds the grading claim.
    """
    report = service.get_or_grade(current_user, submission_id)
    if report is None:
        grading_status = service.grading_status(current_user, submission_id)
        return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content={"status": grading_status.value})
    return report


@router.post("/{report_id}/follow-up", response_model=FollowUpResponse, status_code=status.HTTP_201_CREATED)
def create_follow_up(
    report_id: str,
    current_user: User = Depends(get_current_active_user),
    service: ReportService = Depends(get_report_service),
):
    assignment = service.create_follow_up(current_user, report_id)
    return {"assignment_id": assignment.id}
