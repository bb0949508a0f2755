"""Draft and submit workflow."""
import logging
from datetime import datetime, UTC
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..assignments.service import AssignmentService
from ..auth.models import User
from ..errors import bad_request, not_found
from ..models.assignment import AssignmentStatus
from ..models.submission import Submission, SubmissionState, GradingStatus
from .schemas import SubmissionSave

logger = logging.getLogger(__name__)


class SubmissionService:
    def __init__(self, db: Session):
        self.db = db
        self.assignments = AssignmentService(db)

    def list_submissions(self, user: User, assignment_id: str) -> List[Submission]:
        """Own submissions for an assignment, newest first."""
        assignment = self.assignments.get_assignment(user, assignment_id)
        return (
            self.db.query(Submission)
            .filter(Submission.assignment_id == assignment.id, Submission.user_id == user.id)
            .order_by(Submission.created_at.desc())
            .all()
        )

    def latest_draft(self, user: User, assignment_id: str) -> Optional[Submission]:
        return (
            self.db.query(Submission)
            .filter(
                Submission.assignment_id == assignment_id,
                Submission.user_id == user.id,
                Submission.state == SubmissionState.draft,
            )
            .order_by(Submission.updated_at.desc())
            .first()
        )

    def get_draft(self, user: User, assignment_id: str) -> Submission:
        self.assignments.get_assignment(user, assignment_id)
        draft = self.latest_draft(user, assignment_id)
        if not draft:
            raise not_found("No draft for this assignment.")
        return draft

    def save_draft(self, user: User, assignment_id: str, data: SubmissionSave) -> Tuple[Submission, bool]:
        """
        Update the latest draft or start a new one.

        Returns:
            ``(submission, created)``
        """
        assignment = self.assignments.get_assignment(user, assignment_id)
        draft = self.latest_draft(user, assignment.id)
        created = draft is None

        if created:
            draft = Submission(
                assignment_id=assignment.id,
                user_id=user.id,
                state=SubmissionState.draft,
                grading_status=GradingStatus.pending,
                body_text=data.body_text,
                file_ref=data.file_ref,
            )
            self.db.add(draft)
        else:
            if "body_text" in data.model_fields_set:
                draft.body_text = data.body_text
            if "file_ref" in data.model_fields_set:
                draft.file_ref = data.file_ref

        if assignment.status == AssignmentStatus.draft:
            assignment.status = AssignmentStatus.in_progress

        self.db.commit()
        self.db.refresh(draft)
        return draft, created

    def get_submission(self, user: User, submission_id: str) -> Submission:
        submission = self.db.query(Submission).filter(
            Submission.id == submission_id,
            Submission.user_id == user.id,
        ).first()
        if not submission:
            raise not_found("Submission not found.")
        return submission

    def submit(self, user: User, submission_id: str) -> Submission:
        """Finalize a draft and queue it for grading; a failed submission is re-queued."""
        submission = self.get_submission(user, submission_id)
        if submission.state == SubmissionState.submitted and not submission.has_failed:
            raise bad_request("Submission was already submitted.")

        if submission.has_failed:
            logger.info(f"Re-queueing failed submission {submission.id} for grading")

        submission.state = SubmissionState.submitted
        submission.grading_status = GradingStatus.pending
        submission.grading_started_at = None
        submission.submitted_at = datetime.now(UTC)
        submission.assignment.status = AssignmentStatus.submitted

        self.db.commit()
        self.db.refresh(submission)
        return submission
