"""
Grading pipeline and growth reports.

A submitted submission is graded the first time its report is requested.
The request that moves ``grading_status`` from ``pending`` to ``grading``
(or re-claims a stale ``grading`` claim) is the only one that grades;
concurrent requests are told grading is under way.
"""
import logging
from datetime import datetime, timedelta, UTC
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..ai import AIClient, AIServiceError
from ..ai.generation import create_assignment_from_topic
from ..ai.grading import grade_short_answers, grade_submission
from ..assignments.service import AssignmentService
from ..auth.models import User
from ..config import GRADING_STALE_SECONDS
from ..errors import not_found, service_unavailable
from ..models.assignment import Assignment, rubric_id_for
from ..models.report import GrowthReport
from ..models.rubric import Rubric, DEFAULT_CRITERIA
from ..models.submission import Submission, GradingStatus
from ..quiz import grade_quiz_submission, parse_quiz_payload

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Reflect on the topic."
MAX_WEAK_AREAS = 5
RESUBMIT_MESSAGE = "Grading failed. You may retry by submitting again."


def weak_areas(breakdown: List[Dict[str, Any]], criterion_names: Dict[str, str]) -> List[str]:
    """Labels of breakdown rows that flag something to work on."""
    areas = []
    for row in breakdown or []:
        if not isinstance(row, dict):
            continue
        feedback = str(row.get("score_or_feedback") or "")
        note = str(row.get("performance_note") or "").lower()
        flagged = (
            "improve" in feedback.lower()
            or feedback.startswith("Incorrect")
            or "weak" in note
            or "gap" in note
        )
        if flagged:
            criterion_id = str(row.get("criterion_id") or "")
            areas.append(criterion_names.get(criterion_id) or criterion_id or "area")
    return areas[:MAX_WEAK_AREAS]


def follow_up_topic(areas: List[str]) -> str:
    if areas:
        return f"Follow-up practice on: {', '.join(areas)}"
    return "Follow-up practice based on your report"


class ReportService:
    def __init__(self, db: Session, ai: AIClient = None):
        self.db = db
        self.ai = ai

    def _get_submitted(self, user: User, submission_id: str) -> Submission:
        submission = self.db.query(Submission).filter(
            Submission.id == submission_id,
            Submission.user_id == user.id,
        ).first()
        if not submission:
            raise not_found("Submission not found.")
        if submission.is_draft:
            raise not_found("No report for draft submission.")
        return submission

    def _claim(self, submission: Submission) -> bool:
        """Conditionally move the submission into ``grading``; True if this call won."""
        now = datetime.now(UTC)
        stale_before = now - timedelta(seconds=GRADING_STALE_SECONDS)
        result = self.db.execute(
            update(Submission)
            .where(Submission.id == submission.id)
            .where(
                or_(
                    Submission.grading_status == GradingStatus.pending,
                    and_(
                        Submission.grading_status == GradingStatus.grading,
                        or_(
                            Submission.grading_started_at.is_(None),
                            Submission.grading_started_at < stale_before,
                        ),
                    ),
                )
            )
            .values(grading_status=GradingStatus.grading, grading_started_at=now)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    def _rubric_for(self, assignment: Assignment) -> Optional[Rubric]:
        rubric_id = assignment.rubric_id or rubric_id_for(assignment.type)
        return self.db.get(Rubric, rubric_id) if rubric_id else None

    def _criteria_for(self, assignment: Assignment) -> List[Dict[str, str]]:
        rubric = self._rubric_for(assignment)
        criteria = rubric.gradable_criteria() if rubric else []
        return criteria or list(DEFAULT_CRITERIA)

    def grade(self, submission: Submission) -> Dict[str, Any]:
        """Score a submission: quizzes locally plus AI for short answers, everything else against the rubric."""
        assignment = submission.assignment
        payload = parse_quiz_payload(submission.body_text) if assignment.is_quiz else None
        if payload is not None:
            return grade_quiz_submission(payload, lambda items: grade_short_answers(self.ai, items))

        result = grade_submission(
            self.ai,
            assignment.prompt or DEFAULT_PROMPT,
            submission.body_text or submission.file_ref or "",
            self._criteria_for(assignment),
        )
        result["evaluation_details"] = None
        return result

    def _mark_failed(self, submission_id: str):
        self.db.rollback()
        submission = self.db.get(Submission, submission_id)
        if submission:
            submission.grading_status = GradingStatus.failed
            self.db.commit()

    def get_or_grade(self, user: User, submission_id: str) -> Optional[GrowthReport]:
        """
        Return the report for a submission, grading it first if needed.

        Returns:
            The report, or None while another request is grading.

        Raises:
            HTTPException: 404 for missing, foreign or draft submissions;
                503 when grading failed.
        """
        submission = self._get_submitted(user, submission_id)
        if submission.report:
            return submission.report
        if submission.has_failed:
            raise service_unavailable(RESUBMIT_MESSAGE)

        if not self._claim(submission):
            self.db.refresh(submission)
            if submission.report is None and submission.has_failed:
                raise service_unavailable(RESUBMIT_MESSAGE)
            return submission.report

        logger.info(f"Grading submission {submission.id}")
        try:
            result = self.grade(submission)
            report = GrowthReport(
                submission_id=submission.id,
                score=result["score"],
                competency_level=result["competency_level"],
                rubric_breakdown=result["rubric_breakdown"],
                evaluation_details=result["evaluation_details"],
            )
            self.db.add(report)
            submission.grading_status = GradingStatus.graded
            self.db.commit()
        except IntegrityError:
            # A re-claiming grader already wrote the report
            self.db.rollback()
            self.db.refresh(submission)
            return submission.report
        except AIServiceError as e:
            logger.error(f"Grading failed for submission {submission_id}: {e}", exc_info=True)
            self._mark_failed(submission_id)
            raise service_unavailable("Grading failed. Please try again by resubmitting.")
        except Exception:
            logger.exception(f"Unexpected error grading submission {submission_id}")
            self._mark_failed(submission_id)
            raise

        self.db.refresh(report)
        logger.info(f"Graded submission {submission.id}: score={report.score}")
        return report

    def grading_status(self, user: User, submission_id: str) -> GradingStatus:
        return self._get_submitted(user, submission_id).grading_status

    def get_owned_report(self, user: User, report_id: str) -> GrowthReport:
        report = (
            self.db.query(GrowthReport)
            .join(Submission, GrowthReport.submission_id == Submission.id)
            .filter(GrowthReport.id == report_id, Submission.user_id == user.id)
            .first()
        )
        if not report:
            raise not_found("Report not found.")
        return report

    def create_follow_up(self, user: User, report_id: str) -> Assignment:
        """New assignment aimed at the weak areas a report flagged."""
        report = self.get_owned_report(user, report_id)
        rubric = self._rubric_for(report.submission.assignment)
        names = {c["id"]: c["name"] for c in rubric.gradable_criteria()} if rubric else {}

        topic = follow_up_topic(weak_areas(report.rubric_breakdown, names))
        try:
            generated = create_assignment_from_topic(self.ai, topic, [])
        except AIServiceError as e:
            logger.error(f"Follow-up generation failed for report {report_id}: {e}", exc_info=True)
            raise service_unavailable("Could not create a follow-up assignment. Please try again.")
        return AssignmentService(self.db, self.ai).save_generated(user, generated, topic)
