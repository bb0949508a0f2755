"""Assignment generation and workbench support."""
import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..ai import AIClient, AIServiceError
from ..ai.generation import GeneratedAssignment, create_assignment_from_topic, generate_quiz_items
from ..ai.grading import grade_short_answers
from ..auth.models import User
from ..errors import bad_request, not_found, service_unavailable
from ..models.assignment import (
    Assignment, AssignmentFormat, AssignmentStatus, rubric_id_for,
)
from ..models.resource import Resource
from ..models.rubric import Rubric
from ..resources.service import ResourceService

logger = logging.getLogger(__name__)

MIN_QUIZ_CONTEXT_LENGTH = 10
MAX_SHORT_ANSWERS = 15
QUIZ_RESOURCE_TEXT_LIMIT = 3000


class AssignmentService:
    def __init__(self, db: Session, ai: AIClient = None):
        self.db = db
        self.ai = ai

    def list_assignments(
        self, user: User, limit: int, offset: int, status_filter: Optional[AssignmentStatus] = None
    ) -> List[Assignment]:
        """Own assignments, newest first."""
        query = self.db.query(Assignment).filter(Assignment.user_id == user.id)
        if status_filter is not None:
            query = query.filter(Assignment.status == status_filter)
        return query.order_by(Assignment.created_at.desc()).limit(limit).offset(offset).all()

    def get_assignment(self, user: User, assignment_id: str) -> Assignment:
        assignment = self.db.query(Assignment).filter(
            Assignment.id == assignment_id,
            Assignment.user_id == user.id,
        ).first()
        if not assignment:
            raise not_found("Assignment not found.")
        return assignment

    def save_generated(
        self,
        user: User,
        generated: GeneratedAssignment,
        topic: Optional[str] = None,
        resource_ids: Sequence[str] = (),
        fmt: Optional[AssignmentFormat] = None,
    ) -> Assignment:
        """Persist an AI-drafted assignment as a new draft."""
        assignment = Assignment(
            user_id=user.id,
            type=generated.type,
            title=generated.title,
            prompt=generated.prompt,
            topic=topic,
            format=fmt,
            resource_ids=list(resource_ids),
            status=AssignmentStatus.draft,
            rubric_id=rubric_id_for(generated.type),
        )
        self.db.add(assignment)
        self.db.commit()
        self.db.refresh(assignment)
        logger.info(f"Created {generated.type.value} assignment {assignment.id} for user {user.id}")
        return assignment

    def create_from_topic(
        self,
        user: User,
        topic: str,
        resource_ids: Sequence[str] = (),
        fmt: Optional[AssignmentFormat] = None,
    ) -> Assignment:
        """Generate an assignment for a topic, grounded in the linked resources when given."""
        resources = ResourceService(self.db).get_owned_resources(user, resource_ids)
        try:
            generated = create_assignment_from_topic(
                self.ai, topic, [r.context_line() for r in resources], fmt
            )
        except AIServiceError as e:
            logger.error(f"Assignment generation failed: {e}", exc_info=True)
            raise service_unavailable("Assignment generation is temporarily unavailable. Please try again.")
        return self.save_generated(user, generated, topic, [r.id for r in resources], fmt)

    def get_rubric(self, user: User, assignment_id: str) -> Optional[Rubric]:
        assignment = self.get_assignment(user, assignment_id)
        rubric_id = assignment.rubric_id or rubric_id_for(assignment.type)
        if not rubric_id:
            return None
        return self.db.get(Rubric, rubric_id)

    def _linked_text(self, assignment: Assignment) -> str:
        if not assignment.resource_ids:
            return ""
        resources = self.db.query(Resource).filter(
            Resource.id.in_(assignment.resource_ids),
            Resource.user_id == assignment.user_id,
        ).all()
        return "\n\n".join(r.content_ref[:QUIZ_RESOURCE_TEXT_LIMIT] for r in resources if r.is_text)

    def generate_quiz(self, user: User, assignment_id: str) -> List[Dict[str, Any]]:
        """Generate quiz items for an instant_mcq assignment."""
        assignment = self.get_assignment(user, assignment_id)
        if not assignment.is_quiz:
            raise bad_request("This assignment is not a quiz. Quiz generation is only for instant_mcq assignments.")

        context = assignment.quiz_context() or "General knowledge quiz"
        if len(context) < MIN_QUIZ_CONTEXT_LENGTH:
            raise bad_request("Assignment needs a title or instructions to generate questions.")
        linked = self._linked_text(assignment)
        if linked:
            context = f"{context}\n\n{linked}"

        try:
            return generate_quiz_items(self.ai, context, assignment.format, assignment.topic)
        except AIServiceError as e:
            logger.error(f"Quiz generation failed for assignment {assignment.id}: {e}", exc_info=True)
            raise service_unavailable("We couldn't generate the quiz right now. Please try again in a moment.")

    def evaluate_short_answers(self, user: User, assignment_id: str, items: List[Dict[str, str]]) -> List[Dict[str, Any]]:
        """Inline feedback on short answers before the quiz is submitted."""
        self.get_assignment(user, assignment_id)
        try:
            return grade_short_answers(self.ai, items[:MAX_SHORT_ANSWERS])
        except AIServiceError as e:
            logger.error(f"Short answer evaluation failed: {e}", exc_info=True)
            raise service_unavailable(
                "Short answer evaluation is temporarily unavailable. Please try again in a moment."
            )
