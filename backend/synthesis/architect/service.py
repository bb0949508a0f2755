"""Coaching chat and turning an exploration chat into an assignment."""
import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from ..ai import AIClient, AIServiceError
from ..ai.generation import (
    create_assignment_from_topic, learning_architect_suggestion, topic_from_conversation,
)
from ..assignments.service import AssignmentService
from ..auth.models import User
from ..errors import bad_request, service_unavailable
from ..models.assignment import Assignment
from ..resources.service import ResourceService
from .schemas import ConversationMessage

logger = logging.getLogger(__name__)

CONTEXT_RESOURCE_COUNT = 10
CHAT_ROLES = ("user", "assistant")


def clean_conversation(messages: List[ConversationMessage]) -> List[Dict[str, str]]:
    """Keep user/assistant turns that have content."""
    conversation = []
    for m in messages:
        if m.role in CHAT_ROLES and m.content and m.content.strip():
            conversation.append({"role": m.role, "content": m.content.strip()})
    return conversation


class LearningArchitectService:
    def __init__(self, db: Session, ai: AIClient):
        self.db = db
        self.ai = ai

    def chat(self, user: User, message: str, user_context_summary: str = None) -> str:
        summary = (user_context_summary or "").strip()
        if not summary:
            summary = ResourceService(self.db).recent_context_summary(user, limit=CONTEXT_RESOURCE_COUNT)
        try:
            return learning_architect_suggestion(self.ai, summary, message)
        except AIServiceError as e:
            logger.error(f"Learning architect chat failed: {e}", exc_info=True)
            raise service_unavailable("Learning Architect is temporarily unavailable. Please try again.")

    def generate_assignment(self, user: User, messages: List[ConversationMessage]) -> Assignment:
        conversation = clean_conversation(messages)
        if not conversation:
            raise bad_request("conversation must contain at least one message with role and content.")

        try:
            topic = topic_from_conversation(self.ai, conversation)
        except AIServiceError as e:
            logger.error(f"Conversation summary failed: {e}", exc_info=True)
            raise service_unavailable("Could not summarize conversation. Please try again.")

        try:
            generated = create_assignment_from_topic(self.ai, topic, [])
        except AIServiceError as e:
            logger.error(f"Assignment generation failed: {e}", exc_info=True)
            raise service_unavailable("Assignment generation is temporarily unavailable. Please try again.")

        return AssignmentService(self.db, self.ai).save_generated(user, generated, topic)
