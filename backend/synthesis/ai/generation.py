"""
Content generation: quizzes, topic labels, assignments and coaching replies.

Every function takes an :class:`~synthesis.ai.client.AIClient` and reshapes
the model's JSON into the structures the API returns.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel

from ..models.assignment import AssignmentFormat, AssignmentType
from ..models.resource import UNCATEGORIZED
from . import AIResponseError, AIServiceError
from .client import AIClient

logger = logging.getLogger(__name__)

QUIZ_SIZE = 5
MCQ_SOURCE_LIMIT = 8000
TOPIC_SOURCE_LIMIT = 4000
MAX_TOPICS = 5

DEFAULT_SUGGESTION = "Try a quick quiz to test what you know, or a case study to go deeper."


class GeneratedAssignment(BaseModel):
    title: str
    prompt: str
    type: AssignmentType


def normalize_mcq_item(raw: Any) -> Optional[Dict[str, Any]]:
    """Return a clean MCQ item or None if the raw item is unusable."""
    if not isinstance(raw, dict):
        return None
    question = raw.get("question")
    options = raw.get("options")
    correct = raw.get("correct_index", raw.get("correctIndex"))
    if not isinstance(question, str) or not question.strip():
        return None
    if not isinstance(options, list) or len(options) < 2:
        return None
    options = [str(o) for o in options]
    try:
        correct = int(correct)
    except (TypeError, ValueError):
        return None
    if not 0 <= correct < len(options):
        return None
    return {"type": "mcq", "question": question.strip(), "options": options, "correct_index": correct}


def _normalize_quiz_item(raw: Any) -> Optional[Dict[str, Any]]:
    if isinstance(raw, dict) and raw.get("type") == "short_answer":
        question = raw.get("question")
        if isinstance(question, str) and question.strip():
            return {"type": "short_answer", "question": question.strip()}
        return None
    return normalize_mcq_item(raw)


def _raw_items(data: Dict[str, Any]) -> List[Any]:
    items = data.get("items")
    if items is None:
        items = data.get("questions")
    return items if isinstance(items, list) else []


def _number(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # Positional ids keep answer keys unique whatever the model sent
    return [{"id": f"q{i + 1}", **item} for i, item in enumerate(items)]


def generate_mcqs(client: AIClient, text: str) -> List[Dict[str, Any]]:
    """
    Generate exactly five multiple-choice questions from ``text``.

    Raises:
        AIResponseError: If the model returns fewer than five usable items.
    """
    data = client.complete_json(
        system=(
            "You are a quiz generator. Given content, output exactly 5 multiple-choice questions. "
            "Return a JSON object {\"items\": [...]} where each item is "
            "{\"question\": string, \"options\": [4 strings], \"correct_index\": 0-3}."
        ),
        user=f"Generate 5 MCQs from this content:\n\n{text[:MCQ_SOURCE_LIMIT]}",
    )
    items = [item for item in (normalize_mcq_item(r) for r in _raw_items(data)) if item]
    if len(items) < QUIZ_SIZE:
        raise AIResponseError(f"AI returned {len(items)} usable MCQ items, expected {QUIZ_SIZE}")
    return _number(items[:QUIZ_SIZE])


def generate_quiz_items(
    client: AIClient,
    text: str,
    fmt: Optional[AssignmentFormat] = None,
    topic: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Generate the quiz for an ``instant_mcq`` assignment.

    Mixed formats add one or two short-answer items to the multiple-choice
    questions. Short-answer items carry no answer key; they are graded by the
    model when the quiz is submitted.
    """
    if fmt is not None and fmt.has_short_answers:
        shape = (
            f"Output {QUIZ_SIZE} items: 3 or 4 multiple-choice items and 1 or 2 short-answer items. "
            "Multiple-choice item: {\"type\": \"mcq\", \"question\": string, \"options\": [4 strings], "
            "\"correct_index\": 0-3}. Short-answer item: {\"type\": \"short_answer\", \"question\": string}."
        )
    else:
        shape = (
            f"Output {QUIZ_SIZE} multiple-choice items: {{\"type\": \"mcq\", \"question\": string, "
            "\"options\": [4 strings], \"correct_index\": 0-3}."
        )
    user = f"Content:\n\n{text[:MCQ_SOURCE_LIMIT]}"
    if topic:
        user = f"Topic: {topic}\n\n{user}"

    data = client.complete_json(
        system="You are a quiz generator. " + shape + " Return a JSON object {\"items\": [...]}.",
        user=user,
    )
    items = [item for item in (_normalize_quiz_item(r) for r in _raw_items(data)) if item]
    if not items:
        raise AIResponseError("AI returned no usable quiz items")
    return _number(items[:QUIZ_SIZE])


def extract_topics(client: AIClient, text: str) -> List[str]:
    """Extract 1-5 short topic labels; never raises."""
    if not text or not text.strip():
        return [UNCATEGORIZED]

    try:
        data = client.complete_json(
            system=(
                "You extract 1-5 short topic labels from the given content. "
                "Return a JSON object with key 'topics' (array of strings). "
                "Example: {\"topics\": [\"DevOps\", \"GTM\"]}"
            ),
            user=text[:TOPIC_SOURCE_LIMIT],
        )
    except AIServiceError as e:
        logger.warning(f"Topic extraction failed, using fallback: {e}")
        return [UNCATEGORIZED]

    topics = data.get("topics")
    if isinstance(topics, list):
        cleaned = [t.strip() for t in topics if isinstance(t, str) and t.strip()]
        if cleaned:
            return cleaned[:MAX_TOPICS]
    return [UNCATEGORIZED]


def learning_architect_suggestion(client: AIClient, user_context_summary: str, message: str) -> str:
    """Suggest a quick quiz or a deeper case study for the learner."""
    user = message
    if user_context_summary:
        user = f"User's recent topics/resources: {user_context_summary}\n\nUser says: {message}"
    try:
        return client.complete_text(
            system=(
                "You are a learning coach. Based on the user's saved resources and message, "
                "suggest whether they should do a quick quiz or a deeper case study. Be brief and direct."
            ),
            user=user,
        )
    except AIResponseError:
        return DEFAULT_SUGGESTION


def create_assignment_from_topic(
    client: AIClient,
    topic: str,
    resource_context: Iterable[str] = (),
    fmt: Optional[AssignmentFormat] = None,
) -> GeneratedAssignment:
    """
    Draft an assignment for ``topic``.

    Linked resources are described by ``resource_context`` lines; with none
    the model relies on general knowledge. A requested format fixes the
    assignment type.
    """
    forced_type = fmt.assignment_type if fmt is not None else None
    if forced_type is not None:
        type_rule = f"type must be \"{forced_type.value}\" (requested format: {fmt.value})."
    else:
        type_rule = "type is one of instant_mcq, case_study or long_form."

    user = f"Topic: {topic}"
    context = [line for line in resource_context if line]
    if context:
        user += "\n\nBase the assignment on these saved resources:\n" + "\n".join(f"- {c}" for c in context)

    data = client.complete_json(
        system=(
            "Given a topic, suggest a short assignment: title, prompt (instructions for the learner) and type. "
            + type_rule
            + " Return JSON: {\"title\": string, \"prompt\": string, \"type\": string}."
        ),
        user=user,
    )

    title = data.get("title")
    prompt = data.get("prompt")
    if forced_type is not None:
        assignment_type = forced_type
    else:
        try:
            assignment_type = AssignmentType(data.get("type"))
        except ValueError:
            assignment_type = AssignmentType.long_form

    return GeneratedAssignment(
        title=title.strip() if isinstance(title, str) and title.strip() else f"Assignment: {topic}",
        prompt=(
            prompt.strip() if isinstance(prompt, str) and prompt.strip()
            else f"Reflect on and apply your knowledge of: {topic}."
        ),
        type=assignment_type,
    )


def topic_from_conversation(client: AIClient, conversation: List[Dict[str, str]]) -> str:
    """Summarize an exploration chat into one assignment topic."""
    transcript = "\n".join(f"{m['role']}: {m['content']}" for m in conversation)
    data = client.complete_json(
        system=(
            "You read a conversation between a learner and a learning coach and name the single topic the "
            "learner wants to practice. Return JSON: {\"topic\": string} with a short, specific topic."
        ),
        user=transcript[:TOPIC_SOURCE_LIMIT],
    )
    topic = data.get("topic")
    if isinstance(topic, str) and topic.strip():
        return topic.strip()

    user_messages = [m["content"] for m in conversation if m["role"] == "user" and m["content"]]
    fallback = user_messages[-1] if user_messages else conversation[-1]["content"]
    logger.info("Conversation summary empty, falling back to the last user message")
    return fallback[:200]
