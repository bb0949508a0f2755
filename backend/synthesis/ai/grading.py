"""Rubric grading and short-answer evaluation."""

import json
import logging
from typing import Any, Dict, List

from ..models.enums import CompetencyLevel
from . import AIResponseError
from .client import AIClient

logger = logging.getLogger(__name__)

SUBMISSION_LIMIT = 6000
DEFAULT_SHORT_ANSWER_SCORE = 70


def _pick(row: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return default


def clamp_score(value: Any, default: float = 0.0) -> float:
    """Coerce to a 0..100 score."""
    try:
        score = float(value)
    except (TypeError, ValueError):
        return default
    if score != score:  # NaN
        return default
    return round(min(100.0, max(0.0, score)), 1)


def _normalize_breakdown(raw: Any, criteria: List[Dict[str, str]]) -> List[Dict[str, str]]:
    rows = []
    if isinstance(raw, list):
        for item in raw:
            if not isinstance(item, dict):
                continue
            rows.append({
                "criterion_id": str(_pick(item, "criterion_id", "criterionId", default="")),
                "score_or_feedback": str(_pick(item, "score_or_feedback", "scoreOrFeedback", default="")),
                "performance_note": str(_pick(item, "performance_note", "performanceNote", default="")),
            })
    if rows:
        return rows
    return [
        {"criterion_id": c["id"], "score_or_feedback": "No feedback", "performance_note": "Not assessed"}
        for c in criteria
    ]


def grade_submission(
    client: AIClient,
    prompt: str,
    submission_text: str,
    rubric_criteria: List[Dict[str, str]],
) -> Dict[str, Any]:
    """
    Grade a written submission against the assignment prompt and rubric.

    Returns:
        Dict with ``score`` (0-100), ``competency_level`` (:class:`CompetencyLevel`)
        and ``rubric_breakdown`` (one row per criterion).
    """
    data = client.complete_json(
        system=(
            "You grade a learner's submission against the assignment prompt and rubric. "
            "Return JSON: {\"score\": 0-100, \"competency_level\": \"novice\"|\"competent\"|\"expert\", "
            "\"rubric_breakdown\": [{\"criterion_id\": string, \"score_or_feedback\": string, "
            "\"performance_note\": string}]}. Include one breakdown row per rubric criterion. "
            "Say what to improve in score_or_feedback and name weak areas or gaps in performance_note."
        ),
        user=(
            f"Assignment prompt:\n{prompt}\n\n"
            f"Rubric criteria: {json.dumps(rubric_criteria)}\n\n"
            f"Submission:\n{submission_text[:SUBMISSION_LIMIT]}"
        ),
    )

    try:
        level = CompetencyLevel(_pick(data, "competency_level", "competencyLevel"))
    except ValueError:
        level = CompetencyLevel.novice

    return {
        "score": clamp_score(data.get("score")),
        "competency_level": level,
        "rubric_breakdown": _normalize_breakdown(_pick(data, "rubric_breakdown", "rubricBreakdown"), rubric_criteria),
    }


def grade_short_answers(client: AIClient, items: List[Dict[str, str]]) -> List[Dict[str, Any]]:
    """
    Evaluate free-text answers.

    Args:
        items: ``[{"question": ..., "user_answer": ...}]``.

    Returns:
        One ``{question, user_answer, evaluation, score}`` per input item, in order.
    """
    if not items:
        return []

    numbered = [
        {"index": i, "question": item["question"], "answer": item["user_answer"]}
        for i, item in enumerate(items)
    ]
    data = client.complete_json(
        system=(
            "You evaluate short written answers to quiz questions. For each answer give brief feedback and a "
            "score from 0 to 100. Return JSON: {\"evaluations\": [{\"index\": number, \"evaluation\": string, "
            "\"score\": number}]} with one entry per answer."
        ),
        user=json.dumps(numbered, ensure_ascii=False),
    )

    evaluations = data.get("evaluations")
    if not isinstance(evaluations, list):
        raise AIResponseError("AI returned no evaluations list")

    by_index: Dict[int, Dict[str, Any]] = {}
    for position, row in enumerate(evaluations):
        if not isinstance(row, dict):
            continue
        try:
            index = int(row.get("index", position))
        except (TypeError, ValueError):
            index = position
        by_index.setdefault(index, row)

    results = []
    for i, item in enumerate(items):
        row = by_index.get(i, {})
        evaluation = row.get("evaluation")
        results.append({
            "question": item["question"],
            "user_answer": item["user_answer"],
            "evaluation": evaluation if isinstance(evaluation, str) and evaluation else "No evaluation returned.",
            "score": clamp_score(row.get("score"), default=DEFAULT_SHORT_ANSWER_SCORE),
        })
    return results
