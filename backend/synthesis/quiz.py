"""
Quiz scoring.

Quiz submissions store their answers and the generated items (answer key
included) as JSON in ``Submission.body_text``::

    {
        "type": "instant_mcq_quiz",
        "mcq_answers": [{"item_id": "q1", "selected_index": 2}],
        "short_answers": {"q5": "free text"},
        "quiz_items": [{"id": "q1", "type": "mcq", "question": ..., "options": [...], "correct_index": 2}]
    }

Multiple-choice items are scored locally; short answers are handed to a
grader callable (the AI in production).
"""

import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .models.enums import CompetencyLevel

QUIZ_PAYLOAD_TYPE = "instant_mcq_quiz"
LABELS = ["A", "B", "C", "D"]

Answers = Union[List[Mapping[str, Any]], Mapping[str, Any], None]
ShortAnswerGrader = Callable[[List[Dict[str, str]]], List[Dict[str, Any]]]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_mcq_item(item: Any) -> bool:
    """True when ``item`` has a string id, options and an in-range answer key."""
    if not isinstance(item, Mapping) or not isinstance(item.get("id"), str):
        return False
    options = item.get("options")
    correct = item.get("correct_index")
    return (
        isinstance(options, list)
        and len(options) >= 2
        and all(isinstance(o, str) for o in options)
        and _is_int(correct)
        and 0 <= correct < len(options)
    )


def is_short_answer_item(item: Any) -> bool:
    return (
        isinstance(item, Mapping)
        and isinstance(item.get("id"), str)
        and item.get("type") == "short_answer"
    )


def option_label(index: int) -> str:
    return LABELS[index] if 0 <= index < len(LABELS) else str(index + 1)


def answer_map(answers: Answers) -> Dict[str, int]:
    """Normalize ``[{item_id, selected_index}]`` or ``{item_id: index}`` to a dict."""
    result: Dict[str, int] = {}
    if isinstance(answers, list):
        for a in answers:
            if isinstance(a, Mapping) and isinstance(a.get("item_id"), str) and _is_int(a.get("selected_index")):
                result[a["item_id"]] = a["selected_index"]
    elif isinstance(answers, Mapping):
        for item_id, index in answers.items():
            if _is_int(index):
                result[str(item_id)] = index
    return result


def score_mcq_answers(items: List[Mapping[str, Any]], answers: Mapping[str, int]) -> Tuple[int, int, int]:
    """
    Compare answers against the answer key.

    Returns:
        ``(score, correct, total)`` where score is a rounded percentage.
    """
    mcqs = [item for item in items if is_mcq_item(item)]
    correct = sum(1 for item in mcqs if answers.get(item.get("id")) == item["correct_index"])
    total = len(mcqs)
    score = round(correct / total * 100) if total else 0
    return score, correct, total


def parse_quiz_payload(body_text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Return the quiz payload stored in a submission body, or None for free text."""
    if not body_text:
        return None
    try:
        data = json.loads(body_text)
    except (TypeError, ValueError):
        return None
    if isinstance(data, dict) and data.get("type") == QUIZ_PAYLOAD_TYPE and isinstance(data.get("quiz_items"), list):
        return data
    return None


def grade_quiz_submission(payload: Mapping[str, Any], short_answer_grader: ShortAnswerGrader) -> Dict[str, Any]:
    """
    Score a stored quiz.

    The combined score weights the short-answer average by the number of
    short-answer items; unanswered short answers are not sent for grading.
    """
    items = [item for item in payload.get("quiz_items", []) if isinstance(item, Mapping)]
    answers = answer_map(payload.get("mcq_answers"))
    short_answers = payload.get("short_answers")
    if not isinstance(short_answers, Mapping):
        short_answers = {}

    mcq_feedback = []
    rubric_breakdown = []
    for position, item in enumerate(items, start=1):
        if not is_mcq_item(item):
            continue
        selected = answers.get(item.get("id"), -1)
        correct = selected == item["correct_index"]
        correct_text = item["options"][item["correct_index"]]
        mcq_feedback.append({
            "question": item.get("question", ""),
            "options": item["options"],
            "correct_index": item["correct_index"],
            "user_selected_index": selected,
            "correct": correct,
            "correct_answer_text": correct_text,
        })
        if not correct:
            rubric_breakdown.append({
                "criterion_id": f"q{position}",
                "score_or_feedback": f"Incorrect. Correct answer: {option_label(item['correct_index'])}. {correct_text}",
                "performance_note": f"Your answer: {option_label(selected) if selected >= 0 else 'none'}",
            })

    mcq_score, _, mcq_total = score_mcq_answers(items, answers)

    short_answer_items = [item for item in items if is_short_answer_item(item)]
    to_grade = []
    for item in short_answer_items:
        answer = short_answers.get(item.get("id"))
        if isinstance(answer, str) and answer.strip():
            to_grade.append({"question": item.get("question", ""), "user_answer": answer})
    short_answer_evaluations = short_answer_grader(to_grade) if to_grade else []

    if short_answer_evaluations:
        sa_avg = sum(e["score"] for e in short_answer_evaluations) / len(short_answer_evaluations)
        sa_count = len(short_answer_items)
        score = round((mcq_score * mcq_total + sa_avg * sa_count) / (mcq_total + sa_count))
    else:
        score = mcq_score

    return {
        "score": score,
        "competency_level": CompetencyLevel.from_score(score),
        "rubric_breakdown": rubric_breakdown,
        "evaluation_details": {
            "mcq_feedback": mcq_feedback,
            "short_answer_evaluations": short_answer_evaluations,
        },
    }
