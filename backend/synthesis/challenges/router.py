"""Anonymous instant challenge: paste text, get five questions, see a score."""
import logging

from fastapi import APIRouter, Depends

from ..ai import AIClient, AIServiceError, get_ai_client
from ..ai.generation import generate_mcqs
from ..errors import bad_request, service_unavailable
from ..quiz import answer_map, score_mcq_answers
from .schemas import ChallengeGenerate, ChallengeItems, ChallengeSubmit, ChallengeScore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/instant-challenge", tags=["Instant Challenge"])


@router.post("/generate", response_model=ChallengeItems)
def generate_challenge(data: ChallengeGenerate, ai: AIClient = Depends(get_ai_client)):
    """Five multiple-choice questions from pasted text. No sign-in required."""
    try:
        items = generate_mcqs(ai, data.input)
    except AIServiceError as e:
        logger.error(f"Instant challenge generation failed: {e}", exc_info=True)
        raise service_unavailable("Generation failed. Please try again.")
    return {"items": items}


@router.post("/submit", response_model=ChallengeScore)
async def submit_challenge(data: ChallengeSubmit):
    """Score answers against the answer key returned by generate."""
    answers = answer_map(data.answers)
    if not answers:
        raise bad_request("No answers submitted.")
    score, correct, total = score_mcq_answers(data.items, answers)
    return {"score": score, "correct": correct, "total": total}
