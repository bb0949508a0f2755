"""Learning architect endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..ai import AIClient, get_ai_client
from ..assignments.schemas import AssignmentResponse
from ..auth.models import User
from ..auth.service import get_current_active_user
from ..database import get_db
from .schemas import ChatRequest, ChatResponse, GenerateRequest
from .service import LearningArchitectService

router = APIRouter(prefix="/learning-architect", tags=["Learning Architect"])


def get_architect_service(
    db: Session = Depends(get_db),
    ai: AIClient = Depends(get_ai_client),
) -> LearningArchitectService:
    return LearningArchitectService(db, ai)


@router.post("/chat", response_model=ChatResponse)
def chat(
    data: ChatRequest,
    current_user: User = Depends(get_current_active_user),
    service: LearningArchitectService = Depends(get_architect_service),
):
    """Suggest a quick quiz or a deeper case study based on the learner's saved resources."""
    return {"response": service.chat(current_user, data.message, data.user_context_summary)}


@router.post("/generate", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def generate(
    data: GenerateRequest,
    current_user: User = Depends(get_current_active_user),
    service: LearningArchitectService = Depends(get_architect_service),
):
    """Create an assignment from an exploration chat."""
    return service.generate_assignment(current_user, data.conversation)
