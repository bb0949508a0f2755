"""Learning architect schemas."""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ChatRequest(BaseModel):
    message: str = Field(..., max_length=10_000)
    user_context_summary: Optional[str] = Field(None, max_length=10_000)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message is required.")
        return v


class ChatResponse(BaseModel):
    response: str


class ConversationMessage(BaseModel):
    role: str
    content: Optional[str] = None


class GenerateRequest(BaseModel):
    conversation: List[ConversationMessage] = Field(..., min_length=1)
