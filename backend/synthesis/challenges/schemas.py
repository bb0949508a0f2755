"""Instant challenge schemas."""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class ChallengeGenerate(BaseModel):
    input: str = Field(..., max_length=50_000)

    @field_validator("input")
    @classmethod
    def long_enough(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Enter at least 10 characters to generate a challenge.")
        return v


class McqItem(BaseModel):
    id: str
    type: str = "mcq"
    question: str
    options: List[str]
    correct_index: int


class ChallengeItems(BaseModel):
    items: List[McqItem]


class ChallengeSubmit(BaseModel):
    """Answers as ``[{item_id, selected_index}]`` or ``{item_id: index}``, with the items from generate."""
    answers: Optional[Union[List[Dict[str, Any]], Dict[str, Any]]] = None
    items: List[Dict[str, Any]] = []


class ChallengeScore(BaseModel):
    score: int
    correct: int
    total: int
