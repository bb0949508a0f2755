"""Shared enums for models and AI output."""
import enum


class CompetencyLevel(enum.Enum):
    novice = "novice"
    competent = "competent"
    expert = "expert"

    @classmethod
    def from_score(cls, score: float) -> "CompetencyLevel":
        if score >= 80:
            return cls.expert
        if score >= 60:
            return cls.competent
        return cls.novice
