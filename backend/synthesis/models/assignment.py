"""Assignment model."""

from datetime import datetime, UTC

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum, Integer, JSON
from sqlalchemy.orm import relationship
import uuid
import enum

from ..database import Base
from .rubric import LONG_FORM_RUBRIC_ID, CASE_STUDY_RUBRIC_ID


class AssignmentType(enum.Enum):
    """Assignment type enumeration."""
    instant_mcq = "instant_mcq"
    case_study = "case_study"
    long_form = "long_form"


class AssignmentStatus(enum.Enum):
    """Assignment status enumeration."""
    draft = "draft"
    in_progress = "in_progress"
    submitted = "submitted"


class AssignmentFormat(enum.Enum):
    """Format requested by the learner when generating an assignment."""
    multiple_choice = "multiple_choice"
    mixed_format = "mixed_format"
    short_answers = "short_answers"
    case_study = "case_study"
    project = "project"
    presentation = "presentation"
    essay = "essay"

    @property
    def assignment_type(self) -> AssignmentType:
        """The assignment type this format produces."""
        if self in (AssignmentFormat.multiple_choice, AssignmentFormat.mixed_format, AssignmentFormat.short_answers):
            return AssignmentType.instant_mcq
        if self == AssignmentFormat.case_study:
            return AssignmentType.case_study
        return AssignmentType.long_form

    @property
    def has_short_answers(self) -> bool:
        return self in (AssignmentFormat.mixed_format, AssignmentFormat.short_answers)


def rubric_id_for(assignment_type: AssignmentType):
    """Default rubric for an assignment type; quizzes have none."""
    if assignment_type == AssignmentType.case_study:
        return CASE_STUDY_RUBRIC_ID
    if assignment_type == AssignmentType.long_form:
        return LONG_FORM_RUBRIC_ID
    return None


class Assignment(Base):
    """Assignment model."""
    __tablename__ = "assignments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(SQLEnum(AssignmentType), nullable=False)
    title = Column(String(255))
    prompt = Column(Text)
    topic = Column(Text)
    format = Column(SQLEnum(AssignmentFormat))
    resource_ids = Column(JSON, default=list)
    status = Column(SQLEnum(AssignmentStatus), nullable=False, default=AssignmentStatus.draft)
    rubric_id = Column(String(64), ForeignKey("rubrics.id"))
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    # Relationships
    user = relationship("User")
    rubric = relationship("Rubric", back_populates="assignments")
    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Assignment(id={self.id}, title='{self.title}')>"

    @property
    def is_quiz(self) -> bool:
        return self.type == AssignmentType.instant_mcq

    def quiz_context(self) -> str:
        """Title, prompt and topic joined as the source text for quiz generation."""
        parts = [self.title or "", self.prompt or "", self.topic or ""]
        return ". ".join(p for p in parts if p)
