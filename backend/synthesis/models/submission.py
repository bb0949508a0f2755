"""Submission model."""

from datetime import datetime, UTC

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum, Integer
from sqlalchemy.orm import relationship
import uuid
import enum

from ..database import Base


class SubmissionState(enum.Enum):
    """Submission state enumeration."""
    draft = "draft"
    submitted = "submitted"


class GradingStatus(enum.Enum):
    """Grading status enumeration."""
    pending = "pending"
    grading = "grading"
    graded = "graded"
    failed = "failed"


class Submission(Base):
    """A learner's response to an assignment."""
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    assignment_id = Column(String(36), ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    state = Column(SQLEnum(SubmissionState), nullable=False, default=SubmissionState.draft)
    grading_status = Column(SQLEnum(GradingStatus), nullable=False, default=GradingStatus.pending)
    # Free text, or a JSON-encoded quiz payload
    body_text = Column(Text)
    file_ref = Column(String(500))
    submitted_at = Column(DateTime)
    grading_started_at = Column(DateTime)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    # Relationships
    assignment = relationship("Assignment", back_populates="submissions")
    report = relationship("GrowthReport", back_populates="submission", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Submission(id={self.id}, state={self.state.value if self.state else None})>"

    @property
    def is_draft(self):
        return self.state == SubmissionState.draft

    @property
    def has_failed(self):
        """Check if grading failed."""
        return self.grading_status == GradingStatus.failed

    @property
    def has_report(self):
        """Check if grading produced a report."""
        return self.grading_status == GradingStatus.graded
