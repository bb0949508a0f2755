"""Growth report model."""

from datetime import datetime, UTC

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SQLEnum, JSON, Float
from sqlalchemy.orm import relationship
import uuid

from ..database import Base
from .enums import CompetencyLevel


class GrowthReport(Base):
    """Grading result for one submitted submission."""
    __tablename__ = "growth_reports"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    submission_id = Column(String(36), ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, unique=True)
    score = Column(Float, nullable=False)
    competency_level = Column(SQLEnum(CompetencyLevel), nullable=False)
    rubric_breakdown = Column(JSON, nullable=False, default=list)
    evaluation_details = Column(JSON)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))

    submission = relationship("Submission", back_populates="report")

    def __repr__(self):
        return f"<GrowthReport(id={self.id}, score={self.score})>"
