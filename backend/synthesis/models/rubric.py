"""Rubric model."""

from datetime import datetime, UTC

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import relationship

from ..database import Base

LONG_FORM_RUBRIC_ID = "rubric-long-form"
CASE_STUDY_RUBRIC_ID = "rubric-case-study"

DEFAULT_RUBRICS = [
    {
        "id": LONG_FORM_RUBRIC_ID,
        "name": "Long-form rubric (essay, project, presentation)",
        "criteria": [
            {"id": "c1", "name": "Clarity", "description": "Clear and coherent writing"},
            {"id": "c2", "name": "Depth", "description": "Thorough analysis with supporting details"},
            {"id": "c3", "name": "Relevance", "description": "Content addresses the assignment prompt"},
            {"id": "c4", "name": "Structure", "description": "Logical organization"},
        ],
    },
    {
        "id": CASE_STUDY_RUBRIC_ID,
        "name": "Case study rubric",
        "criteria": [
            {"id": "c1", "name": "Problem identification", "description": "Identifies key issues"},
            {"id": "c2", "name": "Analysis", "description": "Insightful analysis"},
            {"id": "c3", "name": "Recommendations", "description": "Practical recommendations"},
            {"id": "c4", "name": "Evidence", "description": "Uses case evidence"},
        ],
    },
]

# Used when a long-form submission has no rubric attached
DEFAULT_CRITERIA = [
    {"id": "c1", "name": "Clarity"},
    {"id": "c2", "name": "Depth"},
    {"id": "c3", "name": "Relevance"},
]


class Rubric(Base):
    """Rubric model."""
    __tablename__ = "rubrics"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    criteria = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))

    # Relationships
    assignments = relationship("Assignment", back_populates="rubric")

    def __repr__(self):
        return f"<Rubric(id={self.id}, name='{self.name}')>"

    def gradable_criteria(self) -> list[dict]:
        """Criteria with both an id and a name, reduced to those two keys."""
        return [
            {"id": c["id"], "name": c["name"]}
            for c in (self.criteria or [])
            if isinstance(c, dict) and c.get("id") and c.get("name")
        ]

