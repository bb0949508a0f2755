"""Resource model."""

from datetime import datetime, UTC

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum, Integer, JSON
from sqlalchemy.orm import relationship
import uuid
import enum

from ..database import Base

UNCATEGORIZED = "Uncategorized"


class ResourceType(enum.Enum):
    """Resource type enumeration."""
    text = "text"
    pdf = "pdf"
    image = "image"


class Resource(Base):
    """A saved learning artifact owned by one user."""
    __tablename__ = "resources"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(SQLEnum(ResourceType), nullable=False)
    title = Column(String(255))
    # Text body for text resources, hosted file URL for pdf/image
    content_ref = Column(Text, nullable=False)
    thumbnail_ref = Column(String(500))
    extracted_topics = Column(JSON, default=list)
    notes = Column(Text)
    learning_category = Column(String(255))
    tags = Column(JSON, default=list)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    user = relationship("User")

    def __repr__(self):
        return f"<Resource(id={self.id}, type={self.type.value if self.type else None}, title='{self.title}')>"

    @property
    def is_text(self) -> bool:
        return self.type == ResourceType.text

    @property
    def topic_labels(self) -> list[str]:
        """Extracted topics without the placeholder label."""
        return [t for t in (self.extracted_topics or []) if t != UNCATEGORIZED]

    def context_line(self) -> str:
        """One-line description used when prompting the AI about this resource."""
        label = self.title or self.type.value
        topics = ", ".join(self.topic_labels)
        return f"{label} ({topics})" if topics else label
