"""Resource library service."""
import logging
from typing import List, Sequence

from sqlalchemy.orm import Session

from ..ai import AIClient
from ..ai.generation import extract_topics
from ..auth.models import User
from ..errors import bad_request, not_found
from ..models.resource import Resource, ResourceType, UNCATEGORIZED
from .schemas import ResourceCreate, ResourceUpdate

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 100_000
TOPIC_SNIPPET_LENGTH = 4000


def _blank_to_none(value):
    if not isinstance(value, str):
        return None
    return value.strip() or None


class ResourceService:
    def __init__(self, db: Session, ai: AIClient = None):
        self.db = db
        self.ai = ai

    def list_resources(self, user: User, limit: int, offset: int) -> List[Resource]:
        """Own resources, newest first."""
        return (
            self.db.query(Resource)
            .filter(Resource.user_id == user.id)
            .order_by(Resource.created_at.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    def get_resource(self, user: User, resource_id: str) -> Resource:
        resource = self.db.query(Resource).filter(
            Resource.id == resource_id,
            Resource.user_id == user.id,
        ).first()
        if not resource:
            raise not_found("Resource not found.")
        return resource

    def get_owned_resources(self, user: User, resource_ids: Sequence[str]) -> List[Resource]:
        """Load resources by id, in the given order; any unknown or foreign id is a 404."""
        unique_ids = list(dict.fromkeys(resource_ids))
        if not unique_ids:
            return []
        rows = self.db.query(Resource).filter(
            Resource.id.in_(unique_ids),
            Resource.user_id == user.id,
        ).all()
        by_id = {r.id: r for r in rows}
        missing = [rid for rid in unique_ids if rid not in by_id]
        if missing:
            raise not_found(f"Resource not found: {missing[0]}")
        return [by_id[rid] for rid in unique_ids]

    def create_resource(self, user: User, data: ResourceCreate) -> Resource:
        """Save a resource; text resources get AI topic labels."""
        title = _blank_to_none(data.title)

        if data.type == ResourceType.text:
            content = data.content.strip()[:MAX_TEXT_LENGTH]
            topics = extract_topics(self.ai, content[:TOPIC_SNIPPET_LENGTH])
        else:
            content = data.content_ref.strip()
            # No text to read for hosted files
            topics = [UNCATEGORIZED]

        resource = Resource(
            user_id=user.id,
            type=data.type,
            title=title,
            content_ref=content,
            extracted_topics=topics,
            tags=[],
        )
        self.db.add(resource)
        self.db.commit()
        self.db.refresh(resource)
        logger.info(f"Created {data.type.value} resource {resource.id} for user {user.id}")
        return resource

    def update_resource(self, user: User, resource_id: str, data: ResourceUpdate) -> Resource:
        """Update learner context on a resource; only supplied fields change."""
        supplied = data.model_fields_set & {"title", "notes", "learning_category", "tags"}
        if not supplied:
            raise bad_request("Send at least one of: title, notes, learning_category, tags.")

        resource = self.get_resource(user, resource_id)
        if "title" in supplied:
            resource.title = _blank_to_none(data.title)
        if "notes" in supplied:
            resource.notes = _blank_to_none(data.notes)
        if "learning_category" in supplied:
            resource.learning_category = _blank_to_none(data.learning_category)
        if "tags" in supplied:
            resource.tags = [t.strip() for t in (data.tags or []) if t and t.strip()]

        self.db.commit()
        self.db.refresh(resource)
        return resource

    def recent_context_summary(self, user: User, limit: int = 10) -> str:
        """Short description of the learner's latest saves, for coaching prompts."""
        recent = self.list_resources(user, limit=limit, offset=0)
        return "; ".join(r.context_line() for r in recent)
