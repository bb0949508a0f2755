"""Request/response schemas for resources."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.resource import ResourceType


class ResourceCreate(BaseModel):
    type: ResourceType
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    content_ref: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_payload_for_type(self):
        if self.type == ResourceType.text:
            if not self.content or not self.content.strip():
                raise ValueError("Content cannot be empty for a text resource.")
        elif not self.content_ref or not self.content_ref.strip():
            raise ValueError("content_ref (the hosted file URL) is required for pdf and image resources.")
        return self


class ResourceUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    learning_category: Optional[str] = Field(None, max_length=255)
    tags: Optional[List[str]] = None


class ResourceResponse(BaseModel):
    id: str
    type: ResourceType
    title: Optional[str] = None
    content_ref: str
    thumbnail_ref: Optional[str] = None
    extracted_topics: List[str] = []
    notes: Optional[str] = None
    learning_category: Optional[str] = None
    tags: List[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("extracted_topics", "tags", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []


class ResourceList(BaseModel):
    items: List[ResourceResponse]
