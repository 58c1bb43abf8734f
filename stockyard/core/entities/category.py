"""Stock category entity."""

from datetime import datetime

from pydantic import BaseModel, Field


class Category(BaseModel):
    """Catalog grouping such as PPE or IT; categories may nest under a parent."""

    id: int | None = None
    name: str
    parent_id: int | None = None
    description: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
