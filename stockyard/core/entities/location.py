"""Stock location entity."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class LocationType(str, Enum):
    WAREHOUSE = "warehouse"
    SITE = "site"
    VEHICLE = "vehicle"
    YARD = "yard"
    STORAGE = "storage"
    DEPOT = "depot"


class Location(BaseModel):
    """A place where stock is held: a warehouse, a site, a van."""

    id: int | None = None
    name: str
    type: LocationType = LocationType.WAREHOUSE
    address: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
