"""Shared schema bases."""

from pydantic import BaseModel, ConfigDict


class ORMResponse(BaseModel):
    """Response model readable straight from ORM rows and core records."""
    model_config = ConfigDict(from_attributes=True)
